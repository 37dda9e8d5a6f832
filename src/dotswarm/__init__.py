"""
dotswarm - animated dot-grid transitions between successive camera snapshots
"""

__version__ = "1.0.0"

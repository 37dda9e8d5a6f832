"""
Hardware layer - capture devices and rendering surfaces
"""

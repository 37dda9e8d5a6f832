from .rendering_surface import RenderingSurface
from .recording_surface import RecordingSurface
from .terminal_surface import TerminalSurface

__all__ = ['RenderingSurface', 'RecordingSurface', 'TerminalSurface']

from .capture_device import CaptureDevice
from .synthetic_camera import SyntheticCamera

__all__ = ['CaptureDevice', 'SyntheticCamera']

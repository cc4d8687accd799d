"""
Core module - shared contracts and configuration.
"""

from .contracts import (
    ViewKind,
    VIEW_ORDER,
    GrabResult,
    FrameView,
    RecorderStats,
)
from .config import CameraSettings, RecorderConfig, load_config

__all__ = [
    'ViewKind',
    'VIEW_ORDER',
    'GrabResult',
    'FrameView',
    'RecorderStats',
    'CameraSettings',
    'RecorderConfig',
    'load_config',
]

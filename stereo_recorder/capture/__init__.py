"""
Capture Module.

Responsibilities:
- ZED session lifetime (open, grab, close)
- Shared left/right/depth buffers with zero-copy views
"""

from .session import ZedSession
from .frame_views import FrameBuffers

"""
Output Module.

Responsibilities:
- Live preview windows
- Numbered image files per view
"""

from .image_writer import OutputLayout, FrameWriter
from .preview import PreviewWindows

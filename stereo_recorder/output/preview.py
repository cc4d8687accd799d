"""
Live preview windows (OpenCV highgui).
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional
import cv2
from loguru import logger

from stereo_recorder.core.config import DEFAULT_WINDOW_NAMES
from stereo_recorder.core.contracts import FrameView, ViewKind, VIEW_ORDER


class PreviewWindows:
    """Shows the left, right and depth views in separate windows."""

    def __init__(
        self,
        enabled: bool = True,
        window_names: Optional[Dict[str, str]] = None,
    ):
        self.enabled = enabled
        names = dict(DEFAULT_WINDOW_NAMES)
        names.update(window_names or {})
        self.window_names = {kind: names[kind.value] for kind in VIEW_ORDER}
        self._shown = False

        if not enabled:
            logger.info("Preview disabled (headless)")

    def show(self, views: Mapping[ViewKind, FrameView]):
        """Display each view. The arrays are passed as-is, without copying."""
        if not self.enabled:
            return

        for kind in VIEW_ORDER:
            cv2.imshow(self.window_names[kind], views[kind].data)
        self._shown = True

    def poll_key(self, timeout_ms: int = 10) -> int:
        """
        Pump window events and wait for a key.

        Returns:
            Key code (low byte), or -1 if none was pressed
        """
        if not self.enabled:
            return -1

        key = cv2.waitKey(timeout_ms)
        return key & 0xFF if key >= 0 else -1

    def close(self):
        if self.enabled and self._shown:
            cv2.destroyAllWindows()
            self._shown = False

"""
Image persistence for captured frames.

Layout:
    <root>/left/<index>.png
    <root>/right/<index>.png
    <root>/depth/<index>.png
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping
import cv2
from loguru import logger

from stereo_recorder.core.contracts import FrameView, ViewKind, VIEW_ORDER


class OutputLayout:
    """Fixed directory layout for saved frames."""

    def __init__(self, root: str = "./images", extension: str = ".png"):
        self.root = Path(root)
        self.extension = extension
        self.dirs: Dict[ViewKind, Path] = {kind: self.root / kind.value for kind in VIEW_ORDER}

    def create(self):
        """Create the root and per-view directories. Existing ones are kept."""
        self.root.mkdir(parents=True, exist_ok=True)
        for path in self.dirs.values():
            path.mkdir(exist_ok=True)
        logger.info(f"Saving frames under {self.root}")

    def path_for(self, kind: ViewKind, index: int) -> Path:
        return self.dirs[kind] / f"{index}{self.extension}"

    def existing_frame_count(self) -> int:
        """Largest number of frame files already present in any view directory."""
        counts = [
            len(list(path.glob(f"*{self.extension}")))
            for path in self.dirs.values()
            if path.is_dir()
        ]
        return max(counts, default=0)


class FrameWriter:
    """Encodes frame views to disk, one file per view per frame."""

    def __init__(self, layout: OutputLayout):
        self.layout = layout
        self.files_written = 0
        self.write_failures = 0

    def write(self, views: Mapping[ViewKind, FrameView], index: int) -> bool:
        """
        Write every view with the same index suffix.

        Args:
            views: Frame views keyed by kind
            index: Frame counter value

        Returns:
            True if all files were written
        """
        ok = True
        for kind in VIEW_ORDER:
            view = views[kind]
            path = self.layout.path_for(kind, index)

            if cv2.imwrite(str(path), view.data):
                self.files_written += 1
            else:
                self.write_failures += 1
                ok = False
                logger.warning(f"Failed to write {path}")

        return ok

"""
Frame Buffers shared between the ZED SDK and OpenCV.

Supports:
- Fixed-size left/right/depth matrices allocated once per session
- Zero-copy numpy views over SDK memory for display and encoding
"""

from __future__ import annotations

from typing import Dict, Tuple
import numpy as np
from loguru import logger

from stereo_recorder.core.contracts import FrameView, ViewKind, VIEW_ORDER


# SDK matrix type -> (numpy dtype, channels)
MAT_TYPE_TO_NUMPY: Dict[str, Tuple[type, int]] = {
    "F32_C1": (np.float32, 1),
    "F32_C2": (np.float32, 2),
    "F32_C3": (np.float32, 3),
    "F32_C4": (np.float32, 4),
    "U8_C1": (np.uint8, 1),
    "U8_C2": (np.uint8, 2),
    "U8_C3": (np.uint8, 3),
    "U8_C4": (np.uint8, 4),
}


def mat_type_name(mat_type) -> str:
    """Normalise an SDK MAT_TYPE member (or its name) to a plain name."""
    return getattr(mat_type, "name", str(mat_type)).split(".")[-1]


def numpy_layout(mat_type) -> Tuple[type, int]:
    """Look up the numpy dtype and channel count for a matrix type."""
    name = mat_type_name(mat_type)
    if name not in MAT_TYPE_TO_NUMPY:
        raise ValueError(f"Unsupported matrix type '{name}'")
    return MAT_TYPE_TO_NUMPY[name]


def view_over(kind: ViewKind, mat, memory_type) -> FrameView:
    """
    Wrap an SDK matrix in a FrameView without copying.

    The returned array shares memory with ``mat``; its contents change
    every time the SDK retrieves into that matrix.
    """
    name = mat_type_name(mat.get_data_type())
    dtype, channels = numpy_layout(name)

    data = mat.get_data(memory_type, deep_copy=False)
    if data.dtype != dtype:
        raise ValueError(f"{kind.value}: buffer dtype {data.dtype} does not match {name}")
    if channels > 1 and (data.ndim != 3 or data.shape[2] != channels):
        raise ValueError(f"{kind.value}: expected {channels} channels, got shape {data.shape}")

    return FrameView(
        kind=kind,
        data=data,
        width=int(mat.get_width()),
        height=int(mat.get_height()),
        step_bytes=int(mat.get_step_bytes()),
        mat_type=name,
    )


class FrameBuffers:
    """
    The three per-frame image buffers of one session.

    Matrices and their views are created once; every retrieve fills the
    same memory, so the views always show the latest frame.
    """

    def __init__(self, session):
        """
        Allocate buffers at the session resolution.

        Args:
            session: An opened ZedSession
        """
        if not session.is_open:
            raise RuntimeError("FrameBuffers require an opened session")

        self.session = session
        self.width, self.height = session.resolution

        self._mats = {kind: session.create_image_buffer() for kind in VIEW_ORDER}
        self._views = {
            kind: view_over(kind, mat, session.sdk.MEM.CPU)
            for kind, mat in self._mats.items()
        }

        logger.debug(
            f"Frame buffers allocated: {len(self._mats)} x {self.width}x{self.height} "
            f"{self._views[ViewKind.LEFT].mat_type}"
        )

    def retrieve_all(self) -> Dict[ViewKind, FrameView]:
        """
        Retrieve left, right and depth into the existing buffers.

        Returns:
            The same FrameView objects on every call, now holding the new frame
        """
        for kind in VIEW_ORDER:
            mat = self._mats[kind]
            self.session.retrieve(mat, kind)

            if mat.get_width() != self.width or mat.get_height() != self.height:
                # The SDK reallocated; the view no longer aliases this buffer
                logger.warning(f"{kind.value} buffer resized to {mat.get_width()}x{mat.get_height()}")
                self._views[kind] = view_over(kind, mat, self.session.sdk.MEM.CPU)

        return self._views

    @property
    def views(self) -> Dict[ViewKind, FrameView]:
        return self._views

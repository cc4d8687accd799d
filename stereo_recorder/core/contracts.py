"""
Core data contracts for the Stereo Frame Recorder.

Shared by the capture, output and pipeline stages:
- View identifiers (left / right / depth)
- Grab outcomes
- Non-owning frame views over SDK memory
- Run statistics
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Tuple
import numpy as np
from numpy.typing import NDArray


# ============================================================
# ENUMERATIONS
# ============================================================

class ViewKind(Enum):
    """Image outputs retrieved for every frame."""
    LEFT = "left"
    RIGHT = "right"
    DEPTH = "depth"

    @property
    def sdk_name(self) -> str:
        """Member name of the matching ``sl.VIEW`` entry."""
        return self.name


# Retrieval, display and write order
VIEW_ORDER: Tuple[ViewKind, ...] = (ViewKind.LEFT, ViewKind.RIGHT, ViewKind.DEPTH)


class GrabResult(Enum):
    """Outcome of a blocking grab."""
    SUCCESS = auto()
    FAILED = auto()
    END_OF_RECORDING = auto()


# ============================================================
# CORE DATA STRUCTURES
# ============================================================

@dataclass
class FrameView:
    """
    Non-owning view over one SDK image buffer.

    ``data`` aliases memory owned by the session's matrix; it is
    never copied, so it always holds the most recently retrieved frame.
    """
    kind: ViewKind
    data: NDArray
    width: int
    height: int
    step_bytes: int
    mat_type: str

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(self.data.shape)

    @property
    def is_valid(self) -> bool:
        return self.data.size > 0 and self.data.shape[0] == self.height and self.data.shape[1] == self.width


@dataclass
class RecorderStats:
    """Counters collected over one run."""
    frames_saved: int = 0
    grab_failures: int = 0
    write_failures: int = 0
    elapsed_seconds: float = 0.0
    stop_reason: str = ""

    # Per-frame loop timings (seconds), last 30 kept
    frame_times: list[float] = field(default_factory=list)

    @property
    def fps(self) -> float:
        if len(self.frame_times) < 2:
            return 0.0
        duration = self.frame_times[-1] - self.frame_times[0]
        return (len(self.frame_times) - 1) / duration if duration > 0 else 0.0

    def mark_frame(self, timestamp: float):
        self.frame_times.append(timestamp)
        if len(self.frame_times) > 30:
            self.frame_times.pop(0)

"""
Stereo Recorder.

Executes the capture loop in strict order:

1. Open the camera session (fatal on failure)
2. Create output directories
3. Grab a frame (blocking)
4. Retrieve left, right and depth into the shared buffers
5. Display the three views
6. Write the three views with the current frame index
7. Poll the keyboard; 'q' quits
"""

from __future__ import annotations

import time
from typing import Optional
from loguru import logger

from stereo_recorder.core.config import RecorderConfig
from stereo_recorder.core.contracts import GrabResult, RecorderStats
from stereo_recorder.capture.session import ZedSession
from stereo_recorder.capture.frame_views import FrameBuffers
from stereo_recorder.output.image_writer import OutputLayout, FrameWriter
from stereo_recorder.output.preview import PreviewWindows
from stereo_recorder.controls.keyboard import KeyboardControl


EXIT_OK = 0
EXIT_OPEN_FAILED = 1


class StereoRecorder:
    """
    Main capture loop.

    Guarantees:
    - Nothing is created on disk if the session fails to open
    - The frame index advances by exactly one per successful grab
    - Every successful grab writes one file per view, all with the same index
    """

    def __init__(
        self,
        config: Optional[RecorderConfig] = None,
        session: Optional[ZedSession] = None,
        writer: Optional[FrameWriter] = None,
        preview: Optional[PreviewWindows] = None,
        keyboard: Optional[KeyboardControl] = None,
    ):
        """
        Initialize the recorder. Components not passed in are built from config.
        """
        self.config = config or RecorderConfig()

        self.session = session or ZedSession(self.config.camera)
        self.layout = writer.layout if writer else OutputLayout(
            self.config.output_dir, self.config.image_extension
        )
        self.writer = writer or FrameWriter(self.layout)
        self.preview = preview or PreviewWindows(
            enabled=self.config.display_enabled,
            window_names=self.config.window_names,
        )
        self.keyboard = keyboard or KeyboardControl()

        self.frame_counter = 0
        self.stats = RecorderStats()
        self._buffers: Optional[FrameBuffers] = None
        self._quit_requested = False

    def _on_action(self, action: str):
        if action == "quit":
            self._quit_requested = True

    def _should_stop(self) -> bool:
        if self._quit_requested:
            self.stats.stop_reason = "quit"
            return True
        if self.config.max_frames is not None and self.frame_counter >= self.config.max_frames:
            self.stats.stop_reason = "max_frames"
            return True
        return False

    def step(self) -> GrabResult:
        """
        Run one loop iteration.

        Returns:
            Grab outcome; on anything but SUCCESS nothing is written
        """
        result = self.session.grab()

        if result != GrabResult.SUCCESS:
            self.stats.grab_failures += 1
            return result

        views = self._buffers.retrieve_all()
        self.preview.show(views)

        if not self.writer.write(views, self.frame_counter):
            self.stats.write_failures += 1

        self.frame_counter += 1
        self.stats.frames_saved = self.frame_counter
        self.stats.mark_frame(time.perf_counter())

        if self.frame_counter % 100 == 0:
            logger.debug(f"{self.frame_counter} frames saved ({self.stats.fps:.1f} fps)")

        key = self.preview.poll_key(self.config.wait_key_ms)
        action = self.keyboard.poll(key)
        if action:
            self._on_action(action)

        return result

    def run(self) -> int:
        """
        Run until quit.

        Returns:
            Process exit code
        """
        if not self.session.open():
            return EXIT_OPEN_FAILED

        start_time = time.time()
        try:
            self.layout.create()
            leftover = self.layout.existing_frame_count()
            if leftover:
                logger.warning(f"{leftover} frames from a previous run in {self.layout.root} will be overwritten")

            self.keyboard.print_help()
            self._buffers = FrameBuffers(self.session)

            while not self._should_stop():
                result = self.step()
                if (
                    result == GrabResult.END_OF_RECORDING
                    and self.session.is_recording_input
                    and self.config.stop_at_end_of_recording
                ):
                    logger.info("End of recording reached")
                    self.stats.stop_reason = "end_of_recording"
                    break

        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            self.stats.stop_reason = "interrupted"
        finally:
            self.stats.elapsed_seconds = time.time() - start_time
            self.session.close()
            self.preview.close()
            logger.info(
                f"Recorder stopped ({self.stats.stop_reason or 'error'}): "
                f"{self.stats.frames_saved} frames saved, "
                f"{self.stats.grab_failures} failed grabs, "
                f"{self.stats.elapsed_seconds:.1f}s"
            )

        return EXIT_OK

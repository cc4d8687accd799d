"""
ZED Camera Session.

Handles:
- Opening a live camera or an SVO recording with fixed parameters
- Blocking frame grabs
- Image retrieval into caller-owned SDK matrices
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple, Any
from loguru import logger

from stereo_recorder.core.config import CameraSettings
from stereo_recorder.core.contracts import ViewKind, GrabResult


def _load_sdk():
    """Import the ZED Python API (shipped with the ZED SDK installer)."""
    import pyzed.sl as sl
    return sl


class ZedSession:
    """
    One process-wide handle to the stereo camera.

    Guarantees:
    - Resolution, depth mode and units are fixed at open time
    - Retrieval always uses the resolution reported at open time
    - close() is safe to call more than once
    """

    def __init__(
        self,
        settings: Optional[CameraSettings] = None,
        sdk: Any = None,
    ):
        """
        Initialize the session (the camera is not opened yet).

        Args:
            settings: Camera parameters
            sdk: ZED API module; ``pyzed.sl`` is imported on open when omitted
        """
        self.settings = settings or CameraSettings()
        self._sdk = sdk

        # State
        self._camera = None
        self._runtime_params = None
        self._is_open = False
        self._resolution: Tuple[int, int] = (0, 0)
        self.error_message: str = ""

        # Grab statistics
        self._grab_count = 0
        self._grab_failures = 0

    @property
    def sdk(self):
        if self._sdk is None:
            self._sdk = _load_sdk()
        return self._sdk

    def _build_init_params(self):
        sl = self.sdk
        init_params = sl.InitParameters()
        init_params.camera_resolution = getattr(sl.RESOLUTION, self.settings.resolution)
        init_params.depth_mode = getattr(sl.DEPTH_MODE, self.settings.depth_mode)
        init_params.coordinate_units = getattr(sl.UNIT, self.settings.coordinate_units)

        if self.settings.svo_input:
            init_params.set_from_svo_file(str(self.settings.svo_input))
            init_params.svo_real_time_mode = self.settings.svo_real_time_mode

        return init_params

    def open(self) -> bool:
        """
        Open the camera or recording.

        Returns:
            True if opened; on failure ``error_message`` holds the SDK message
        """
        if self._is_open:
            return True

        sl = self.sdk
        source = self.settings.svo_input or "live camera"

        if self.settings.svo_input and not Path(self.settings.svo_input).exists():
            logger.warning(f"SVO file not found: {self.settings.svo_input}")

        self._camera = sl.Camera()
        status = self._camera.open(self._build_init_params())

        if status != sl.ERROR_CODE.SUCCESS:
            self.error_message = str(status)
            logger.error(f"Failed to open {source}: {self.error_message}")
            self._camera.close()
            self._camera = None
            return False

        # Runtime parameters are created once, after the camera is open
        self._runtime_params = sl.RuntimeParameters()

        resolution = self._camera.get_camera_information().camera_configuration.resolution
        self._resolution = (int(resolution.width), int(resolution.height))
        self._is_open = True
        self.error_message = ""

        info = self.get_device_info()
        logger.info(
            f"ZED session opened ({source}): {self._resolution[0]}x{self._resolution[1]}, "
            f"depth={self.settings.depth_mode}, units={self.settings.coordinate_units}, "
            f"serial={info.get('serial', 'n/a')}"
        )
        return True

    def grab(self) -> GrabResult:
        """
        Block until the next frame is captured into the SDK buffers.

        Returns:
            GrabResult.SUCCESS, FAILED, or END_OF_RECORDING for an exhausted SVO
        """
        if not self._is_open:
            return GrabResult.FAILED

        sl = self.sdk
        status = self._camera.grab(self._runtime_params)
        self._grab_count += 1

        if status == sl.ERROR_CODE.SUCCESS:
            return GrabResult.SUCCESS

        self._grab_failures += 1
        if status == sl.ERROR_CODE.END_OF_SVOFILE_REACHED:
            return GrabResult.END_OF_RECORDING

        logger.debug(f"Grab failed: {status}")
        return GrabResult.FAILED

    def retrieve(self, mat, view: ViewKind):
        """Retrieve one view into ``mat`` at the session resolution, on CPU memory."""
        sl = self.sdk
        width, height = self._resolution
        return self._camera.retrieve_image(
            mat,
            getattr(sl.VIEW, view.sdk_name),
            sl.MEM.CPU,
            sl.Resolution(width, height),
        )

    def create_image_buffer(self):
        """Allocate an 8-bit 4-channel CPU matrix at the session resolution."""
        sl = self.sdk
        width, height = self._resolution
        return sl.Mat(width, height, sl.MAT_TYPE.U8_C4, sl.MEM.CPU)

    def close(self):
        """Close the camera."""
        if self._camera is not None:
            self._camera.close()
            self._camera = None
            logger.info(
                f"ZED session closed ({self._grab_count} grabs, {self._grab_failures} failed)"
            )
        self._is_open = False

    def get_device_info(self) -> dict:
        """Get information about the connected device."""
        if self._camera is None:
            return {"device": "unknown"}

        info = self._camera.get_camera_information()
        return {
            "device": str(getattr(info, "camera_model", "ZED")),
            "serial": getattr(info, "serial_number", None),
            "resolution": f"{self._resolution[0]}x{self._resolution[1]}",
            "input": self.settings.svo_input or "live",
        }

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def is_recording_input(self) -> bool:
        """True when frames come from an SVO file."""
        return bool(self.settings.svo_input)

    @property
    def resolution(self) -> Tuple[int, int]:
        """Get the fixed frame size (width, height)."""
        return self._resolution

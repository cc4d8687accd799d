"""
Shared fixtures: an in-memory stand-in for the ``pyzed.sl`` API surface
used by the recorder.
"""

from __future__ import annotations

from enum import Enum
from types import SimpleNamespace

import numpy as np
import pytest
from loguru import logger

from stereo_recorder.core.config import CameraSettings, RecorderConfig


class ERROR_CODE(Enum):
    SUCCESS = 0
    FAILURE = 1
    CAMERA_NOT_DETECTED = 2
    END_OF_SVOFILE_REACHED = 3

    def __str__(self):
        return self.name.replace("_", " ")


RESOLUTION = Enum("RESOLUTION", "HD2K HD1080 HD1200 HD720 SVGA VGA AUTO")
DEPTH_MODE = Enum("DEPTH_MODE", "NONE PERFORMANCE QUALITY ULTRA NEURAL")
UNIT = Enum("UNIT", "MILLIMETER CENTIMETER METER INCH FOOT")
VIEW = Enum("VIEW", "LEFT RIGHT DEPTH")
MEM = Enum("MEM", "CPU GPU")
MAT_TYPE = Enum("MAT_TYPE", "F32_C1 F32_C2 F32_C3 F32_C4 U8_C1 U8_C2 U8_C3 U8_C4")

# Pixel value written into each view, offset by the grab number
VIEW_FILL = {VIEW.LEFT: 10, VIEW.RIGHT: 20, VIEW.DEPTH: 30}


class Resolution:
    def __init__(self, width=0, height=0):
        self.width = width
        self.height = height


class InitParameters:
    def __init__(self):
        self.camera_resolution = RESOLUTION.AUTO
        self.depth_mode = DEPTH_MODE.PERFORMANCE
        self.coordinate_units = UNIT.MILLIMETER
        self.svo_real_time_mode = False
        self.svo_input = None

    def set_from_svo_file(self, path):
        self.svo_input = path


class RuntimeParameters:
    pass


class Mat:
    def __init__(self, width=0, height=0, mat_type=MAT_TYPE.F32_C1, memory_type=MEM.CPU):
        self._type = mat_type
        channels = int(mat_type.name[-1])
        dtype = np.uint8 if mat_type.name.startswith("U8") else np.float32
        self._data = np.zeros((height, width, channels), dtype=dtype)

    def get_data(self, memory_type=MEM.CPU, deep_copy=False):
        return self._data.copy() if deep_copy else self._data

    def get_data_type(self):
        return self._type

    def get_width(self):
        return self._data.shape[1]

    def get_height(self):
        return self._data.shape[0]

    def get_step_bytes(self):
        return self._data.strides[0]


def make_sdk(open_status=ERROR_CODE.SUCCESS, grab_script=(), width=32, height=24):
    """
    Build a fake ``sl`` namespace.

    ``grab_script`` lists the codes returned by successive grabs; once it
    is exhausted every grab succeeds.
    """
    cameras = []

    class Camera:
        def __init__(self):
            self.init_params = None
            self.closed = False
            self.grab_count = 0
            self.retrieved = []
            self._script = list(grab_script)
            cameras.append(self)

        def open(self, init_params):
            self.init_params = init_params
            return open_status

        def grab(self, runtime_params):
            self.grab_count += 1
            if self._script:
                return self._script.pop(0)
            return ERROR_CODE.SUCCESS

        def retrieve_image(self, mat, view, memory_type, resolution):
            self.retrieved.append((view, resolution.width, resolution.height))
            # Fill in place; the SDK never hands out a new buffer
            mat._data[...] = (VIEW_FILL[view] + self.grab_count) % 256
            return ERROR_CODE.SUCCESS

        def get_camera_information(self):
            return SimpleNamespace(
                serial_number=12345,
                camera_model="ZED2i",
                camera_configuration=SimpleNamespace(resolution=Resolution(width, height)),
            )

        def close(self):
            self.closed = True

    return SimpleNamespace(
        Camera=Camera,
        InitParameters=InitParameters,
        RuntimeParameters=RuntimeParameters,
        Resolution=Resolution,
        Mat=Mat,
        ERROR_CODE=ERROR_CODE,
        RESOLUTION=RESOLUTION,
        DEPTH_MODE=DEPTH_MODE,
        UNIT=UNIT,
        VIEW=VIEW,
        MEM=MEM,
        MAT_TYPE=MAT_TYPE,
        cameras=cameras,
    )


@pytest.fixture
def sdk():
    return make_sdk()


@pytest.fixture
def headless_config(tmp_path):
    return RecorderConfig(
        camera=CameraSettings(),
        output_dir=str(tmp_path / "images"),
        display_enabled=False,
        max_frames=3,
    )


@pytest.fixture
def log_messages():
    """Capture loguru output as a list of strings."""
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{level}|{message}")
    yield messages
    logger.remove(handler_id)

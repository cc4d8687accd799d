from stereo_recorder.capture.session import ZedSession
from stereo_recorder.core.config import CameraSettings
from stereo_recorder.core.contracts import GrabResult, ViewKind

from conftest import make_sdk, ERROR_CODE, RESOLUTION, DEPTH_MODE, UNIT, VIEW


def test_open_applies_fixed_parameters(sdk):
    session = ZedSession(CameraSettings(), sdk=sdk)

    assert session.open()
    params = sdk.cameras[0].init_params
    assert params.camera_resolution == RESOLUTION.HD1080
    assert params.depth_mode == DEPTH_MODE.PERFORMANCE
    assert params.coordinate_units == UNIT.METER
    assert params.svo_input is None
    assert session.is_open
    assert session.resolution == (32, 24)
    assert not session.is_recording_input


def test_open_with_svo_input(tmp_path):
    sdk = make_sdk()
    svo = tmp_path / "clip.svo"
    svo.write_bytes(b"")

    session = ZedSession(CameraSettings(svo_input=str(svo)), sdk=sdk)

    assert session.open()
    assert sdk.cameras[0].init_params.svo_input == str(svo)
    assert session.is_recording_input
    assert session.get_device_info()["input"] == str(svo)


def test_open_failure_keeps_sdk_message_and_closes():
    sdk = make_sdk(open_status=ERROR_CODE.CAMERA_NOT_DETECTED)
    session = ZedSession(CameraSettings(), sdk=sdk)

    assert not session.open()
    assert session.error_message == "CAMERA NOT DETECTED"
    assert not session.is_open
    assert sdk.cameras[0].closed


def test_grab_outcomes():
    sdk = make_sdk(grab_script=[ERROR_CODE.FAILURE, ERROR_CODE.SUCCESS, ERROR_CODE.END_OF_SVOFILE_REACHED])
    session = ZedSession(CameraSettings(), sdk=sdk)
    session.open()

    assert session.grab() == GrabResult.FAILED
    assert session.grab() == GrabResult.SUCCESS
    assert session.grab() == GrabResult.END_OF_RECORDING


def test_grab_before_open_fails(sdk):
    session = ZedSession(CameraSettings(), sdk=sdk)
    assert session.grab() == GrabResult.FAILED
    assert sdk.cameras == []


def test_retrieve_uses_session_resolution(sdk):
    session = ZedSession(CameraSettings(), sdk=sdk)
    session.open()
    mat = session.create_image_buffer()

    session.retrieve(mat, ViewKind.DEPTH)

    assert sdk.cameras[0].retrieved == [(VIEW.DEPTH, 32, 24)]
    assert mat.get_width() == 32 and mat.get_height() == 24


def test_close_is_idempotent(sdk):
    session = ZedSession(CameraSettings(), sdk=sdk)
    session.open()

    session.close()
    session.close()

    assert sdk.cameras[0].closed
    assert not session.is_open
    assert session.get_device_info() == {"device": "unknown"}

"""
Configuration for the Stereo Frame Recorder.

Settings come from ``config/settings.yaml`` (or a file passed with
``--config``); command-line arguments override individual values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any
import yaml
from loguru import logger


# Names accepted for the camera section; they match the SDK enum members
RESOLUTIONS = ("HD2K", "HD1080", "HD1200", "HD720", "SVGA", "VGA", "AUTO")
DEPTH_MODES = ("NONE", "PERFORMANCE", "QUALITY", "ULTRA", "NEURAL")
UNITS = ("MILLIMETER", "CENTIMETER", "METER", "INCH", "FOOT")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"

DEFAULT_WINDOW_NAMES = {
    "left": "Left Image",
    "right": "Right Image",
    "depth": "Depth",
}


@dataclass
class CameraSettings:
    """Fixed session parameters, applied once at open time."""
    resolution: str = "HD1080"
    depth_mode: str = "PERFORMANCE"
    coordinate_units: str = "METER"
    svo_input: Optional[str] = None
    svo_real_time_mode: bool = False

    def __post_init__(self):
        self.resolution = self.resolution.upper()
        self.depth_mode = self.depth_mode.upper()
        self.coordinate_units = self.coordinate_units.upper()

        if self.resolution not in RESOLUTIONS:
            raise ValueError(f"Unknown resolution '{self.resolution}'. Available: {', '.join(RESOLUTIONS)}")
        if self.depth_mode not in DEPTH_MODES:
            raise ValueError(f"Unknown depth mode '{self.depth_mode}'. Available: {', '.join(DEPTH_MODES)}")
        if self.coordinate_units not in UNITS:
            raise ValueError(f"Unknown unit '{self.coordinate_units}'. Available: {', '.join(UNITS)}")


@dataclass
class RecorderConfig:
    """Main configuration for the capture loop.

    Attributes:
        camera: Session parameters
        output_dir: Root of the left/right/depth image folders
        image_extension: File extension, selects the OpenCV encoder
        display_enabled: Show preview windows
        wait_key_ms: Key poll timeout after every saved frame
        window_names: Preview window title per view
        max_frames: Stop after this many saved frames (None = until quit)
        stop_at_end_of_recording: End the run when an SVO input is exhausted
    """
    camera: CameraSettings = field(default_factory=CameraSettings)

    # Output
    output_dir: str = "./images"
    image_extension: str = ".png"

    # Display
    display_enabled: bool = True
    wait_key_ms: int = 10
    window_names: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_WINDOW_NAMES))

    # Loop
    max_frames: Optional[int] = None
    stop_at_end_of_recording: bool = True

    def __post_init__(self):
        if not self.image_extension.startswith("."):
            self.image_extension = "." + self.image_extension
        if self.wait_key_ms < 1:
            # waitKey(0) would block until a key is pressed
            raise ValueError("wait_key_ms must be >= 1")
        if self.max_frames is not None and self.max_frames < 1:
            raise ValueError("max_frames must be >= 1")


def read_settings(config_path: Optional[str] = None) -> dict:
    """Read raw settings from YAML.

    An explicit path must exist. Without one, the bundled
    ``config/settings.yaml`` is used when present, else defaults.
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(path)
    elif DEFAULT_CONFIG_PATH.exists():
        path = DEFAULT_CONFIG_PATH
    else:
        return {}

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping")

    logger.debug(f"Loaded settings from {path}")
    return data


def _section(data: dict, name: str) -> dict:
    """Return a mutable section, replacing an empty YAML key."""
    if not isinstance(data.get(name), dict):
        data[name] = {}
    return data[name]


def config_from_dict(data: Dict[str, Any]) -> RecorderConfig:
    """Build a RecorderConfig from the settings mapping."""
    camera = data.get("camera", {}) or {}
    output = data.get("output", {}) or {}
    display = data.get("display", {}) or {}
    loop = data.get("loop", {}) or {}

    window_names = dict(DEFAULT_WINDOW_NAMES)
    window_names.update(display.get("window_names", {}) or {})

    return RecorderConfig(
        camera=CameraSettings(
            resolution=camera.get("resolution", "HD1080"),
            depth_mode=camera.get("depth_mode", "PERFORMANCE"),
            coordinate_units=camera.get("coordinate_units", "METER"),
            svo_input=camera.get("svo_input"),
            svo_real_time_mode=camera.get("svo_real_time_mode", False),
        ),
        output_dir=output.get("dir", "./images"),
        image_extension=output.get("extension", ".png"),
        display_enabled=display.get("enabled", True),
        wait_key_ms=display.get("wait_key_ms", 10),
        window_names=window_names,
        max_frames=loop.get("max_frames"),
        stop_at_end_of_recording=loop.get("stop_at_end_of_recording", True),
    )


def load_config(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> RecorderConfig:
    """Load configuration from YAML, then apply command-line overrides.

    Args:
        config_path: Path to a settings file, or None for the default
        overrides: Values from the command line; None entries are ignored.
            Recognised keys: svo_input, output_dir, headless, max_frames

    Returns:
        RecorderConfig with all settings
    """
    data = read_settings(config_path)
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

    if "svo_input" in overrides:
        _section(data, "camera")["svo_input"] = overrides["svo_input"]
    if "output_dir" in overrides:
        _section(data, "output")["dir"] = overrides["output_dir"]
    if overrides.get("headless"):
        _section(data, "display")["enabled"] = False
    if "max_frames" in overrides:
        _section(data, "loop")["max_frames"] = overrides["max_frames"]

    return config_from_dict(data)

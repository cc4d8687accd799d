#!/usr/bin/env python3
"""
Stereo Frame Recorder for ZED cameras

Main entry point: previews the left, right and depth views and saves
every frame to ./images/{left,right,depth}/<n>.png.

Usage:
    python main.py [SVO_FILE] [--config CONFIG_PATH] [--output-dir DIR]

Keyboard Controls:
    Q     - Quit

Exit status:
    0 - normal exit
    1 - the camera (or SVO file) could not be opened
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from stereo_recorder.core.config import load_config
from stereo_recorder.pipeline.recorder import StereoRecorder


# ============================================================
# LOGGING CONFIGURATION
# ============================================================

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """Configure logging."""
    logger.remove()  # Remove default handler

    # Console output with colors
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>",
        colorize=True,
    )

    # File output
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {module}:{line} | {message}",
            rotation="10 MB",
            retention="7 days",
        )


# ============================================================
# ENTRY POINT
# ============================================================

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Record left, right and depth frames from a ZED stereo camera",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "input",
        nargs="?",
        default=None,
        help="Pre-recorded SVO file (default: live camera)",
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to configuration file (default: config/settings.yaml)",
    )

    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default=None,
        help="Root directory for saved frames (default: ./images)",
    )

    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without preview windows",
    )

    parser.add_argument(
        "--max-frames",
        type=int,
        default=None,
        help="Stop after saving this many frames",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional log file path",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Setup logging
    setup_logging(args.log_level, args.log_file)

    config = load_config(
        args.config,
        overrides={
            "svo_input": args.input,
            "output_dir": args.output_dir,
            "headless": args.headless,
            "max_frames": args.max_frames,
        },
    )

    recorder = StereoRecorder(config)
    return recorder.run()


if __name__ == "__main__":
    sys.exit(main())

"""
Stereo Frame Recorder for ZED cameras

Captures left, right and depth views from a ZED stereo camera (or an
SVO recording), previews them live and saves every frame as numbered
PNG files until the user quits.
"""

__version__ = "0.1.0"

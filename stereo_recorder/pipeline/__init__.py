"""
Pipeline Module - the capture loop.
"""

from .recorder import StereoRecorder, EXIT_OK, EXIT_OPEN_FAILED

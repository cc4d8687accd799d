"""
Keyboard input control.

Handles keyboard input via OpenCV window events.
"""
from typing import Optional


HELP_TEXT = " Press 'q' to quit the process"


class KeyboardControl:
    """Keyboard input handler.

    Uses OpenCV's waitKey() for input detection.
    Must be polled in the main loop.

    Key bindings:
        q - quit
    """

    BINDINGS = {
        ord('q'): "quit",
    }

    def poll(self, key: int) -> Optional[str]:
        """Process a key press.

        Args:
            key: Key code from cv2.waitKey(), -1 if none

        Returns:
            Action string ("quit") or None
        """
        if key < 0:
            return None
        return self.BINDINGS.get(key & 0xFF)

    @staticmethod
    def print_help():
        print(HELP_TEXT)

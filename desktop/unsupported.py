"""Desktop backend for platforms without input/screen control."""

import sys

from agent.exceptions import DesktopUnsupportedError
from desktop.base import Desktop, UIElement


class UnsupportedDesktop(Desktop):
    """Every operation fails with ``DesktopUnsupportedError``."""

    name = "unsupported"

    def __init__(self, platform: str | None = None):
        self.platform = platform or sys.platform

    def _unsupported(self, operation: str):
        raise DesktopUnsupportedError(
            f"{operation} is not supported on platform '{self.platform}'"
        )

    def move_mouse(self, x: int, y: int, duration_ms: int) -> None:
        self._unsupported("Mouse movement")

    def click(self, x: int, y: int, button: str = "left", double: bool = False) -> None:
        self._unsupported("Mouse click")

    def type_text(self, text: str, delay_ms: int) -> None:
        self._unsupported("Keyboard input")

    def press_keys(self, keys: list[str]) -> None:
        self._unsupported("Keyboard input")

    def scroll(self, direction: str, amount: int) -> None:
        self._unsupported("Scrolling")

    def capture_screen(self) -> str:
        self._unsupported("Screen capture")

    def active_window_tree(self, max_depth: int) -> UIElement:
        self._unsupported("UI automation")

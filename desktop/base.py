"""Desktop capability interface consumed by the effector tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

MOUSE_BUTTONS = ("left", "right", "middle")
SCROLL_DIRECTIONS = ("up", "down", "left", "right")


@dataclass
class BoundingRect:
    x: int
    y: int
    width: int
    height: int


@dataclass
class UIElement:
    """Node of the focused window's element tree."""
    name: str
    class_name: str
    control_type: str
    bounding_rect: BoundingRect
    is_enabled: bool = True
    is_focused: bool = False
    children: list["UIElement"] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "class_name": self.class_name,
            "control_type": self.control_type,
            "bounding_rect": {
                "x": self.bounding_rect.x,
                "y": self.bounding_rect.y,
                "width": self.bounding_rect.width,
                "height": self.bounding_rect.height,
            },
            "is_enabled": self.is_enabled,
            "is_focused": self.is_focused,
            "children": [child.to_dict() for child in self.children],
        }


class Desktop(ABC):
    """Pointer, keyboard and screen access. One instance is selected at startup."""

    name: str = ""

    @abstractmethod
    def move_mouse(self, x: int, y: int, duration_ms: int) -> None:
        ...

    @abstractmethod
    def click(self, x: int, y: int, button: str = "left", double: bool = False) -> None:
        ...

    @abstractmethod
    def type_text(self, text: str, delay_ms: int) -> None:
        ...

    @abstractmethod
    def press_keys(self, keys: list[str]) -> None:
        ...

    @abstractmethod
    def scroll(self, direction: str, amount: int) -> None:
        ...

    @abstractmethod
    def capture_screen(self) -> str:
        """Return the primary display as a ``data:image/png;base64,...`` URI."""
        ...

    @abstractmethod
    def active_window_tree(self, max_depth: int) -> UIElement:
        """Return the element tree of the focused top-level window."""
        ...

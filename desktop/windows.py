"""Windows desktop backend: pyautogui for input, mss for capture, uiautomation for the element tree."""

import base64

import mss
import mss.tools
import pyautogui

from desktop.base import BoundingRect, Desktop, MOUSE_BUTTONS, SCROLL_DIRECTIONS, UIElement

# One wheel notch in Windows wheel units.
WHEEL_DELTA = 120

KEY_ALIASES = {
    "control": "ctrl",
    "cmd": "win",
    "command": "win",
    "meta": "win",
    "super": "win",
    "windows": "win",
    "escape": "esc",
    "return": "enter",
    "del": "delete",
    "ins": "insert",
    "pgup": "pageup",
    "pgdn": "pagedown",
    "spacebar": "space",
    "arrowup": "up",
    "arrowdown": "down",
    "arrowleft": "left",
    "arrowright": "right",
}


def normalize_key(key: str) -> str:
    """Map a model-supplied key name onto a pyautogui key name."""
    name = key.strip().lower()
    name = KEY_ALIASES.get(name, name)
    if name not in pyautogui.KEYBOARD_KEYS:
        raise ValueError(f"Unknown key: {key}")
    return name


class WindowsDesktop(Desktop):
    name = "windows"

    def __init__(self):
        # Corner fail-safe would abort the agent mid-task.
        pyautogui.FAILSAFE = False
        pyautogui.PAUSE = 0

    def move_mouse(self, x: int, y: int, duration_ms: int) -> None:
        pyautogui.moveTo(x, y, duration=duration_ms / 1000, tween=pyautogui.easeOutQuad)

    def click(self, x: int, y: int, button: str = "left", double: bool = False) -> None:
        if button not in MOUSE_BUTTONS:
            raise ValueError(f"Unknown mouse button: {button}")
        pyautogui.click(x=x, y=y, button=button, clicks=2 if double else 1, interval=0.05)

    def type_text(self, text: str, delay_ms: int) -> None:
        pyautogui.write(text, interval=delay_ms / 1000)

    def press_keys(self, keys: list[str]) -> None:
        if not keys:
            raise ValueError("No keys given")
        pyautogui.hotkey(*[normalize_key(k) for k in keys])

    def scroll(self, direction: str, amount: int) -> None:
        if direction not in SCROLL_DIRECTIONS:
            raise ValueError(f"Unknown scroll direction: {direction}")
        clicks = amount * WHEEL_DELTA
        if direction in ("down", "right"):
            clicks = -clicks
        if direction in ("up", "down"):
            pyautogui.scroll(clicks)
            return
        # Horizontal wheel is Shift + vertical wheel on Windows.
        pyautogui.keyDown("shift")
        try:
            pyautogui.scroll(clicks)
        finally:
            pyautogui.keyUp("shift")

    def capture_screen(self) -> str:
        with mss.mss() as sct:
            shot = sct.grab(sct.monitors[1])
            png = mss.tools.to_png(shot.rgb, shot.size)
        return "data:image/png;base64," + base64.b64encode(png).decode("ascii")

    def active_window_tree(self, max_depth: int) -> UIElement:
        import uiautomation as auto

        focused = auto.GetFocusedControl()
        if focused is None:
            raise RuntimeError("No focused element")
        root = focused.GetTopLevelControl() or focused
        return self._build_tree(root, 0, max_depth)

    def _build_tree(self, control, depth: int, max_depth: int) -> UIElement:
        rect = control.BoundingRectangle
        children = []
        if depth < max_depth:
            children = [
                self._build_tree(child, depth + 1, max_depth)
                for child in control.GetChildren()
            ]
        return UIElement(
            name=control.Name or "",
            class_name=control.ClassName or "",
            control_type=control.ControlTypeName or "",
            bounding_rect=BoundingRect(
                x=rect.left,
                y=rect.top,
                width=rect.width(),
                height=rect.height(),
            ),
            is_enabled=bool(control.IsEnabled),
            is_focused=bool(control.HasKeyboardFocus),
            children=children,
        )

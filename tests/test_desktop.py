import pytest

from agent.config import DesktopConfig
from agent.exceptions import DesktopUnsupportedError
from desktop.base import BoundingRect, UIElement
from desktop.factory import create_desktop, resolve_backend
from desktop.unsupported import UnsupportedDesktop


def test_resolve_backend():
    assert resolve_backend(DesktopConfig(), platform="win32") == "windows"
    assert resolve_backend(DesktopConfig(), platform="linux") == "unsupported"
    assert resolve_backend(DesktopConfig(backend="unsupported"), platform="win32") == "unsupported"


def test_create_unsupported_desktop():
    desktop = create_desktop(DesktopConfig(), platform="darwin")
    assert isinstance(desktop, UnsupportedDesktop)
    assert desktop.name == "unsupported"


@pytest.mark.parametrize(
    "operation",
    [
        lambda d: d.move_mouse(1, 2, 0),
        lambda d: d.click(1, 2),
        lambda d: d.type_text("a", 0),
        lambda d: d.press_keys(["enter"]),
        lambda d: d.scroll("down", 3),
        lambda d: d.capture_screen(),
        lambda d: d.active_window_tree(2),
    ],
)
def test_unsupported_operations_raise(operation):
    with pytest.raises(DesktopUnsupportedError, match="not supported on platform 'darwin'"):
        operation(UnsupportedDesktop("darwin"))


def test_ui_element_to_dict():
    child = UIElement("OK", "Button", "ButtonControl", BoundingRect(10, 20, 30, 40))
    root = UIElement(
        "Dialog", "#32770", "WindowControl", BoundingRect(0, 0, 100, 100),
        is_focused=True, children=[child],
    )

    data = root.to_dict()

    assert data["is_focused"] is True
    assert data["children"][0]["bounding_rect"] == {"x": 10, "y": 20, "width": 30, "height": 40}
    assert data["children"][0]["children"] == []

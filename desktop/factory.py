"""Select the desktop backend once at startup."""

import sys

from agent.config import DesktopConfig
from desktop.base import Desktop
from desktop.unsupported import UnsupportedDesktop


def resolve_backend(config: DesktopConfig, platform: str | None = None) -> str:
    """Return the concrete backend name for ``config.backend``."""
    platform = platform or sys.platform
    if config.backend != "auto":
        return config.backend
    return "windows" if platform == "win32" else "unsupported"


def create_desktop(config: DesktopConfig, platform: str | None = None) -> Desktop:
    backend = resolve_backend(config, platform)
    if backend == "windows":
        from desktop.windows import WindowsDesktop
        return WindowsDesktop()
    return UnsupportedDesktop(platform)

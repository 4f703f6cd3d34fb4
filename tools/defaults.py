"""Registries for the primary agent and the guide search sub-agent."""

from tools.guide_search import GuideSearchTool
from tools.guide_tools import GuideListTool, GuidePreviewTool, GuideReadTool
from tools.keyboard import KeyboardPressTool, KeyboardTypeTool
from tools.mouse import MouseClickTool, MouseDoubleClickTool, MouseMoveTool
from tools.screen import ScreenUpdateTool, WaitTool
from tools.scroll import ScrollTool
from tools.tool_registry import ToolRegistry


def build_main_registry() -> ToolRegistry:
    return ToolRegistry(
        [
            MouseMoveTool(),
            MouseClickTool(),
            MouseDoubleClickTool(),
            KeyboardTypeTool(),
            KeyboardPressTool(),
            ScreenUpdateTool(),
            WaitTool(),
            ScrollTool(),
            GuideSearchTool(),
        ]
    )


def build_guide_registry() -> ToolRegistry:
    return ToolRegistry([GuideListTool(), GuidePreviewTool(), GuideReadTool()])

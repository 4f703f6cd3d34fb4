"""Pointer tools: move, click, double-click."""

from agent.response import ToolResult
from desktop.base import MOUSE_BUTTONS
from tools.base_tool import Tool

_POINT = {
    "x": {"type": "integer", "description": "X coordinate in screen pixels"},
    "y": {"type": "integer", "description": "Y coordinate in screen pixels"},
}


class MouseMoveTool(Tool):
    name = "mouse_move"
    description = "Move the mouse cursor to the specified coordinates."
    parameters = {
        "type": "object",
        "properties": dict(_POINT),
        "required": ["x", "y"],
    }

    async def execute(self, args, context) -> ToolResult:
        x, y = args["x"], args["y"]
        context.desktop.move_mouse(x, y, context.config.desktop.mouse_move_duration_ms)
        return ToolResult.ok(f"Moved mouse to ({x}, {y})")


class MouseClickTool(Tool):
    name = "mouse_click"
    description = "Click the mouse at the specified coordinates."
    parameters = {
        "type": "object",
        "properties": {
            **_POINT,
            "button": {
                "type": "string",
                "enum": list(MOUSE_BUTTONS),
                "description": "Mouse button to click (default: left)",
            },
        },
        "required": ["x", "y"],
    }

    async def execute(self, args, context) -> ToolResult:
        x, y = args["x"], args["y"]
        button = args.get("button") or "left"
        context.desktop.click(x, y, button=button)
        return ToolResult.ok(f"Clicked {button} at ({x}, {y})")


class MouseDoubleClickTool(Tool):
    name = "mouse_double_click"
    description = "Double-click the left mouse button at the specified coordinates."
    parameters = {
        "type": "object",
        "properties": dict(_POINT),
        "required": ["x", "y"],
    }

    async def execute(self, args, context) -> ToolResult:
        x, y = args["x"], args["y"]
        context.desktop.click(x, y, button="left", double=True)
        return ToolResult.ok(f"Double-clicked at ({x}, {y})")

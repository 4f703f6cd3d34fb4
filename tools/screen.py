"""Screen refresh request and timed wait."""

import asyncio

from agent.response import ToolResult
from tools.base_tool import Tool


class ScreenUpdateTool(Tool):
    """Marker tool; the primary loop attaches the fresh screenshot after it runs."""

    name = "get_screen_update"
    description = "Get an updated screenshot and UI element tree after performing actions."
    parameters = {"type": "object", "properties": {}}

    async def execute(self, args, context) -> ToolResult:
        return ToolResult.ok("Screen update requested")


class WaitTool(Tool):
    name = "wait"
    description = "Wait for a specified number of milliseconds, e.g. for a page to load."
    parameters = {
        "type": "object",
        "properties": {
            "ms": {"type": "integer", "minimum": 0, "description": "Milliseconds to wait"},
        },
        "required": ["ms"],
    }

    async def execute(self, args, context) -> ToolResult:
        ms = args["ms"]
        await asyncio.sleep(ms / 1000)
        return ToolResult.ok(f"Waited {ms}ms")

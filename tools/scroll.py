"""Mouse wheel scrolling."""

from agent.response import ToolResult
from desktop.base import SCROLL_DIRECTIONS
from tools.base_tool import Tool


class ScrollTool(Tool):
    name = "scroll"
    description = "Scroll the mouse wheel at the current cursor position."
    parameters = {
        "type": "object",
        "properties": {
            "direction": {
                "type": "string",
                "enum": list(SCROLL_DIRECTIONS),
                "description": "Scroll direction",
            },
            "amount": {
                "type": "integer",
                "minimum": 1,
                "description": "Number of wheel notches (default: 3)",
            },
        },
        "required": ["direction"],
    }

    async def execute(self, args, context) -> ToolResult:
        direction = args["direction"]
        amount = args.get("amount") or 3
        context.desktop.scroll(direction, amount)
        return ToolResult.ok(f"Scrolled {direction} by {amount}")

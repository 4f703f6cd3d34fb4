"""Keyboard tools: type text and press key combinations."""

from agent.response import ToolResult
from tools.base_tool import Tool


class KeyboardTypeTool(Tool):
    name = "keyboard_type"
    description = "Type the given text using the keyboard."
    parameters = {
        "type": "object",
        "properties": {
            "text": {"type": "string", "description": "Text to type"},
        },
        "required": ["text"],
    }

    async def execute(self, args, context) -> ToolResult:
        text = args["text"]
        context.desktop.type_text(text, context.config.desktop.typing_delay_ms)
        return ToolResult.ok(f"Typed: {text}")


class KeyboardPressTool(Tool):
    name = "keyboard_press"
    description = (
        "Press a key or key combination. Keys are pressed in order and released "
        "in reverse, e.g. [\"ctrl\", \"c\"] or [\"enter\"]."
    )
    parameters = {
        "type": "object",
        "properties": {
            "keys": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Keys to press together",
            },
        },
        "required": ["keys"],
    }

    async def execute(self, args, context) -> ToolResult:
        keys = args["keys"]
        if not keys:
            return ToolResult.fail("Missing keys")
        context.desktop.press_keys(keys)
        return ToolResult.ok(f"Pressed: {' + '.join(keys)}")

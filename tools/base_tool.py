"""Abstract base class for all tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from agent.response import ToolResult

if TYPE_CHECKING:
    from agent.agent_context import AgentContext


_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
    "array": (list,),
    "object": (dict,),
}


class Tool(ABC):
    """Base class for effectors and sub-agents. Subclass this to create new tools.

    ``parameters`` is a JSON schema object; it is sent to the endpoint as-is and
    used by :meth:`validate` before :meth:`execute` runs.
    """

    name: str = ""
    description: str = ""
    parameters: dict = {"type": "object", "properties": {}}

    @abstractmethod
    async def execute(self, args: dict[str, Any], context: "AgentContext") -> ToolResult:
        """Execute the tool. Must be implemented by subclasses."""
        ...

    def to_tool_def(self) -> dict:
        """Tool definition in chat-completion ``tools[]`` shape."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def get_prompt_description(self) -> str:
        return f"- {self.name}: {self.description}"

    def validate(self, args: dict[str, Any]) -> str | None:
        """Check ``args`` against the schema. Returns an error message or None."""
        properties = self.parameters.get("properties", {})
        for required in self.parameters.get("required", []):
            if args.get(required) is None:
                return f"Missing {required}"

        for key, value in args.items():
            schema = properties.get(key)
            if not schema or value is None:
                continue
            error = _check_value(key, value, schema)
            if error:
                return error
        return None


def _check_value(key: str, value: Any, schema: dict) -> str | None:
    expected = schema.get("type")
    allowed = _JSON_TYPES.get(expected)
    if allowed:
        # bool is an int subclass but never a valid number here
        if isinstance(value, bool) and expected != "boolean":
            return f"Invalid {key}: expected {expected}"
        if not isinstance(value, allowed):
            return f"Invalid {key}: expected {expected}"

    if "enum" in schema and value not in schema["enum"]:
        options = ", ".join(str(v) for v in schema["enum"])
        return f"Invalid {key}: must be one of {options}"

    if "minimum" in schema and isinstance(value, (int, float)) and value < schema["minimum"]:
        return f"Invalid {key}: must be >= {schema['minimum']}"

    if expected == "array" and "items" in schema:
        for item in value:
            error = _check_value(f"{key} item", item, schema["items"])
            if error:
                return error
    return None

"""Name-keyed tool registry and dispatcher."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Iterable

from agent.response import ToolResult
from tools.base_tool import Tool

if TYPE_CHECKING:
    from agent.agent_context import AgentContext


class ToolRegistry:
    """Holds tool instances by name, built once and passed to the loop that uses it."""

    def __init__(self, tools: Iterable[Tool] = ()):
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        if not tool.name:
            raise ValueError(f"{type(tool).__name__} has no name")
        if tool.name in self._tools:
            raise ValueError(f"Duplicate tool name: {tool.name}")
        self._tools[tool.name] = tool

    def get_tool(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    @property
    def tool_names(self) -> list[str]:
        """Registered tool names in registration order."""
        return list(self._tools)

    def tool_defs(self) -> list[dict]:
        """Definitions for the ``tools`` field of a chat-completion request."""
        return [tool.to_tool_def() for tool in self._tools.values()]

    def get_tool_descriptions(self) -> str:
        """Bulleted tool listing for the system prompt."""
        return "\n".join(tool.get_prompt_description() for tool in self._tools.values())

    async def execute(
        self,
        name: str,
        args: dict[str, Any],
        context: "AgentContext",
    ) -> ToolResult:
        """Run one tool. Unknown names, invalid args and tool exceptions come back as failed results."""
        logger = context.logger("tool_registry", "tool_registry.log")
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("Unknown tool requested: %s", name)
            return ToolResult.fail(f"Unknown tool: {name}")

        error = tool.validate(args)
        if error:
            logger.info("Rejected %s args %s: %s", name, args, error)
            return ToolResult.fail(error)

        start = time.monotonic()
        try:
            result = await tool.execute(args, context)
        except Exception as e:
            logger.log(logging.WARNING, "Tool %s raised: %s", name, e, exc_info=True)
            result = ToolResult.fail(str(e) or type(e).__name__)

        duration_ms = (time.monotonic() - start) * 1000
        context.telemetry.record_tool_call(
            tool_name=name,
            args=args,
            duration_ms=duration_ms,
            success=result.success,
            result_summary=result.text,
            error=result.error,
        )
        return result

"""Primary desktop automation agent."""

from __future__ import annotations

from typing import TYPE_CHECKING

from agent.agent_loop import AgentLoop
from agent.conversation import ConversationBuilder
from agent.response import AgentResult, ToolCall, ToolResult
from tools.defaults import build_main_registry

if TYPE_CHECKING:
    from agent.agent_context import AgentContext
    from tools.tool_registry import ToolRegistry

SCREEN_UPDATE_TOOL = "get_screen_update"
MAX_ITERATIONS_MESSAGE = "Maximum iterations reached. Task may be incomplete."


class Agent:
    """
    Runs one user request against the desktop: builds the opening messages,
    drives the shared loop with the primary tool set and refreshes the screen
    whenever the model asks for it.
    """

    def __init__(self, context: "AgentContext", registry: "ToolRegistry | None" = None):
        self.context = context
        self.registry = registry or build_main_registry()
        self.conversation = ConversationBuilder(context)
        self.logger = context.logger("agent", "agent_loop.log")

    async def run(self, user_message: str, include_screen: bool = True) -> AgentResult:
        self.context.require_api_key()
        loop = AgentLoop(
            self.context,
            self.registry,
            self.context.config.max_iterations,
            after_tool=self._refresh_screen,
            label="agent",
        )

        self.logger.info("Task: %s", user_message)
        status = "error"
        try:
            messages = self.conversation.build_initial_messages(
                user_message, include_screen, self.registry
            )
            outcome = await loop.run(messages)
            if not outcome.completed:
                status = "max_iterations"
                return AgentResult(
                    steps=outcome.steps, final_response=MAX_ITERATIONS_MESSAGE, success=False
                )
            status = "done"
        finally:
            self.context.telemetry.finalize(status)

        return AgentResult(
            steps=outcome.steps,
            final_response=outcome.final_text or "",
            success=True,
        )

    def _refresh_screen(self, call: ToolCall, result: ToolResult) -> list[dict]:
        if call.name != SCREEN_UPDATE_TOOL or not self.context.config.api.supports_vision:
            return []
        message = self.conversation.screen_update_message()
        return [message] if message else []

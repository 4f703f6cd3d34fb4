"""Guide search: a nested agent loop over the guide corpus, exposed as a tool."""

from __future__ import annotations

from typing import TYPE_CHECKING

from agent.agent_loop import AgentLoop
from agent.exceptions import ReasoningClientError
from agent.response import ToolCall, ToolResult
from tools.base_tool import Tool

if TYPE_CHECKING:
    from agent.agent_context import AgentContext

GUIDE_NOT_FOUND = "NOT_FOUND"

READ_FULL_GUIDE = (
    "You answered from a listing or preview. Use guide_read on the matching guide "
    f"and answer with its full content, or answer exactly {GUIDE_NOT_FOUND}."
)


class _GuideSearchRun:
    """Per-query state: whether a full guide has been read yet."""

    def __init__(self):
        self.read_guide = False

    def after_tool(self, call: ToolCall, result: ToolResult) -> list[dict]:
        if call.name == "guide_read" and result.success:
            self.read_guide = True
        return []

    def review_final(self, content: str | None) -> str | None:
        text = (content or "").strip()
        if not text or text == GUIDE_NOT_FOUND or self.read_guide:
            return None
        return READ_FULL_GUIDE


async def run_guide_search(query: str, context: "AgentContext") -> str:
    """Run the sub-agent and return guide content or :data:`GUIDE_NOT_FOUND`.

    Remote failures propagate.
    """
    from tools.defaults import build_guide_registry

    config = context.config
    system_prompt = context.prompt_engine.render(
        "agent.system.guide_search.md",
        {"preview_lines": config.guide_preview_lines, "not_found": GUIDE_NOT_FOUND},
    )
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": f"Find a guide for: {query}"},
    ]

    state = _GuideSearchRun()
    loop = AgentLoop(
        context,
        build_guide_registry(),
        config.guide_search_max_iterations,
        after_tool=state.after_tool,
        review_final=state.review_final,
        label="guide_search",
    )
    outcome = await loop.run(messages)

    if not outcome.completed:
        return GUIDE_NOT_FOUND
    text = (outcome.final_text or "").strip()
    if not text or text == GUIDE_NOT_FOUND:
        return GUIDE_NOT_FOUND
    return outcome.final_text


async def search_guide(query: str, context: "AgentContext") -> str:
    """Standalone guide search, for surfaces outside the primary agent."""
    context.require_api_key()
    return await run_guide_search(query, context)


class GuideSearchTool(Tool):
    name = "guide_search"
    description = (
        "Search for relevant guides to help with the current task. A sub-agent will "
        f"autonomously search and return guide content or '{GUIDE_NOT_FOUND}' if not found."
    )
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": (
                    "Search query describing what you need help with "
                    "(e.g., 'YouTube upload', 'VSCode shortcuts')"
                ),
            },
        },
        "required": ["query"],
    }

    async def execute(self, args, context) -> ToolResult:
        try:
            return ToolResult.ok(await run_guide_search(args["query"], context))
        except ReasoningClientError as e:
            return ToolResult.fail(str(e))

"""Bounded tool-calling loop shared by the primary agent and its sub-agents."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from agent.exceptions import ReasoningClientError
from agent.response import AgentStep, ChatResponse, ToolCall, ToolResult

if TYPE_CHECKING:
    from agent.agent_context import AgentContext
    from tools.tool_registry import ToolRegistry

# Called after each tool message; returned messages are appended right after it.
AfterToolHook = Callable[[ToolCall, ToolResult], list[dict]]
# Called on a content-only answer; a returned string is sent back as a user turn.
ReviewFinalHook = Callable[[str | None], str | None]


@dataclass
class LoopOutcome:
    """How a loop run ended."""
    steps: list[AgentStep] = field(default_factory=list)
    final_text: str | None = None
    completed: bool = False
    iterations: int = 0


def parse_arguments(raw: str, logger: logging.Logger | None = None) -> dict:
    """Decode tool-call arguments; anything but a JSON object becomes ``{}``."""
    try:
        parsed = json.loads(raw) if raw else {}
    except (json.JSONDecodeError, TypeError) as e:
        if logger:
            logger.warning("Malformed tool arguments %r: %s", raw, e)
        return {}
    if not isinstance(parsed, dict):
        if logger:
            logger.warning("Tool arguments are not an object: %r", raw)
        return {}
    return parsed


class AgentLoop:
    """
    Call the model, run the invocations it asks for in order, feed results back,
    and repeat until it answers without invocations or the ceiling is reached.

    The loop owns its message list for the duration of :meth:`run`; it only
    appends. Remote failures propagate to the caller.
    """

    def __init__(
        self,
        context: "AgentContext",
        registry: "ToolRegistry",
        max_iterations: int,
        after_tool: AfterToolHook | None = None,
        review_final: ReviewFinalHook | None = None,
        label: str = "agent",
    ):
        self.context = context
        self.registry = registry
        self.max_iterations = max_iterations
        self.after_tool = after_tool
        self.review_final = review_final
        self.label = label
        self.logger = context.logger(f"agent_loop.{label}", "agent_loop.log")

    async def run(self, messages: list[dict]) -> LoopOutcome:
        outcome = LoopOutcome()
        tool_defs = self.registry.tool_defs()

        for iteration in range(1, self.max_iterations + 1):
            started = time.monotonic()
            outcome.iterations = iteration
            response = await self._call_model(messages, tool_defs)

            if not response.tool_calls:
                nudge = self.review_final(response.content) if self.review_final else None
                if nudge is not None:
                    self.logger.info("[%s] answer not accepted, continuing", self.label)
                    messages.append({"role": "assistant", "content": response.content or ""})
                    messages.append({"role": "user", "content": nudge})
                    self._record_iteration(iteration, "nudge", started)
                    continue

                self.logger.info("[%s] finished after %d iteration(s)", self.label, iteration)
                self._record_iteration(iteration, "final", started)
                outcome.final_text = response.content
                outcome.completed = True
                return outcome

            thought = response.content or ""
            messages.append(
                {
                    "role": "assistant",
                    "content": thought,
                    "tool_calls": [call.to_dict() for call in response.tool_calls],
                }
            )

            for call in response.tool_calls:
                args = parse_arguments(call.arguments, self.logger)
                self.logger.info("[%s] %s %s", self.label, call.name, args)
                result = await self.registry.execute(call.name, args, self.context)
                if not result.success:
                    self.logger.info("[%s] %s failed: %s", self.label, call.name, result.error)

                outcome.steps.append(
                    AgentStep(thought=thought, action=call.name, params=args, result=result.text)
                )
                messages.append({"role": "tool", "tool_call_id": call.id, "content": result.text})
                if self.after_tool:
                    messages.extend(self.after_tool(call, result))

            self._record_iteration(iteration, "tool_calls", started)

        self.logger.warning("[%s] stopped at %d iterations", self.label, self.max_iterations)
        return outcome

    async def _call_model(self, messages: list[dict], tool_defs: list[dict]) -> ChatResponse:
        client = self.context.client
        started = time.monotonic()
        try:
            response = await client.chat_completion(messages, tool_defs or None)
        except ReasoningClientError as e:
            self.context.telemetry.record_llm_call(
                model=self.context.config.api.model,
                prompt_tokens=0,
                completion_tokens=0,
                latency_ms=(time.monotonic() - started) * 1000,
                error=str(e),
            )
            self.logger.error("[%s] chat completion failed: %s", self.label, e)
            raise

        usage = response.usage
        self.context.telemetry.record_llm_call(
            model=self.context.config.api.model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            latency_ms=(time.monotonic() - started) * 1000,
        )
        return response

    def _record_iteration(self, iteration: int, decision: str, started: float) -> None:
        self.context.telemetry.record_iteration(
            loop=self.label,
            iteration=iteration,
            decision=decision,
            duration_ms=(time.monotonic() - started) * 1000,
        )

"""Result records shared by tools, the client and the agent loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

EMPTY_OUTPUT = "(no output)"


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one tool execution: output on success, error text otherwise."""
    success: bool
    output: str = ""
    error: str | None = None

    def __post_init__(self):
        if self.success and (self.error is not None or not self.output):
            raise ValueError("successful ToolResult needs output and no error")
        if not self.success and (self.output or not self.error):
            raise ValueError("failed ToolResult needs an error and no output")

    @classmethod
    def ok(cls, output: str) -> "ToolResult":
        return cls(success=True, output=output or EMPTY_OUTPUT, error=None)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, output="", error=error or "unknown error")

    @property
    def text(self) -> str:
        """Text fed back to the model for this result."""
        if self.success:
            return self.output
        return f"Error: {self.error}"


@dataclass(frozen=True)
class ToolCall:
    """Invocation requested by the model."""
    id: str
    name: str
    arguments: str = "{}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ChatResponse:
    """First choice of a chat completion."""
    content: str | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    finish_reason: str | None = None
    usage: Usage | None = None


@dataclass(frozen=True)
class AgentStep:
    """One executed invocation in the transcript."""
    thought: str
    action: str
    params: dict[str, Any]
    result: str

    def to_dict(self) -> dict:
        return {
            "thought": self.thought,
            "action": self.action,
            "params": self.params,
            "result": self.result,
        }


@dataclass
class AgentResult:
    """Full agent execution result."""
    steps: list[AgentStep]
    final_response: str
    success: bool

    def to_dict(self) -> dict:
        return {
            "steps": [step.to_dict() for step in self.steps],
            "final_response": self.final_response,
            "success": self.success,
        }

"""Telemetry and metrics logging for agent runs."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
import json
import os
import threading
import time
from typing import Any

from agent.config import TelemetryConfig


@dataclass
class LLMCallMetric:
    """Metrics for a single chat-completion call."""
    model: str
    prompt_tokens: int
    completion_tokens: int
    latency_ms: float
    error: str | None = None


@dataclass
class ToolCallMetric:
    """Metrics for a single tool call."""
    tool_name: str
    args: dict
    duration_ms: float
    success: bool
    result_summary: str
    error: str | None = None


@dataclass
class LoopIterationMetric:
    """Metrics for a single loop iteration."""
    loop: str
    iteration: int
    decision: str
    duration_ms: float


@dataclass
class LoopMetrics:
    """Session-level metrics summary."""
    session_id: str
    total_iterations: int
    tool_calls: list[ToolCallMetric]
    llm_calls: list[LLMCallMetric]
    total_duration_ms: float
    final_status: str


class Telemetry:
    """Capture structured telemetry for a session."""

    def __init__(self, config: TelemetryConfig, session_id: str):
        self.config = config
        self.session_id = session_id
        self._lock = threading.Lock()
        self._start_time = time.monotonic()
        self._llm_calls: list[LLMCallMetric] = []
        self._tool_calls: list[ToolCallMetric] = []
        self._loop_iterations: list[LoopIterationMetric] = []
        self._total_iterations = 0
        self._final_status = ""
        self._log_path: str | None = None

        if self.config.enabled:
            os.makedirs(self.config.log_dir, exist_ok=True)
            self._log_path = os.path.join(self.config.log_dir, f"{session_id}.jsonl")

    def record_llm_call(
        self,
        model: str,
        prompt_tokens: int,
        completion_tokens: int,
        latency_ms: float,
        error: str | None = None,
    ) -> None:
        """Record a chat-completion call metric."""
        if not self.config.enabled:
            return
        metric = LLMCallMetric(
            model=model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms,
            error=error,
        )
        self._llm_calls.append(metric)
        self._log_event("llm_call", asdict(metric))

    def record_tool_call(
        self,
        tool_name: str,
        args: dict,
        duration_ms: float,
        success: bool,
        result_summary: str,
        error: str | None = None,
    ) -> None:
        """Record a tool call metric."""
        if not self.config.enabled:
            return
        metric = ToolCallMetric(
            tool_name=tool_name,
            args=args,
            duration_ms=duration_ms,
            success=success,
            result_summary=result_summary[:200],
            error=error,
        )
        self._tool_calls.append(metric)
        self._log_event("tool_call", asdict(metric))

    def record_iteration(self, loop: str, iteration: int, decision: str, duration_ms: float) -> None:
        """Record a loop iteration metric."""
        if not self.config.enabled:
            return
        metric = LoopIterationMetric(
            loop=loop,
            iteration=iteration,
            decision=decision,
            duration_ms=duration_ms,
        )
        self._total_iterations += 1
        self._loop_iterations.append(metric)
        self._log_event("loop_iteration", asdict(metric))

    def finalize(self, final_status: str) -> None:
        """Finalize session metrics with the run outcome."""
        if not self.config.enabled:
            return
        self._final_status = final_status
        self._log_event("session_summary", self.summary_dict())

    def summary(self) -> LoopMetrics:
        """Return a session-level metrics summary."""
        total_duration_ms = (time.monotonic() - self._start_time) * 1000
        return LoopMetrics(
            session_id=self.session_id,
            total_iterations=self._total_iterations,
            tool_calls=list(self._tool_calls),
            llm_calls=list(self._llm_calls),
            total_duration_ms=total_duration_ms,
            final_status=self._final_status,
        )

    def summary_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable summary."""
        summary = self.summary()
        return {
            "session_id": summary.session_id,
            "total_iterations": summary.total_iterations,
            "tool_calls": [asdict(m) for m in summary.tool_calls],
            "llm_calls": [asdict(m) for m in summary.llm_calls],
            "total_duration_ms": summary.total_duration_ms,
            "final_status": summary.final_status,
        }

    def _log_event(self, event_type: str, payload: dict[str, Any]) -> None:
        if not self.config.enabled or not self._log_path:
            return
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "session_id": self.session_id,
            "event": event_type,
            **payload,
        }
        line = json.dumps(record, default=str)
        with self._lock:
            with open(self._log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

import asyncio
import json
from pathlib import Path

import pytest

from agent.config import TelemetryConfig
from agent.agent import Agent
from agent.telemetry import Telemetry

from fakes import RecordingDesktop, ScriptedClient, make_context, text_response, tool_response


def test_telemetry_records_events(tmp_path: Path):
    telemetry = Telemetry(TelemetryConfig(enabled=True, log_dir=str(tmp_path)), session_id="sess123")

    telemetry.record_llm_call(model="gpt-4o", prompt_tokens=10, completion_tokens=20, latency_ms=123.4)
    telemetry.record_tool_call(
        tool_name="mouse_click",
        args={"x": 10, "y": 20},
        duration_ms=5.5,
        success=True,
        result_summary="Clicked left at (10, 20)",
    )
    telemetry.record_iteration(loop="agent", iteration=1, decision="tool_calls", duration_ms=130.0)
    telemetry.finalize("done")

    lines = (tmp_path / "sess123.jsonl").read_text().strip().splitlines()
    events = [json.loads(line) for line in lines]
    assert [e["event"] for e in events] == ["llm_call", "tool_call", "loop_iteration", "session_summary"]
    assert events[1]["tool_name"] == "mouse_click"
    assert events[3]["final_status"] == "done"
    assert events[3]["total_iterations"] == 1

    summary = telemetry.summary()
    assert summary.session_id == "sess123"
    assert len(summary.tool_calls) == 1
    assert summary.llm_calls[0].completion_tokens == 20


def test_disabled_telemetry_writes_nothing(tmp_path: Path):
    telemetry = Telemetry(TelemetryConfig(enabled=False, log_dir=str(tmp_path / "m")), session_id="s")
    telemetry.record_tool_call("wait", {}, 1.0, True, "Waited 0ms")
    telemetry.finalize("done")

    assert not (tmp_path / "m").exists()
    assert telemetry.summary().tool_calls == []


def test_agent_run_is_recorded(tmp_path: Path):
    client = ScriptedClient([tool_response(("wait", {"ms": 0})), text_response("done")])
    context = make_context(tmp_path, client=client)
    context.telemetry = Telemetry(TelemetryConfig(enabled=True, log_dir=str(tmp_path)), context.id)

    asyncio.run(Agent(context).run("wait", include_screen=False))

    events = [json.loads(l)["event"] for l in (tmp_path / f"{context.id}.jsonl").read_text().splitlines()]
    assert events == [
        "llm_call", "tool_call", "loop_iteration",
        "llm_call", "loop_iteration",
        "session_summary",
    ]


def test_failed_capture_still_finalizes(tmp_path: Path):
    context = make_context(tmp_path, client=ScriptedClient(), desktop=RecordingDesktop(fail_capture=True))
    context.telemetry = Telemetry(TelemetryConfig(enabled=True, log_dir=str(tmp_path)), context.id)

    with pytest.raises(OSError):
        asyncio.run(Agent(context).run("open notepad"))

    events = [json.loads(l) for l in (tmp_path / f"{context.id}.jsonl").read_text().splitlines()]
    assert events[-1]["event"] == "session_summary"
    assert events[-1]["final_status"] == "error"
    assert context.client.calls == []


def test_ceiling_is_finalized_as_max_iterations(tmp_path: Path):
    client = ScriptedClient(repeat=tool_response(("wait", {"ms": 0})))
    context = make_context(tmp_path, client=client, max_iterations=2)
    context.telemetry = Telemetry(TelemetryConfig(enabled=True, log_dir=str(tmp_path)), context.id)

    result = asyncio.run(Agent(context).run("wait", include_screen=False))

    assert result.success is False
    summary = json.loads((tmp_path / f"{context.id}.jsonl").read_text().splitlines()[-1])
    assert summary["final_status"] == "max_iterations"

import logging

from goap_world.ai.planning.diagnostics import (
    FileTraceSink,
    LoggingTraceSink,
    NullTraceSink,
    trace_sink_from_config,
)
from goap_world.ai.planning.goap_planner import GoapPlanner
from goap_world.ai.planning.state import State


def test_trace_sink_from_config(tmp_path):
    assert isinstance(trace_sink_from_config(None), NullTraceSink)
    assert isinstance(trace_sink_from_config(""), NullTraceSink)
    sink = trace_sink_from_config(tmp_path / "traces")
    assert isinstance(sink, FileTraceSink)
    assert sink.path == tmp_path / "traces" / "plan_trace.txt"
    assert sink.path.parent.is_dir()


def test_file_trace_records_nodes_and_result(tmp_path, stub_action, fake_agent):
    sink = FileTraceSink(tmp_path)
    eat = stub_action("Eat", {"has_food": True}, {"is_hungry": False})
    planner = GoapPlanner(trace=sink)

    planner.plan_blocking(
        fake_agent,
        [eat],
        State.from_dict({"has_food": True, "is_hungry": True}),
        State.from_dict({"is_hungry": False}),
    )

    text = sink.path.read_text()
    assert "This node has no action" in text
    assert "Action: Eat" in text
    assert "Preconditions:\n    has_food: True" in text
    assert "Effects:\n    is_hungry: False" in text
    assert "Result: found Eat-> GOAL" in text


def test_file_trace_dumps_goal_on_failure(tmp_path, stub_action, fake_agent):
    sink = FileTraceSink(tmp_path, filename="fail.txt")
    act = stub_action("A", {}, {"a": True})
    GoapPlanner(trace=sink).plan_blocking(fake_agent, [act], State(), State.from_dict({"z": True}))

    text = (tmp_path / "fail.txt").read_text()
    assert "Goal state:\n    z: True" in text
    assert "Result: failed (unreachable)" in text


def test_logging_trace_emits_debug(caplog, stub_action, fake_agent):
    act = stub_action("A", {}, {"a": True})
    with caplog.at_level(logging.DEBUG, logger="goap_world.ai.planning.diagnostics"):
        GoapPlanner(trace=LoggingTraceSink()).plan_blocking(
            fake_agent, [act], State(), State.from_dict({"a": True})
        )

    messages = [r.getMessage() for r in caplog.records if r.name == "goap_world.ai.planning.diagnostics"]
    assert any("Node action=A" in m for m in messages)
    assert any(m.startswith("Plan found") for m in messages)

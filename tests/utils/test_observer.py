import json

from goap_world.ai.planning.state import State
from goap_world.utils import observer
from goap_world.utils.observer import PlanEventLog


def test_tick_history_and_summary(caplog):
    observer.reset_ticks()
    assert observer.average_tick() is None
    assert observer.fps_summary() == "FPS: --"

    observer.record_tick(0.01)
    observer.record_tick(0.03, budget=0.02)

    assert observer.average_tick() == 0.02
    assert observer.fps_summary() == "50.0 FPS (avg 20.0 ms)"
    assert "over budget" in caplog.text
    observer.reset_ticks()


def test_plan_event_log_records_and_dumps(tmp_path, stub_action):
    now = [1.5]
    log = PlanEventLog(agent_id=3, clock=lambda: now[0])
    eat = stub_action("Eat")

    log.plan_found(State.from_dict({"fed": True}), [eat])
    log.plan_failed(State.from_dict({"rich": True}))
    log.plan_aborted(eat)
    log.actions_finished()

    assert log.types() == ["plan_found", "plan_failed", "plan_aborted", "actions_finished"]
    assert log.events[0] == {"type": "plan_found", "goal": {"fed": True}, "plan": ["Eat"], "agent": 3, "time": 1.5}

    path = tmp_path / "out" / "events.json"
    log.dump(path)
    assert json.loads(path.read_text())[2]["action"] == "Eat"

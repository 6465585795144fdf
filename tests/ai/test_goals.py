import math

import pytest

from goap_world.ai.goals import FAILURE_PENALTY, Goal, GoalManager, score_priority, sense_needs
from goap_world.ai.planning.state import EMPTY_STATE, State
from goap_world.core.components.needs import Needs
from goap_world.systems.ai.goap_agent import GoapAgent


def _villager(world, needs=None):
    entity_id = world.spawn("villager", 2, 2)
    if needs is not None:
        world.component_manager.add_component(entity_id, needs)
    return GoapAgent(entity_id, world)


def test_score_priority_dire_goals_decay_slower():
    assert score_priority("avoid_starving", 0) == pytest.approx(100.0)
    assert score_priority("avoid_starving", 20) == pytest.approx(100 * math.exp(-1.0))
    assert score_priority("work", 20) == pytest.approx(100 * math.exp(-1.6))
    assert score_priority("avoid_starving", 50) > score_priority("work", 50)


def test_sense_needs_thresholds(world):
    agent = _villager(world, Needs(hunger=10, stamina=80, health=20, inventory={"wood": 1}))

    facts = sense_needs(world, agent.entity_id).to_dict()

    assert facts == {
        "is_hungry": True,
        "is_tired": False,
        "is_in_danger": True,
        "has_food": False,
        "has_wood": True,
    }
    assert sense_needs(world, 12345) is EMPTY_STATE


def test_manager_binds_itself(world):
    agent = _villager(world, Needs())
    manager = GoalManager(agent, [Goal("avoid_starving", attribute="hunger")])

    assert agent.provider is manager
    assert agent.sink is manager
    assert agent.goal_manager is manager


def test_highest_priority_goal_selected_and_pool_loaded(world, stub_action):
    agent = _villager(world, Needs(hunger=90, stamina=10))
    sleep = stub_action("Sleep", {}, {"regenerate_stamina": True})
    eat = stub_action("Eat", {}, {"avoid_starving": True})
    manager = GoalManager(
        agent,
        [Goal("avoid_starving", attribute="hunger"), Goal("regenerate_stamina", attribute="stamina")],
        {"avoid_starving": [eat], "regenerate_stamina": [sleep]},
    )

    goal = manager.create_goal_state()

    assert goal == State.from_dict({"regenerate_stamina": True})
    assert manager.current_goal.key == "regenerate_stamina"
    assert agent.available_actions == [sleep]


def test_no_goals_gives_empty_state(world, caplog):
    agent = _villager(world, Needs())
    manager = GoalManager(agent)

    assert manager.create_goal_state() is EMPTY_STATE
    assert "No goals found" in caplog.text


def test_failures_demote_goal(world):
    agent = _villager(world, Needs(hunger=40, stamina=40))
    hungry = Goal("avoid_starving", attribute="hunger")
    tired = Goal("regenerate_stamina", attribute="stamina")
    manager = GoalManager(agent, [hungry, tired])

    assert manager.select_goal() is hungry
    manager.current_goal = hungry
    manager.plan_failed(hungry.state)

    assert hungry.failures == 1
    assert manager.select_goal() is tired

    manager.current_goal = hungry
    manager.plan_found(hungry.state, [])
    assert hungry.failures == 0


def test_actions_finished_completes_goal(world):
    needs = Needs(hunger=10)
    agent = _villager(world, needs)
    keep = Goal("avoid_starving", attribute="hunger")
    once = Goal("visit_market", removable=True, priority=5.0)
    manager = GoalManager(agent, [keep, once])

    manager.current_goal = keep
    manager.actions_finished()
    assert needs.hunger == 100.0
    assert keep.priority == 0.0
    assert manager.current_goal is None

    manager.current_goal = once
    manager.actions_finished()
    assert once not in manager.goals
    assert manager.completed == [keep, once]


def test_listeners_receive_outcomes(world, sink, stub_action):
    agent = _villager(world, Needs())
    manager = GoalManager(agent, [Goal("work", attribute="wealth")], listeners=[sink])
    act = stub_action("Chop")

    manager.plan_found(State.from_dict({"work": True}), [act])
    manager.plan_failed(State.from_dict({"work": True}))
    manager.plan_aborted(act)
    manager.actions_finished()

    assert sink.kinds() == ["plan_found", "plan_failed", "plan_aborted", "actions_finished"]


def test_failures_demote_fixed_priority_goal(world):
    agent = _villager(world, Needs(hunger=90))
    explore = Goal("explore", priority=60.0)
    hungry = Goal("avoid_starving", attribute="hunger")
    manager = GoalManager(agent, [explore, hungry])

    picks = []
    for _ in range(8):
        manager.create_goal_state()
        picks.append(manager.current_goal.key)
        if manager.current_goal is explore:
            manager.plan_failed(explore.state)

    assert picks[:6] == ["explore"] * 6
    assert picks[6:] == ["avoid_starving", "avoid_starving"]
    assert explore.failures == 6
    assert explore.priority == pytest.approx(60.0 * FAILURE_PENALTY ** 6)
    assert explore.base_priority == 60.0

    manager.current_goal = explore
    manager.plan_found(explore.state, [])
    manager.evaluate_priorities()
    assert explore.priority == 60.0

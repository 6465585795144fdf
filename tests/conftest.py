# tests/conftest.py
from typing import Any, Dict, List

import pytest

from goap_world.ai.planning.state import State
from goap_world.core.component_manager import ComponentManager
from goap_world.core.entity_manager import EntityManager
from goap_world.core.systems_manager import SystemsManager
from goap_world.core.time_manager import TimeManager
from goap_world.core.world import World
from goap_world.systems.ai.actions import GoapAction
from goap_world.systems.movement.pathfinding import clear_obstacles


class StubAction(GoapAction):
    """Configurable action for planner and executor tests.

    ``finish_after`` counts successful ``perform`` calls before ``is_done``
    reports True; ``fail_on`` makes the n-th ``perform`` call return False.
    """

    def __init__(
        self,
        label: str,
        preconditions=None,
        effects=None,
        *,
        cost: float = 1.0,
        runnable: bool = True,
        needs_range: bool = False,
        target: int | None = None,
        finish_after: int = 1,
        fail_on: int | None = None,
    ) -> None:
        self.label = label
        super().__init__(preconditions or {}, effects or {}, base_cost=cost)
        self.runnable = runnable
        self.needs_range = needs_range
        self.planned_target = target
        self.finish_after = finish_after
        self.fail_on = fail_on
        self.performed = 0
        self.resets = 0

    @property
    def name(self) -> str:
        return self.label

    def reset(self) -> None:
        self.resets += 1
        self.performed = 0

    def can_run(self, agent: Any) -> bool:
        self.target = self.planned_target
        return self.runnable

    def perform(self, agent: Any) -> bool:
        self.performed += 1
        if self.fail_on is not None and self.performed >= self.fail_on:
            return False
        return True

    def is_done(self) -> bool:
        return self.performed >= self.finish_after

    def requires_in_range(self) -> bool:
        return self.needs_range


class RecordingSink:
    """Outcome sink that remembers every call."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def plan_found(self, goal, plan) -> None:
        self.calls.append(("plan_found", goal, [a.name for a in plan]))

    def plan_failed(self, goal) -> None:
        self.calls.append(("plan_failed", goal))

    def plan_aborted(self, action) -> None:
        self.calls.append(("plan_aborted", action.name))

    def actions_finished(self) -> None:
        self.calls.append(("actions_finished",))

    def kinds(self) -> List[str]:
        return [c[0] for c in self.calls]


class StaticProvider:
    """World-state provider returning fixed facts and goal."""

    def __init__(self, facts: Dict[str, Any], goal: Dict[str, Any]) -> None:
        self.world_state = State.from_dict(facts)
        self.goal = State.from_dict(goal)
        self.requests = 0

    def get_world_state(self):
        return self.world_state

    def create_goal_state(self):
        self.requests += 1
        return self.goal


class FakeClock:
    """Manually advanced clock; each call optionally adds ``step`` seconds."""

    def __init__(self, step: float = 0.0) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


class FakeAgent:
    def __init__(self, world: World | None = None, entity_id: int = 0) -> None:
        self.world = world
        self.entity_id = entity_id


def make_world(size=(20, 20), tick_rate: float = 10.0) -> World:
    world = World(size)
    world.entity_manager = EntityManager()
    world.component_manager = ComponentManager()
    world.systems_manager = SystemsManager()
    world.time_manager = TimeManager(tick_rate)
    return world


@pytest.fixture
def world() -> World:
    return make_world()


@pytest.fixture
def stub_action():
    return StubAction


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def static_provider():
    return StaticProvider


@pytest.fixture
def fake_clock():
    return FakeClock


@pytest.fixture
def fake_agent():
    return FakeAgent()


@pytest.fixture(autouse=True)
def _reset_obstacles():
    clear_obstacles()
    yield
    clear_obstacles()

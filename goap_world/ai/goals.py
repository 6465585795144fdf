"""Goal selection for GOAP agents.

:class:`GoalManager` is the default goal owner: it scores goals from the
agent's :class:`~goap_world.core.components.needs.Needs`, turns the winner
into a goal state, loads the matching action pool and reacts to plan
outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence
import logging
import math

from ..core.components.needs import Needs
from .planning.state import EMPTY_STATE, State

if TYPE_CHECKING:
    from ..systems.ai.actions import GoapAction
    from ..systems.ai.goap_agent import GoapAgent
    from ..systems.ai.interfaces import PlanOutcomeSink

logger = logging.getLogger(__name__)

PRIORITY_SCALE = 100.0
# Larger decay makes priority drop faster as the attribute recovers.
DIRE_DECAY = 0.05
NORMAL_DECAY = 0.08
DIRE_GOALS = frozenset({"avoid_starving", "regenerate_stamina", "seek_safety"})
FAILURE_PENALTY = 0.5

HUNGRY_BELOW = 50.0
TIRED_BELOW = 50.0
IN_DANGER_BELOW = 30.0
TRACKED_ITEMS = ("food", "wood")

Sensor = Callable[[Any, int], State]


@dataclass
class Goal:
    """A desired fact with a priority.

    ``attribute`` names the :class:`Needs` field the priority is derived from;
    goals without one score ``base_priority``, which defaults to the
    ``priority`` they were given. Either score is halved per planning failure.
    """

    key: str
    value: Any = True
    removable: bool = False
    priority: float = 0.0
    attribute: Optional[str] = None
    failures: int = 0
    base_priority: Optional[float] = None

    def __post_init__(self) -> None:
        if self.base_priority is None:
            self.base_priority = self.priority

    @property
    def state(self) -> State:
        return State.from_dict({self.key: self.value})


def score_priority(goal_key: str, attribute_value: float) -> float:
    """``A * exp(-k * value)``; dire goals decay more slowly."""

    decay = DIRE_DECAY if goal_key in DIRE_GOALS else NORMAL_DECAY
    return PRIORITY_SCALE * math.exp(-decay * attribute_value)


def sense_needs(world: Any, entity_id: int) -> State:
    """Default sensor: threshold facts from :class:`Needs` plus carried items."""

    cm = world.component_manager
    needs = cm.get_component(entity_id, Needs) if cm is not None else None
    if needs is None:
        return EMPTY_STATE
    facts: Dict[str, Any] = {
        "is_hungry": needs.hunger < HUNGRY_BELOW,
        "is_tired": needs.stamina < TIRED_BELOW,
        "is_in_danger": needs.health < IN_DANGER_BELOW,
    }
    for item in TRACKED_ITEMS:
        facts[f"has_{item}"] = needs.inventory.get(item, 0) > 0
    return State.from_dict(facts)


class GoalManager:
    """Goal owner for one agent: world-state provider, outcome sink and action pool supplier."""

    def __init__(
        self,
        agent: "GoapAgent",
        goals: Iterable[Goal] = (),
        action_pools: Mapping[str, Sequence["GoapAction"]] | None = None,
        sensor: Sensor = sense_needs,
        listeners: Iterable["PlanOutcomeSink"] = (),
    ) -> None:
        self.agent = agent
        self.goals: List[Goal] = list(goals)
        self.action_pools: Dict[str, List["GoapAction"]] = {
            key: list(actions) for key, actions in (action_pools or {}).items()
        }
        self.sensor = sensor
        self.listeners: List["PlanOutcomeSink"] = list(listeners)
        self.current_goal: Optional[Goal] = None
        self.completed: List[Goal] = []
        agent.bind(provider=self, sink=self)
        agent.goal_manager = self

    # ------------------------------------------------------------------
    # Goal selection
    # ------------------------------------------------------------------
    def add_goal(self, goal: Goal) -> None:
        self.goals.append(goal)

    def _needs(self) -> Optional[Needs]:
        cm = self.agent.world.component_manager
        if cm is None:
            return None
        return cm.get_component(self.agent.entity_id, Needs)

    def evaluate_priorities(self) -> None:
        needs = self._needs()
        for goal in self.goals:
            if goal.attribute is not None and needs is not None:
                score = score_priority(goal.key, needs.get(goal.attribute))
            else:
                score = goal.base_priority or 0.0
            goal.priority = score * FAILURE_PENALTY ** goal.failures

    def select_goal(self) -> Optional[Goal]:
        self.evaluate_priorities()
        if not self.goals:
            return None
        # max() keeps the first goal on ties
        return max(self.goals, key=lambda g: g.priority)

    # ------------------------------------------------------------------
    # WorldStateProvider
    # ------------------------------------------------------------------
    def get_world_state(self) -> State:
        return self.sensor(self.agent.world, self.agent.entity_id)

    def create_goal_state(self) -> State:
        goal = self.select_goal()
        self.current_goal = goal
        if goal is None:
            logger.error("[Agent %s] No goals found", self.agent.entity_id)
            return EMPTY_STATE
        logger.debug(
            "[Agent %s] Current goal %s=%s priority %.2f",
            self.agent.entity_id,
            goal.key,
            goal.value,
            goal.priority,
        )
        self.agent.load_actions(goal.key, self)
        return goal.state

    # ------------------------------------------------------------------
    # ActionPoolSupplier
    # ------------------------------------------------------------------
    def actions_for_goal(self, goal_id: str) -> List["GoapAction"]:
        return list(self.action_pools.get(goal_id, ()))

    # ------------------------------------------------------------------
    # PlanOutcomeSink
    # ------------------------------------------------------------------
    def plan_found(self, goal: State, plan: Sequence["GoapAction"]) -> None:
        if self.current_goal is not None:
            self.current_goal.failures = 0
        for listener in self.listeners:
            listener.plan_found(goal, plan)

    def plan_failed(self, goal: State) -> None:
        if self.current_goal is not None:
            self.current_goal.failures += 1
            logger.warning(
                "[Agent %s] Goal %s failed to plan %s time(s); demoting",
                self.agent.entity_id,
                self.current_goal.key,
                self.current_goal.failures,
            )
        for listener in self.listeners:
            listener.plan_failed(goal)

    def plan_aborted(self, action: "GoapAction") -> None:
        logger.warning("[Agent %s] Plan aborted at %s", self.agent.entity_id, action.name)
        for listener in self.listeners:
            listener.plan_aborted(action)

    def actions_finished(self) -> None:
        self.remove_current_goal()
        for listener in self.listeners:
            listener.actions_finished()

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------
    def remove_current_goal(self) -> None:
        """Drop a removable goal, otherwise reset its priority and attribute."""

        goal = self.current_goal
        if goal is None:
            return
        self.completed.append(goal)
        if goal.removable:
            if goal in self.goals:
                self.goals.remove(goal)
        else:
            goal.priority = 0.0
            needs = self._needs()
            if goal.attribute is not None and needs is not None:
                needs.set(goal.attribute, 100.0)
        self.current_goal = None


__all__ = [
    "Goal",
    "GoalManager",
    "score_priority",
    "sense_needs",
    "DIRE_GOALS",
]

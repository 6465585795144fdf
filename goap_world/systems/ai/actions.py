# goap_world/systems/ai/actions.py
"""Base classes for plannable agent actions and the per-agent action queue."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import TYPE_CHECKING, Any, ClassVar, Deque, Dict, Iterator, List, Mapping, Optional
import logging
import math

from ...ai.planning.state import Assertion, State
from ...config import CONFIG
from ...core.components.position import Position
from ...core.components.tag import Tag
from ...errors import MisconfiguredActionError

if TYPE_CHECKING:
    from .goap_agent import GoapAgent

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Action base classes
# ------------------------------------------------------------------
class GoapAction(ABC):
    """A unit of agent behaviour the planner can chain.

    Subclasses declare their contract with ``PRECONDITIONS`` and ``EFFECTS``
    mappings and implement the runtime hooks. The planner only reads
    :attr:`preconditions`, :attr:`effects` and :meth:`cost`; everything else
    is used by :class:`~goap_world.systems.ai.goap_agent.GoapAgent` while the
    plan runs.
    """

    PRECONDITIONS: ClassVar[Mapping[str, Any]] = {}
    EFFECTS: ClassVar[Mapping[str, Any]] = {}

    base_cost: float = 1.0
    duration: float = 3.0
    # Actions performed inside a zone (e.g. a building) pay no travel cost.
    inside: bool = False

    def __init__(
        self,
        preconditions: Mapping[str, Any] | State | None = None,
        effects: Mapping[str, Any] | State | None = None,
        *,
        base_cost: float | None = None,
        duration: float | None = None,
        inside: bool | None = None,
        travel_speed: float | None = None,
        travel_cost_rate: float | None = None,
    ) -> None:
        self._preconditions: State = State.coerce(
            preconditions if preconditions is not None else self.PRECONDITIONS
        )
        self._effects: State = State.coerce(effects if effects is not None else self.EFFECTS)
        if base_cost is not None:
            self.base_cost = base_cost
        if self.base_cost < 0:
            raise ValueError(f"{self.name}: base_cost must be non-negative")
        if duration is not None:
            self.duration = duration
        if inside is not None:
            self.inside = inside
        self.travel_speed: float = travel_speed or CONFIG.actions.travel_speed
        self.travel_cost_rate: float = (
            CONFIG.actions.travel_cost_rate if travel_cost_rate is None else travel_cost_rate
        )

        self.target: Optional[int] = None
        self.goal: Optional[Assertion] = None
        self.start_time: Optional[float] = None
        self._in_range: bool = False

    @property
    def name(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        return f"<{self.name} target={self.target}>"

    # ------------------------------------------------------------------
    # Planning contract
    # ------------------------------------------------------------------
    @property
    def preconditions(self) -> State:
        return self._preconditions

    @property
    def effects(self) -> State:
        return self._effects

    def add_precondition(self, key: str, value: Any) -> None:
        self._preconditions = self._preconditions.with_assertion(key, value)

    def remove_precondition(self, key: str) -> None:
        self._preconditions = self._preconditions.without_key(key)

    def add_effect(self, key: str, value: Any) -> None:
        self._effects = self._effects.with_assertion(key, value)

    def remove_effect(self, key: str) -> None:
        self._effects = self._effects.without_key(key)

    def reset_for_planning(self) -> None:
        """Clear per-attempt fields before a planning pass."""

        self._in_range = False
        self.target = None
        self.start_time = None
        self.reset()

    def reset(self) -> None:
        """Subclass hook for clearing extra per-attempt state."""

    # ------------------------------------------------------------------
    # Runtime hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def can_run(self, agent: "GoapAgent") -> bool:
        """Procedural precondition. May pick :attr:`target` as a side effect."""

    @abstractmethod
    def perform(self, agent: "GoapAgent") -> bool:
        """Run one tick of the action. ``False`` means it can no longer succeed."""

    @abstractmethod
    def is_done(self) -> bool:
        ...

    @abstractmethod
    def requires_in_range(self) -> bool:
        """Whether the agent must stand next to :attr:`target` before performing."""

    def is_in_range(self) -> bool:
        return self._in_range

    def set_in_range(self, in_range: bool) -> None:
        self._in_range = in_range

    def require_target(self) -> int:
        if self.target is None:
            raise MisconfiguredActionError(self)
        return self.target

    # ------------------------------------------------------------------
    # Cost
    # ------------------------------------------------------------------
    def estimated_travel_time(self, distance: float) -> float:
        return distance / self.travel_speed

    def target_distance(self, agent: "GoapAgent") -> float:
        """Distance from ``agent`` to :attr:`target`, ``0.0`` if either has no position."""

        world = agent.world
        own = world.position_of(agent.entity_id)
        other = world.position_of(self.target)
        if own is None or other is None:
            return 0.0
        return own.distance_to(other)

    def travel_cost(self, agent: "GoapAgent") -> float:
        if self.target is None or self.inside:
            return 0.0
        return self.estimated_travel_time(self.target_distance(agent)) * self.travel_cost_rate

    def cost(self, agent: "GoapAgent") -> float:
        return self.base_cost + self.travel_cost(agent)

    # ------------------------------------------------------------------
    # Timing helpers
    # ------------------------------------------------------------------
    def set_start_time(self, now: float) -> None:
        """Start the duration clock unless it is already running."""

        if self.start_time is None:
            self.start_time = now

    def check_duration(self, now: float) -> bool:
        """``True`` once more than :attr:`duration` seconds passed since start."""

        if self.start_time is None:
            return False
        return now - self.start_time > self.duration

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_closest_with_tag(world: Any, tag: str, position: Position) -> Optional[int]:
        """Return the id of the nearest entity tagged ``tag``, or ``None``."""

        cm = world.component_manager
        if cm is None:
            return None
        closest: Optional[int] = None
        closest_distance = math.inf
        for entity_id, tag_comp in cm.entities_with(Tag):
            if tag_comp.name != tag:
                continue
            pos = cm.get_component(entity_id, Position)
            if pos is None:
                continue
            distance = position.distance_to(pos)
            if distance < closest_distance:
                closest = entity_id
                closest_distance = distance
        return closest


class TimedAction(GoapAction):
    """Action that completes after :attr:`duration` seconds of simulation time.

    ``perform`` starts the clock on its first call, runs :meth:`on_tick` every
    tick and calls :meth:`complete` once the duration has elapsed.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._done = False

    def reset(self) -> None:
        self._done = False

    def is_done(self) -> bool:
        return self._done

    def perform(self, agent: "GoapAgent") -> bool:
        now = agent.world.now
        self.set_start_time(now)
        if not self.on_tick(agent):
            return False
        if self.check_duration(now):
            self._done = self.complete(agent)
            return self._done
        return True

    def on_tick(self, agent: "GoapAgent") -> bool:
        """Per-tick hook while the timer runs."""

        return True

    def complete(self, agent: "GoapAgent") -> bool:
        """Apply the outcome of the action. ``False`` aborts the plan."""

        return True


# ------------------------------------------------------------------
# Queue
# ------------------------------------------------------------------
class ActionQueue:
    """FIFO of planned actions owned by one agent."""

    def __init__(self, actions: List[GoapAction] | None = None) -> None:
        self._queue: Deque[GoapAction] = deque(actions or ())

    def enqueue(self, action: GoapAction) -> None:
        self._queue.append(action)

    def peek(self) -> Optional[GoapAction]:
        if self._queue:
            return self._queue[0]
        return None

    def pop(self) -> Optional[GoapAction]:
        if self._queue:
            return self._queue.popleft()
        return None

    def clear(self) -> None:
        self._queue.clear()

    def names(self) -> List[str]:
        return [a.name for a in self._queue]

    def __iter__(self) -> Iterator[GoapAction]:
        return iter(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)


def action_summary(action: GoapAction) -> Dict[str, Any]:
    """Plain dict describing ``action`` for logs and traces."""

    return {
        "action": action.name,
        "target": action.target,
        "preconditions": action.preconditions.to_dict(),
        "effects": action.effects.to_dict(),
    }


__all__ = [
    "GoapAction",
    "TimedAction",
    "ActionQueue",
    "action_summary",
]

"""Collaborator contracts consumed by :class:`GoapAgent`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Protocol, Sequence, runtime_checkable

from ...ai.planning.state import State

if TYPE_CHECKING:
    from .actions import GoapAction
    from .goap_agent import GoapAgent


@runtime_checkable
class WorldStateProvider(Protocol):
    """Supplies the facts and goal for one planning attempt."""

    def get_world_state(self) -> State: ...

    def create_goal_state(self) -> State: ...


@runtime_checkable
class PlanOutcomeSink(Protocol):
    """Observes planning and execution outcomes. Return values are ignored."""

    def plan_found(self, goal: State, plan: Sequence["GoapAction"]) -> None: ...

    def plan_failed(self, goal: State) -> None: ...

    def plan_aborted(self, action: "GoapAction") -> None: ...

    def actions_finished(self) -> None: ...


@runtime_checkable
class ActionPoolSupplier(Protocol):
    """Maps a goal identifier to the actions usable for it."""

    def actions_for_goal(self, goal_id: str) -> Iterable["GoapAction"]: ...


@runtime_checkable
class Mover(Protocol):
    """Moves an agent towards an action's target.

    Returns ``True`` once the agent is in range. Raises
    :class:`~goap_world.errors.UnreachableTargetError` when the target cannot
    be reached; the agent then aborts its plan.
    """

    def move_agent(self, agent: "GoapAgent", action: "GoapAction") -> bool: ...


class NullOutcomeSink:
    """Outcome sink that ignores every notification."""

    def plan_found(self, goal: State, plan: Sequence[Any]) -> None:
        pass

    def plan_failed(self, goal: State) -> None:
        pass

    def plan_aborted(self, action: Any) -> None:
        pass

    def actions_finished(self) -> None:
        pass


__all__ = [
    "WorldStateProvider",
    "PlanOutcomeSink",
    "ActionPoolSupplier",
    "Mover",
    "NullOutcomeSink",
]

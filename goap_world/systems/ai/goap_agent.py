# goap_world/systems/ai/goap_agent.py
"""Plan executor: drives one agent through Idle, MoveTo and PerformAction.

The agent asks its world-state provider for facts and a goal, hands them to
the planner, then walks the resulting plan one action at a time. Whenever a
plan is exhausted, cannot be found or breaks down mid-way, the machine falls
back to Idle and plans again on a later tick.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar
import logging

from ...ai.planning.base_planner import BasePlanner
from ...ai.planning.goap_planner import GoapPlanner, PlanResult, pretty_plan
from ...errors import MisconfiguredActionError, UnreachableTargetError
from .actions import ActionQueue, GoapAction
from .fsm import FSMState, StackFSM
from .interfaces import (
    ActionPoolSupplier,
    Mover,
    NullOutcomeSink,
    PlanOutcomeSink,
    WorldStateProvider,
)

logger = logging.getLogger(__name__)

A = TypeVar("A", bound=GoapAction)


class IdleState(FSMState):
    """Request a plan when the planner is free."""

    name = "Idle"

    def tick(self, fsm: StackFSM, agent: "GoapAgent") -> None:
        if agent.planner.is_planning:
            return
        if agent.provider is None:
            logger.error("[Agent %s] No world-state provider bound; cannot plan", agent.entity_id)
            return
        world_state = agent.provider.get_world_state()
        goal = agent.provider.create_goal_state()
        logger.debug(
            "[Agent %s] Planning for goal {%s} from {%s}",
            agent.entity_id,
            goal.pretty(),
            world_state.pretty(),
        )
        agent.planner.plan(
            agent,
            list(agent.available_actions),
            world_state,
            goal,
            agent.on_plan_result,
        )


class MoveToState(FSMState):
    """Close the distance to the head action's target, then pop."""

    name = "MoveTo"

    def tick(self, fsm: StackFSM, agent: "GoapAgent") -> None:
        action = agent.current_actions.peek()
        if action is None:
            fsm.pop_state()
            return
        if action.requires_in_range():
            try:
                action.require_target()
            except MisconfiguredActionError as exc:
                logger.error("[Agent %s] Fatal error: %s. Plan discarded.", agent.entity_id, exc)
                agent.abort_plan(action)
                return

        if agent.mover is None:
            arrived = True
        else:
            try:
                arrived = agent.mover.move_agent(agent, action)
            except UnreachableTargetError as exc:
                logger.error("[Agent %s] Movement failed: %s. Plan discarded.", agent.entity_id, exc)
                agent.abort_plan(action)
                return
        if arrived:
            action.set_in_range(True)
            fsm.pop_state()


class PerformActionState(FSMState):
    """Perform the head action one step per tick."""

    name = "PerformAction"

    def tick(self, fsm: StackFSM, agent: "GoapAgent") -> None:
        queue = agent.current_actions
        if not queue:
            agent.finish_plan()
            return

        if queue.peek().is_done():  # type: ignore[union-attr]
            done = queue.pop()
            logger.debug("[Agent %s] %s done", agent.entity_id, done.name if done else None)

        action = queue.peek()
        if action is None:
            agent.finish_plan()
            return

        in_range = not action.requires_in_range() or action.is_in_range()
        if not in_range:
            fsm.push_state(agent.move_to_state)
            return

        if not action.perform(agent):
            logger.warning(
                "[Agent %s] %s failed; abandoning remaining plan %s",
                agent.entity_id,
                action.name,
                queue.names(),
            )
            agent.abort_plan(action)


class GoapAgent:
    """Executor for a single agent's plans.

    ``provider`` supplies world state and goals, ``sink`` receives outcome
    notifications and ``mover`` walks the agent to action targets. A
    :class:`~goap_world.ai.goals.GoalManager` usually plays both the provider
    and the sink role and binds itself through :meth:`bind`.
    """

    def __init__(
        self,
        entity_id: int,
        world: Any,
        provider: WorldStateProvider | None = None,
        sink: PlanOutcomeSink | None = None,
        mover: Mover | None = None,
        planner: BasePlanner | None = None,
        actions: Iterable[GoapAction] = (),
    ) -> None:
        self.entity_id = entity_id
        self.world = world
        self.provider = provider
        self.sink: PlanOutcomeSink = sink or NullOutcomeSink()
        self.mover = mover
        self.planner: BasePlanner = planner or GoapPlanner()
        # Insertion-ordered set of actions.
        self._available: Dict[GoapAction, None] = dict.fromkeys(actions)
        self.current_actions = ActionQueue()
        self.paused = False
        # Set by GoalManager when it binds itself.
        self.goal_manager: Any = None

        self.idle_state = IdleState()
        self.move_to_state = MoveToState()
        self.perform_action_state = PerformActionState()
        self.fsm = StackFSM(self)
        self.fsm.push_state(self.idle_state)

    def __repr__(self) -> str:
        return f"<GoapAgent {self.entity_id} state={self.fsm.current!r}>"

    def bind(self, provider: WorldStateProvider | None = None, sink: PlanOutcomeSink | None = None) -> None:
        if provider is not None:
            self.provider = provider
        if sink is not None:
            self.sink = sink

    # ------------------------------------------------------------------
    # Action pool
    # ------------------------------------------------------------------
    @property
    def available_actions(self) -> List[GoapAction]:
        return list(self._available)

    def add_action(self, action: GoapAction) -> None:
        self._available[action] = None

    def remove_action(self, action: GoapAction) -> None:
        self._available.pop(action, None)

    def get_action(self, action_cls: Type[A]) -> Optional[A]:
        for action in self._available:
            if type(action) is action_cls:
                return action  # type: ignore[return-value]
        return None

    def clear_actions(self) -> None:
        self._available.clear()

    def load_actions(self, goal_id: str, supplier: ActionPoolSupplier, replace: bool = True) -> List[GoapAction]:
        """Fill the pool with the actions ``supplier`` maps to ``goal_id``."""

        actions = list(supplier.actions_for_goal(goal_id))
        if replace:
            self._available.clear()
        for action in actions:
            self.add_action(action)
        if actions:
            logger.info(
                "[Agent %s] Found actions for goal %s: %s",
                self.entity_id,
                goal_id,
                ", ".join(a.name for a in actions),
            )
        else:
            logger.error("[Agent %s] No actions registered for goal '%s'", self.entity_id, goal_id)
        return actions

    # ------------------------------------------------------------------
    # Plan bookkeeping
    # ------------------------------------------------------------------
    def has_action_plan(self) -> bool:
        return len(self.current_actions) > 0

    def on_plan_result(self, result: PlanResult) -> None:
        """Planner callback."""

        if result.found:
            self.current_actions = ActionQueue(list(result.plan))
            logger.info("[Agent %s] Plan: %s", self.entity_id, pretty_plan(result.plan))
            self.sink.plan_found(result.goal, list(result.plan))
            self.fsm.reset_to(self.perform_action_state)
        else:
            logger.info(
                "[Agent %s] Failed plan (%s) for goal {%s}",
                self.entity_id,
                result.reason.value if result.reason else "unknown",
                result.goal.pretty(),
            )
            self.sink.plan_failed(result.goal)
            self.fsm.reset_to(self.idle_state)

    def finish_plan(self) -> None:
        logger.info("[Agent %s] Done actions", self.entity_id)
        self.current_actions.clear()
        self.fsm.reset_to(self.idle_state)
        self.sink.actions_finished()

    def abort_plan(self, action: GoapAction) -> None:
        """Discard the remaining plan and plan again from Idle."""

        self.current_actions.clear()
        self.fsm.reset_to(self.idle_state)
        self.sink.plan_aborted(action)

    def replan(self) -> None:
        """Drop the in-flight plan and any pending search; return to Idle."""

        self.planner.cancel()
        self.current_actions.clear()
        self.fsm.reset_to(self.idle_state)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def update(self) -> None:
        if self.paused:
            return
        self.planner.update()
        self.fsm.update()


__all__ = [
    "GoapAgent",
    "IdleState",
    "MoveToState",
    "PerformActionState",
]

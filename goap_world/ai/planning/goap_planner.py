"""Forward state-space planner for goal-oriented action planning.

The planner expands the world state with every usable action whose
preconditions hold, de-duplicates reached states by their serialized form
(re-opening a state only when a strictly cheaper route reaches it) and keeps
the cheapest goal-satisfying node. The search lives in a
:class:`PlanSearch` object holding its own stack and visited set so it can be
suspended when its per-tick time slice runs out and resumed on the next tick.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional
import logging
import math
import time

from ...config import CONFIG
from .base_planner import BasePlanner
from .diagnostics import NullTraceSink, PlanTraceSink
from .state import State

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
PlanCallback = Callable[["PlanResult"], None]


class PlanStatus(str, Enum):
    RUNNING = "running"
    FOUND = "found"
    FAILED = "failed"


class PlanFailureReason(str, Enum):
    NO_ACTIONS = "no_actions"
    UNREACHABLE = "unreachable"
    BUDGET_EXCEEDED = "budget_exceeded"


@dataclass(slots=True)
class SearchNode:
    """Record in the search tree: parent link, cumulative cost, state and producing action."""

    parent: Optional["SearchNode"]
    running_cost: float
    state: State
    action: Any = None

    @property
    def action_name(self) -> str:
        return "<root>" if self.action is None else self.action.name

    def path(self) -> List[Any]:
        """Actions from the root to this node, in execution order."""

        actions: List[Any] = []
        node: Optional[SearchNode] = self
        while node is not None:
            if node.action is not None:
                actions.append(node.action)
            node = node.parent
        actions.reverse()
        return actions


@dataclass(slots=True)
class PlanResult:
    """Outcome of a planning pass."""

    status: PlanStatus
    goal: State
    plan: List[Any] = field(default_factory=list)
    cost: float = 0.0
    reason: Optional[PlanFailureReason] = None
    visited: int = 0
    leaves: int = 0

    @property
    def found(self) -> bool:
        return self.status is PlanStatus.FOUND

    @property
    def running(self) -> bool:
        return self.status is PlanStatus.RUNNING

    def describe(self) -> str:
        if self.status is PlanStatus.FOUND:
            return f"found {pretty_plan(self.plan)} cost={self.cost:g} visited={self.visited}"
        if self.status is PlanStatus.FAILED:
            reason = self.reason.value if self.reason else "unknown"
            return f"failed ({reason}) goal={{{self.goal.pretty()}}} visited={self.visited}"
        return f"running visited={self.visited}"


def pretty_plan(actions: Iterable[Any]) -> str:
    """Render actions as ``"Eat-> Sleep-> GOAL"``."""

    return "".join(f"{a.name}-> " for a in actions) + "GOAL"


class PlanSearch:
    """Resumable, budget-limited search for the cheapest action sequence.

    ``step`` runs until the stack is empty or the time slice is spent; in the
    latter case it returns a ``RUNNING`` result and keeps the stack, visited
    set and best node for the next call.
    """

    def __init__(
        self,
        agent: Any,
        usable_actions: Iterable[Any],
        world_state: State,
        goal: State,
        *,
        max_visited: int | None = None,
        clock: Clock = time.perf_counter,
        trace: PlanTraceSink | None = None,
    ) -> None:
        self.agent = agent
        self.usable_actions: List[Any] = list(usable_actions)
        self.goal = goal
        self.max_visited = max_visited if max_visited is not None else CONFIG.planner.max_visited_states
        self.clock = clock
        self.trace: PlanTraceSink = trace or NullTraceSink()

        self.root = SearchNode(None, 0.0, world_state, None)
        self.trace.node_created(self.root)
        self.stack: List[SearchNode] = [self.root]
        # Cheapest known running cost per serialized state. The root is recorded
        # but does not count towards ``max_visited``.
        self.visited: Dict[str, float] = {world_state.serialize(): 0.0}
        self.visited_count = 0
        self.leaves: List[SearchNode] = []
        self.best: Optional[SearchNode] = None
        self.best_cost = math.inf
        self.passes = 0
        self._result: Optional[PlanResult] = None

        if world_state.satisfies(goal):
            self.leaves.append(self.root)
            self.best = self.root
            self.best_cost = 0.0
            self._result = self._finish()

    @property
    def done(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[PlanResult]:
        return self._result

    def step(self, budget: float) -> PlanResult:
        """Expand nodes for at most ``budget`` seconds of wall-clock time."""

        if self._result is not None:
            return self._result

        self.passes += 1
        started = self.clock()
        while self.stack:
            node = self.stack.pop()
            if self._expand(node):
                return self._result  # type: ignore[return-value]
            if self.stack and self.clock() - started > budget:
                logger.debug(
                    "Planning pass %s yielded after %s visited states (%s on stack)",
                    self.passes,
                    self.visited_count,
                    len(self.stack),
                )
                return PlanResult(
                    PlanStatus.RUNNING,
                    self.goal,
                    visited=self.visited_count,
                    leaves=len(self.leaves),
                )

        self._result = self._finish()
        return self._result

    def _expand(self, node: SearchNode) -> bool:
        """Expand ``node``. Returns ``True`` when the search was aborted."""

        for action in self.usable_actions:
            if not node.state.satisfies(action.preconditions):
                continue
            next_state = node.state.apply(action.effects)
            key = next_state.serialize()
            running_cost = node.running_cost + action.cost(self.agent)
            known = self.visited.get(key)
            if known is not None and running_cost >= known:
                continue
            self.visited[key] = running_cost
            self.visited_count += 1
            if self.visited_count > self.max_visited:
                logger.error(
                    "Max visited states (%s) exceeded. Planning failed for goal {%s}",
                    self.max_visited,
                    self.goal.pretty(),
                )
                self.trace.state_dumped("Current state", node.state)
                self.trace.state_dumped("Goal state", self.goal)
                self._result = PlanResult(
                    PlanStatus.FAILED,
                    self.goal,
                    reason=PlanFailureReason.BUDGET_EXCEEDED,
                    visited=self.visited_count,
                    leaves=len(self.leaves),
                )
                return True

            child = SearchNode(node, running_cost, next_state, action)
            self.trace.node_created(child)
            if next_state.satisfies(self.goal):
                self.leaves.append(child)
                if child.running_cost < self.best_cost:
                    self.best = child
                    self.best_cost = child.running_cost
            else:
                self.stack.append(child)
        return False

    def _finish(self) -> PlanResult:
        if self.best is None:
            self.trace.state_dumped("Goal state", self.goal)
            return PlanResult(
                PlanStatus.FAILED,
                self.goal,
                reason=PlanFailureReason.UNREACHABLE,
                visited=self.visited_count,
            )
        return PlanResult(
            PlanStatus.FOUND,
            self.goal,
            plan=self.best.path(),
            cost=self.best.running_cost,
            visited=self.visited_count,
            leaves=len(self.leaves),
        )


class GoapPlanner(BasePlanner):
    """Plan action sequences over several ticks and report via callback."""

    def __init__(
        self,
        max_visited: int | None = None,
        time_slice: float | None = None,
        trace: PlanTraceSink | None = None,
        clock: Clock = time.perf_counter,
    ) -> None:
        self.max_visited = max_visited if max_visited is not None else CONFIG.planner.max_visited_states
        self.time_slice = time_slice if time_slice is not None else CONFIG.planner.time_slice_seconds
        self.trace: PlanTraceSink = trace or NullTraceSink()
        self.clock = clock
        self._search: Optional[PlanSearch] = None
        self._callback: Optional[PlanCallback] = None

    @property
    def is_planning(self) -> bool:
        return self._search is not None

    def plan(
        self,
        agent: Any,
        available_actions: Iterable[Any],
        world_state: State,
        goal: State,
        callback: PlanCallback,
    ) -> None:
        """Start a planning pass; ``callback`` receives the final :class:`PlanResult`."""

        if self._search is not None:
            logger.warning("plan() called while a search is pending; dropping the old search")
            self.cancel()

        actions = list(available_actions)
        for action in actions:
            action.reset_for_planning()

        if not actions:
            logger.warning("No actions available for goal {%s}", goal.pretty())
            self._deliver(
                callback,
                PlanResult(PlanStatus.FAILED, goal, reason=PlanFailureReason.NO_ACTIONS),
            )
            return

        usable = [a for a in actions if a.can_run(agent)]
        logger.debug(
            "Usable actions for goal {%s}: %s",
            goal.pretty(),
            ", ".join(a.name for a in usable) or "<none>",
        )
        self._search = PlanSearch(
            agent,
            usable,
            world_state,
            goal,
            max_visited=self.max_visited,
            clock=self.clock,
            trace=self.trace,
        )
        self._callback = callback
        self.update()

    def update(self) -> None:
        """Run one time slice of the pending search, if any."""

        search = self._search
        if search is None:
            return
        result = search.step(self.time_slice)
        if result.running:
            return
        callback = self._callback
        self._search = None
        self._callback = None
        if callback is not None:
            self._deliver(callback, result)

    def cancel(self) -> None:
        if self._search is not None:
            logger.debug("Cancelled pending search for goal {%s}", self._search.goal.pretty())
        self._search = None
        self._callback = None

    def plan_blocking(
        self,
        agent: Any,
        available_actions: Iterable[Any],
        world_state: State,
        goal: State,
    ) -> PlanResult:
        """Run a full planning pass to completion and return its result."""

        results: List[PlanResult] = []
        self.plan(agent, available_actions, world_state, goal, results.append)
        while self.is_planning:
            self.update()
        return results[0]

    def _deliver(self, callback: PlanCallback, result: PlanResult) -> None:
        if result.found:
            logger.info(
                "Plan found for goal {%s}: %s (cost %.2f, %s states visited)",
                result.goal.pretty(),
                pretty_plan(result.plan),
                result.cost,
                result.visited,
            )
        elif result.reason is PlanFailureReason.UNREACHABLE:
            logger.warning("Failed plan for goal {%s}: no action sequence reaches it", result.goal.pretty())
        self.trace.plan_completed(result)
        callback(result)


__all__ = [
    "PlanStatus",
    "PlanFailureReason",
    "SearchNode",
    "PlanResult",
    "PlanSearch",
    "GoapPlanner",
    "pretty_plan",
]

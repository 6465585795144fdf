# goap_world/systems/movement/movement_system.py
"""Walk agents towards the targets of their current actions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Tuple
import logging

from ...config import CONFIG
from ...errors import UnreachableTargetError
from .pathfinding import is_blocked, next_step

if TYPE_CHECKING:
    from ..ai.actions import GoapAction
    from ..ai.goap_agent import GoapAgent

logger = logging.getLogger(__name__)


class MovementSystem:
    """Grid mover used by the MoveTo state.

    Each agent may advance at most ``speed`` cells per tick along an A* path
    and counts as arrived once within ``arrive_distance`` of the target. An
    agent that cannot take a single step for more than ``max_stalled_ticks``
    ticks in a row gets :class:`UnreachableTargetError`.
    """

    def __init__(
        self,
        world: Any,
        speed: int | None = None,
        arrive_distance: float | None = None,
        max_stalled_ticks: int | None = None,
    ) -> None:
        self.world = world
        self.speed = speed if speed is not None else CONFIG.movement.speed
        self.arrive_distance = (
            arrive_distance if arrive_distance is not None else CONFIG.movement.arrive_distance
        )
        self.max_stalled_ticks = (
            max_stalled_ticks if max_stalled_ticks is not None else CONFIG.movement.max_stalled_ticks
        )
        if self.arrive_distance < 1:
            raise ValueError("arrive_distance must be at least 1")
        self._steps_this_tick: Dict[int, int] = {}
        # (entity, target) -> consecutive ticks without a step
        self._stalled: Dict[Tuple[int, Any], int] = {}
        self.tick = 0

    def update(self, tick: int) -> None:
        self.tick = tick
        self._steps_this_tick.clear()

    def in_range(self, agent: "GoapAgent", action: "GoapAction") -> bool:
        own = self.world.position_of(agent.entity_id)
        target = self.world.position_of(action.target)
        if own is None or target is None:
            return False
        return own.distance_to(target) <= self.arrive_distance

    def move_agent(self, agent: "GoapAgent", action: "GoapAction") -> bool:
        own = self.world.position_of(agent.entity_id)
        target = self.world.position_of(action.target)
        if own is None:
            logger.warning("[Tick %s] Movement: agent %s has no Position", self.tick, agent.entity_id)
            return False
        if target is None:
            # Target vanished; let the action's perform step decide what that means.
            logger.warning(
                "[Tick %s] Movement: target %s of %s has no Position",
                self.tick,
                action.target,
                action.name,
            )
            return True

        goal = target.as_tuple()
        stall_key = (agent.entity_id, action.target)
        steps_before = steps = self._steps_this_tick.get(agent.entity_id, 0)
        while steps < self.speed and own.distance_to(target) > self.arrive_distance:
            step = next_step(own.as_tuple(), goal, self.world.size)
            if step is None or step == goal or is_blocked(step):
                logger.debug(
                    "[Tick %s] Movement: agent %s has no path to %s",
                    self.tick,
                    agent.entity_id,
                    goal,
                )
                break
            own.x, own.y = step
            steps += 1
        self._steps_this_tick[agent.entity_id] = steps

        arrived = own.distance_to(target) <= self.arrive_distance
        if arrived or steps > steps_before:
            self._stalled.pop(stall_key, None)
        elif steps_before < self.speed:
            stalled = self._stalled.get(stall_key, 0) + 1
            self._stalled[stall_key] = stalled
            if stalled > self.max_stalled_ticks:
                del self._stalled[stall_key]
                raise UnreachableTargetError(action, goal, stalled)
        if arrived:
            logger.debug(
                "[Tick %s] Movement: agent %s reached %s for %s",
                self.tick,
                agent.entity_id,
                goal,
                action.name,
            )
        return arrived


__all__ = ["MovementSystem"]

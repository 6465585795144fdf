"""Villager actions: gather and eat food, sleep, chop and deliver wood."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List
import logging

from ...core.components.needs import Needs
from ...core.components.position import Position
from ...systems.ai.actions import GoapAction, TimedAction

if TYPE_CHECKING:
    from ...systems.ai.goap_agent import GoapAgent

logger = logging.getLogger(__name__)


def _needs(agent: "GoapAgent") -> Needs | None:
    return agent.world.component_manager.get_component(agent.entity_id, Needs)


class _TargetedAction(GoapAction):
    """Picks the closest entity tagged :attr:`TARGET_TAG` in ``can_run``."""

    TARGET_TAG = ""

    def can_run(self, agent: "GoapAgent") -> bool:
        pos = agent.world.position_of(agent.entity_id)
        if pos is None:
            return False
        self.target = self.find_closest_with_tag(agent.world, self.TARGET_TAG, pos)
        return self.target is not None

    def requires_in_range(self) -> bool:
        return True


class PickUpFood(_TargetedAction):
    """Walk to the nearest food item and carry it."""

    TARGET_TAG = "food"
    EFFECTS = {"has_food": True}
    base_cost = 1.0

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._done = False

    def reset(self) -> None:
        self._done = False

    def is_done(self) -> bool:
        return self._done

    def perform(self, agent: "GoapAgent") -> bool:
        world = agent.world
        needs = _needs(agent)
        if needs is None or world.position_of(self.target) is None:
            # Someone else took it.
            return False
        needs.carry("food")
        world.remove_entity(self.target)
        self._done = True
        return True


class ForageBerries(TimedAction):
    """Slow fallback that produces food anywhere."""

    EFFECTS = {"has_food": True}
    base_cost = 6.0
    duration = 2.0

    def can_run(self, agent: "GoapAgent") -> bool:
        return True

    def requires_in_range(self) -> bool:
        return False

    def complete(self, agent: "GoapAgent") -> bool:
        needs = _needs(agent)
        if needs is None:
            return False
        needs.carry("food")
        return True


class EatFood(TimedAction):
    PRECONDITIONS = {"has_food": True}
    EFFECTS = {"has_food": False, "avoid_starving": True}
    base_cost = 1.0
    duration = 1.0

    def can_run(self, agent: "GoapAgent") -> bool:
        return True

    def requires_in_range(self) -> bool:
        return False

    def complete(self, agent: "GoapAgent") -> bool:
        needs = _needs(agent)
        if needs is None or not needs.consume("food"):
            return False
        needs.set("hunger", 100.0)
        return True


class Sleep(TimedAction):
    """Sleep in the nearest bed. Beds are indoors, so no travel cost."""

    EFFECTS = {"regenerate_stamina": True}
    inside = True
    duration = 3.0

    def can_run(self, agent: "GoapAgent") -> bool:
        pos = agent.world.position_of(agent.entity_id)
        if pos is None:
            return False
        self.target = self.find_closest_with_tag(agent.world, "bed", pos)
        return self.target is not None

    def requires_in_range(self) -> bool:
        return True

    def complete(self, agent: "GoapAgent") -> bool:
        needs = _needs(agent)
        if needs is None:
            return False
        needs.set("stamina", 100.0)
        return True


class ChopWood(TimedAction):
    EFFECTS = {"has_wood": True}
    duration = 2.0

    def can_run(self, agent: "GoapAgent") -> bool:
        pos = agent.world.position_of(agent.entity_id)
        if pos is None:
            return False
        self.target = self.find_closest_with_tag(agent.world, "tree", pos)
        return self.target is not None

    def requires_in_range(self) -> bool:
        return True

    def on_tick(self, agent: "GoapAgent") -> bool:
        needs = _needs(agent)
        if needs is None:
            return False
        needs.set("stamina", needs.stamina - 1.0)
        return True

    def complete(self, agent: "GoapAgent") -> bool:
        needs = _needs(agent)
        if needs is None:
            return False
        needs.carry("wood")
        return True


class DeliverWood(GoapAction):
    """Drop carried wood at the stockpile for pay."""

    PRECONDITIONS = {"has_wood": True}
    EFFECTS = {"has_wood": False, "work": True}

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._done = False

    def reset(self) -> None:
        self._done = False

    def is_done(self) -> bool:
        return self._done

    def can_run(self, agent: "GoapAgent") -> bool:
        pos: Position | None = agent.world.position_of(agent.entity_id)
        if pos is None:
            return False
        self.target = self.find_closest_with_tag(agent.world, "stockpile", pos)
        return self.target is not None

    def requires_in_range(self) -> bool:
        return True

    def perform(self, agent: "GoapAgent") -> bool:
        needs = _needs(agent)
        if needs is None or not needs.consume("wood"):
            logger.warning("[Agent %s] DeliverWood without wood", agent.entity_id)
            return False
        needs.set("wealth", needs.wealth + 10.0)
        self._done = True
        return True


def villager_action_pools() -> Dict[str, List[GoapAction]]:
    """Fresh action instances keyed by the goal they serve."""

    return {
        "avoid_starving": [PickUpFood(), ForageBerries(), EatFood()],
        "regenerate_stamina": [Sleep()],
        "work": [ChopWood(), DeliverWood()],
    }


__all__ = [
    "PickUpFood",
    "ForageBerries",
    "EatFood",
    "Sleep",
    "ChopWood",
    "DeliverWood",
    "villager_action_pools",
]

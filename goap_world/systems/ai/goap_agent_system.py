# goap_world/systems/ai/goap_agent_system.py
from __future__ import annotations

from typing import Any, Dict, Iterator, Optional
import logging

from .goap_agent import GoapAgent

logger = logging.getLogger(__name__)


class GoapAgentSystem:
    """Tick every registered :class:`GoapAgent` once per world tick."""

    def __init__(self, world: Any) -> None:
        self.world = world
        self._agents: Dict[int, GoapAgent] = {}

    def add_agent(self, agent: GoapAgent) -> None:
        self._agents[agent.entity_id] = agent

    def remove_agent(self, entity_id: int) -> Optional[GoapAgent]:
        agent = self._agents.pop(entity_id, None)
        if agent is not None:
            agent.planner.cancel()
        return agent

    def get_agent(self, entity_id: int) -> Optional[GoapAgent]:
        return self._agents.get(entity_id)

    def __iter__(self) -> Iterator[GoapAgent]:
        return iter(list(self._agents.values()))

    def __len__(self) -> int:
        return len(self._agents)

    def update(self, tick: int) -> None:
        em = getattr(self.world, "entity_manager", None)
        for entity_id, agent in list(self._agents.items()):
            if em is not None and not em.has_entity(entity_id):
                logger.info("[Tick %s][GOAP System] Agent %s no longer exists; removing", tick, entity_id)
                self.remove_agent(entity_id)
                continue
            if agent.paused:
                logger.debug("[Tick %s][GOAP System] Agent %s paused", tick, entity_id)
                continue
            agent.update()


__all__ = ["GoapAgentSystem"]

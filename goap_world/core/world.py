"""Simple world container for core managers."""

from __future__ import annotations

from typing import Any, Optional, Tuple

from .components.position import Position
from .components.tag import Tag


class World:
    """Lightweight holder for manager references and the grid size."""

    def __init__(self, size: Tuple[int, int]):
        self.size: Tuple[int, int] = size
        self.config: Any | None = None

        # These managers will be populated during the bootstrapping phase.
        self.entity_manager: Any | None = None
        self.component_manager: Any | None = None
        self.systems_manager: Any | None = None
        self.time_manager: Any | None = None

        # Set by bootstrap so actions can reach the movement/agent systems.
        self.movement_system: Any | None = None
        self.agent_system: Any | None = None

    # ------------------------------------------------------------------
    # Entity operations
    # ------------------------------------------------------------------
    def spawn(self, name: str, x: int, y: int, tag: str | None = None) -> int:
        """Create an entity at ``(x, y)`` and return its id."""

        if self.entity_manager is None or self.component_manager is None:
            raise RuntimeError("World managers are not initialised")
        if not (0 <= x < self.size[0] and 0 <= y < self.size[1]):
            raise ValueError(f"Position ({x}, {y}) outside world of size {self.size}")
        entity_id = self.entity_manager.create_entity(name)
        self.component_manager.add_component(entity_id, Position(x, y))
        if tag is not None:
            self.component_manager.add_component(entity_id, Tag(tag))
        return entity_id

    def remove_entity(self, entity_id: int) -> None:
        if self.entity_manager is not None:
            self.entity_manager.destroy_entity(entity_id)
        if self.component_manager is not None:
            self.component_manager.remove_entity(entity_id)

    def position_of(self, entity_id: int | None) -> Optional[Position]:
        if entity_id is None or self.component_manager is None:
            return None
        return self.component_manager.get_component(entity_id, Position)

    @property
    def now(self) -> float:
        """Simulation time in seconds, ``0.0`` before a time manager exists."""

        if self.time_manager is None:
            return 0.0
        return self.time_manager.now

    # ------------------------------------------------------------------
    # System operations
    # ------------------------------------------------------------------
    def register_system(self, system: Any) -> None:
        if self.systems_manager is not None:
            self.systems_manager.register(system)

    def unregister_system(self, system: Any) -> None:
        if self.systems_manager is not None:
            self.systems_manager.unregister(system)


__all__ = ["World"]

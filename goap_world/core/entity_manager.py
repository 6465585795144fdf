"""Entity management for goap_world."""

from __future__ import annotations

from typing import Dict, Optional


class EntityManager:
    """Allocate entity ids and remember an optional display name for each."""

    def __init__(self) -> None:
        self._next_id: int = 0
        # Mapping of entity_id -> display name
        self._names: Dict[int, str] = {}

    # ------------------------------------------------------------------
    # Creation / Destruction
    # ------------------------------------------------------------------
    def create_entity(self, name: str | None = None) -> int:
        """Create a new entity and return its unique ID."""

        self._next_id += 1
        entity_id = self._next_id
        self._names[entity_id] = name or f"entity-{entity_id}"
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Forget ``entity_id``. Components are dropped by the world."""

        self._names.pop(entity_id, None)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def has_entity(self, entity_id: int) -> bool:
        return entity_id in self._names

    def name_of(self, entity_id: int) -> Optional[str]:
        return self._names.get(entity_id)

    @property
    def all_entities(self) -> Dict[int, str]:
        return self._names


__all__ = ["EntityManager"]

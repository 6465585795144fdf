# Component Manager for ECS-style storage.
from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Type, TypeVar

T = TypeVar("T")


class ComponentManager:
    """Track components attached to entities, keyed by component class."""

    def __init__(self) -> None:
        # Maps entity id to {component class: component instance}
        self._components: Dict[int, Dict[type, Any]] = {}

    # ------------------------------------------------------------------
    # Component access API
    # ------------------------------------------------------------------
    def add_component(self, entity_id: int, component: Any) -> None:
        """Attach ``component`` to ``entity_id``, replacing one of the same class."""
        self._components.setdefault(entity_id, {})[type(component)] = component

    def get_component(self, entity_id: int, component_cls: Type[T]) -> Optional[T]:
        """Return a component of the given class for an entity, if present."""
        comps = self._components.get(entity_id)
        if not comps:
            return None
        return comps.get(component_cls)

    def remove_component(self, entity_id: int, component_cls: Type[T]) -> Optional[T]:
        """Remove and return the component of the given class from an entity."""
        comps = self._components.get(entity_id)
        if not comps:
            return None
        return comps.pop(component_cls, None)

    def remove_entity(self, entity_id: int) -> None:
        self._components.pop(entity_id, None)

    def components_for_entity(self, entity_id: int) -> Iterable[Any]:
        """Iterate over all components attached to an entity."""
        return self._components.get(entity_id, {}).values()

    def entities_with(self, component_cls: Type[T]) -> Iterator[Tuple[int, T]]:
        """Yield ``(entity_id, component)`` for every entity carrying ``component_cls``."""
        for entity_id, comps in list(self._components.items()):
            comp = comps.get(component_cls)
            if comp is not None:
                yield entity_id, comp


__all__ = ["ComponentManager"]

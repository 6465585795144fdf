"""Component holding an agent's bodily and social attributes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class Needs:
    """Attribute values in the range ``0..100`` where 100 means satisfied.

    ``inventory`` counts carried items by name.
    """

    hunger: float = 100.0
    stamina: float = 100.0
    health: float = 100.0
    social: float = 100.0
    wealth: float = 100.0
    inventory: Dict[str, int] = field(default_factory=dict)

    def get(self, attribute: str) -> float:
        return float(getattr(self, attribute))

    def set(self, attribute: str, value: float) -> None:
        setattr(self, attribute, max(0.0, min(100.0, float(value))))

    def carry(self, item: str, amount: int = 1) -> None:
        self.inventory[item] = self.inventory.get(item, 0) + amount

    def consume(self, item: str) -> bool:
        """Remove one ``item`` from the inventory. Returns ``False`` if absent."""

        count = self.inventory.get(item, 0)
        if count <= 0:
            return False
        if count == 1:
            del self.inventory[item]
        else:
            self.inventory[item] = count - 1
        return True


__all__ = ["Needs"]

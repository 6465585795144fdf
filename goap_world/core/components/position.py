"""Position component."""

from __future__ import annotations

from dataclasses import dataclass
import math


@dataclass
class Position:
    """Simple 2D coordinate."""

    x: int
    y: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

    def distance_to(self, other: "Position") -> float:
        """Euclidean distance to ``other``."""

        return math.hypot(other.x - self.x, other.y - self.y)


__all__ = ["Position"]

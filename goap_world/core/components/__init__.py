"""components package."""

from .needs import Needs
from .position import Position
from .tag import Tag

__all__ = ["Needs", "Position", "Tag"]

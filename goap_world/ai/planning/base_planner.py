"""Abstract planner interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable

from .state import State


class BasePlanner(ABC):
    """Base class for planning algorithms.

    Planning may span several ticks, so results are delivered through
    ``callback`` rather than returned. ``update`` is called once per tick to
    let a pending search continue.
    """

    @abstractmethod
    def plan(
        self,
        agent: Any,
        available_actions: Iterable[Any],
        world_state: State,
        goal: State,
        callback: Callable[[Any], None],
    ) -> None:
        """Start planning for ``agent`` and report through ``callback``."""
        raise NotImplementedError

    def update(self) -> None:
        """Advance a pending search. Planners that finish synchronously ignore this."""

    @property
    def is_planning(self) -> bool:
        return False

    def cancel(self) -> None:
        """Drop any pending search without reporting a result."""


__all__ = ["BasePlanner"]

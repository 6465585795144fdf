"""Runtime observability helpers."""

from __future__ import annotations

import json
import logging
from collections import deque
from pathlib import Path
from typing import Any, Deque, Dict, List, Sequence

from ..ai.planning.state import State

logger = logging.getLogger(__name__)

# Rolling history of the last 1000 tick durations in seconds
_TICK_HISTORY_LEN = 1000
_tick_durations: Deque[float] = deque(maxlen=_TICK_HISTORY_LEN)


def record_tick(duration: float, budget: float | None = None) -> None:
    """Append a tick ``duration`` in seconds; warn when it exceeds ``budget``."""

    _tick_durations.append(duration)
    if budget is not None and duration > budget:
        logger.warning("Tick took %.1f ms - over budget (%.1f ms)", duration * 1000, budget * 1000)


def average_tick() -> float | None:
    if not _tick_durations:
        return None
    return sum(_tick_durations) / len(_tick_durations)


def fps_summary() -> str:
    """Average FPS and tick time based on recorded durations."""

    avg = average_tick()
    if avg is None:
        return "FPS: --"
    fps = 1.0 / avg if avg > 0 else float("inf")
    return f"{fps:.1f} FPS (avg {avg*1000:.1f} ms)"


def reset_ticks() -> None:
    _tick_durations.clear()


def log_event(
    event_type: str,
    data: Dict[str, Any],
    log: List[Dict[str, Any]],
) -> None:
    """Append an event dict to ``log``."""

    event = {"type": event_type}
    event.update(data)
    log.append(event)


class PlanEventLog:
    """Plan-outcome sink that records every notification as a plain dict.

    Attach it to a :class:`~goap_world.ai.goals.GoalManager` as a listener, or
    bind it directly to a :class:`~goap_world.systems.ai.goap_agent.GoapAgent`.
    """

    def __init__(self, agent_id: int | None = None, clock: Any = None) -> None:
        self.agent_id = agent_id
        self.clock = clock
        self.events: List[Dict[str, Any]] = []

    def _record(self, event_type: str, **data: Any) -> None:
        data["agent"] = self.agent_id
        if self.clock is not None:
            data["time"] = self.clock()
        log_event(event_type, data, self.events)

    def plan_found(self, goal: State, plan: Sequence[Any]) -> None:
        self._record("plan_found", goal=goal.to_dict(), plan=[a.name for a in plan])

    def plan_failed(self, goal: State) -> None:
        self._record("plan_failed", goal=goal.to_dict())

    def plan_aborted(self, action: Any) -> None:
        self._record("plan_aborted", action=action.name)

    def actions_finished(self) -> None:
        self._record("actions_finished")

    def types(self) -> List[str]:
        return [e["type"] for e in self.events]

    def dump(self, path: str | Path) -> None:
        """Write recorded events to ``path`` as JSON for offline inspection."""

        p = Path(path)
        if not p.parent.exists():
            p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("w", encoding="utf-8") as fh:
            json.dump(self.events, fh, indent=2, default=str)


__all__ = [
    "record_tick",
    "average_tick",
    "fps_summary",
    "reset_ticks",
    "log_event",
    "PlanEventLog",
]

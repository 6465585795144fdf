"""Pluggable trace sinks for planner diagnostics.

The planner reports every node it creates, interesting states and the final
result to a sink. The default sink does nothing; the others exist for
profiling a misbehaving action set.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol
import logging

from .state import State

if TYPE_CHECKING:
    from .goap_planner import PlanResult, SearchNode

logger = logging.getLogger(__name__)


class PlanTraceSink(Protocol):
    def node_created(self, node: "SearchNode") -> None: ...

    def state_dumped(self, label: str, state: State) -> None: ...

    def plan_completed(self, result: "PlanResult") -> None: ...


class NullTraceSink:
    """Discard everything."""

    def node_created(self, node: "SearchNode") -> None:
        pass

    def state_dumped(self, label: str, state: State) -> None:
        pass

    def plan_completed(self, result: "PlanResult") -> None:
        pass


class LoggingTraceSink:
    """Emit trace records at DEBUG level on ``goap_world.ai.planning.diagnostics``."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def node_created(self, node: "SearchNode") -> None:
        self.log.debug(
            "Node action=%s running_cost=%s state={%s}",
            node.action_name,
            node.running_cost,
            node.state.pretty(),
        )

    def state_dumped(self, label: str, state: State) -> None:
        self.log.debug("%s: {%s}", label, state.pretty())

    def plan_completed(self, result: "PlanResult") -> None:
        self.log.debug("Plan %s", result.describe())


def _format_action(action: Any) -> list[str]:
    lines = [f"Action: {action.name}", "Preconditions:"]
    lines.extend(f"    {a.key}: {a.value}" for a in sorted(action.preconditions, key=lambda a: a.canonical()))
    lines.append("Effects:")
    lines.extend(f"    {a.key}: {a.value}" for a in sorted(action.effects, key=lambda a: a.canonical()))
    return lines


class FileTraceSink:
    """Append human readable traces to ``plan_trace.txt`` in ``directory``."""

    def __init__(self, directory: str | Path, filename: str = "plan_trace.txt") -> None:
        self.path = Path(directory) / filename
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def _write(self, lines: list[str]) -> None:
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write("\n".join(lines))
            fh.write("\n\n")

    def node_created(self, node: "SearchNode") -> None:
        if node.action is None:
            self._write(["This node has no action"])
            return
        lines = _format_action(node.action)
        lines.insert(1, f"Node running cost: {node.running_cost}")
        self._write(lines)

    def state_dumped(self, label: str, state: State) -> None:
        lines = [f"{label}:"]
        lines.extend(f"    {a.key}: {a.value}" for a in sorted(state, key=lambda a: a.canonical()))
        self._write(lines)

    def plan_completed(self, result: "PlanResult") -> None:
        lines = [f"Result: {result.describe()}"]
        for action in result.plan:
            lines.extend(_format_action(action))
        self._write(lines)


def trace_sink_from_config(trace_dir: str | Path | None) -> PlanTraceSink:
    """Return a :class:`FileTraceSink` when ``trace_dir`` is set, else a null sink."""

    if trace_dir:
        return FileTraceSink(trace_dir)
    return NullTraceSink()


__all__ = [
    "PlanTraceSink",
    "NullTraceSink",
    "LoggingTraceSink",
    "FileTraceSink",
    "trace_sink_from_config",
]

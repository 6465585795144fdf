"""Simple configuration loader for goap_world."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.yaml"


@dataclass
class WorldConfig:
    """Configuration values for the world section."""

    size: tuple[int, int] = (32, 32)
    tick_rate: float = 10.0


@dataclass
class PlannerConfig:
    """Search budget for the action planner."""

    max_visited_states: int = 1000
    time_slice_seconds: float = 0.1
    trace_dir: Optional[str] = None


@dataclass
class ActionConfig:
    """Travel cost parameters shared by every action."""

    travel_speed: float = 0.5
    travel_cost_rate: float = 1.0


@dataclass
class MovementConfig:
    """How fast agents walk and how close counts as arrived."""

    speed: int = 1
    arrive_distance: float = 1.0
    max_stalled_ticks: int = 10


@dataclass
class LoggingConfig:
    global_level: str = "INFO"
    module_levels: Dict[str, str] = field(default_factory=dict)


@dataclass
class Config:
    """Top level configuration dataclass."""

    world: WorldConfig
    planner: PlannerConfig
    actions: ActionConfig
    movement: MovementConfig
    logging: LoggingConfig


def _parse_config(data: dict[str, Any]) -> Config:
    """Convert raw ``data`` into :class:`Config`."""

    world_data = data.get("world") or {}
    world = WorldConfig(
        size=tuple(world_data.get("size", [32, 32])),
        tick_rate=float(world_data.get("tick_rate", 10)),
    )

    planner_data = data.get("planner") or {}
    planner = PlannerConfig(
        max_visited_states=int(planner_data.get("max_visited_states", 1000)),
        time_slice_seconds=float(planner_data.get("time_slice_seconds", 0.1)),
        trace_dir=planner_data.get("trace_dir"),
    )
    if planner.max_visited_states <= 0:
        raise ValueError("planner.max_visited_states must be positive")
    if planner.time_slice_seconds <= 0:
        raise ValueError("planner.time_slice_seconds must be positive")

    action_data = data.get("actions") or {}
    actions = ActionConfig(
        travel_speed=float(action_data.get("travel_speed", 0.5)),
        travel_cost_rate=float(action_data.get("travel_cost_rate", 1.0)),
    )
    if actions.travel_speed <= 0:
        raise ValueError("actions.travel_speed must be positive")

    movement_data = data.get("movement") or {}
    movement = MovementConfig(
        speed=int(movement_data.get("speed", 1)),
        arrive_distance=float(movement_data.get("arrive_distance", 1)),
        max_stalled_ticks=int(movement_data.get("max_stalled_ticks", 10)),
    )
    if movement.speed <= 0:
        raise ValueError("movement.speed must be positive")
    # Paths end next to the target cell, never on it.
    if movement.arrive_distance < 1:
        raise ValueError("movement.arrive_distance must be at least 1")
    if movement.max_stalled_ticks <= 0:
        raise ValueError("movement.max_stalled_ticks must be positive")

    logging_data = data.get("logging") or {}
    logging_cfg = LoggingConfig(
        global_level=str(logging_data.get("global_level", "INFO")).upper(),
        module_levels=dict(logging_data.get("module_levels") or {}),
    )

    return Config(
        world=world,
        planner=planner,
        actions=actions,
        movement=movement,
        logging=logging_cfg,
    )


def load_config(path: Path = CONFIG_PATH) -> Config:
    """Load configuration from ``path`` and return a :class:`Config`."""

    path = Path(path)
    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
    else:
        raw = {}
    return _parse_config(raw)


# Load configuration at module import time.
CONFIG = load_config()


__all__ = [
    "CONFIG",
    "Config",
    "WorldConfig",
    "PlannerConfig",
    "ActionConfig",
    "MovementConfig",
    "LoggingConfig",
    "load_config",
]

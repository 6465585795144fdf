# goap_world/main.py
"""World bootstrap and minimal tick loop."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional
import argparse
import logging
import time

from .config import CONFIG, Config, load_config
from .core.world import World
from .core.entity_manager import EntityManager
from .core.component_manager import ComponentManager
from .core.systems_manager import SystemsManager
from .core.time_manager import TimeManager
from .core.components.needs import Needs
from .ai.goals import Goal, GoalManager
from .ai.behaviors.villager import villager_action_pools
from .ai.planning.diagnostics import trace_sink_from_config
from .ai.planning.goap_planner import GoapPlanner
from .systems.ai.goap_agent import GoapAgent
from .systems.ai.goap_agent_system import GoapAgentSystem
from .systems.movement.movement_system import MovementSystem
from .systems.movement.pathfinding import clear_obstacles
from .utils.observer import PlanEventLog, fps_summary, record_tick


log_level_str = CONFIG.logging.global_level
numeric_level = getattr(logging, log_level_str, logging.INFO)
logging.basicConfig(
    level=numeric_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)
logger = logging.getLogger(__name__)

# Apply per-module levels if defined
if CONFIG.logging.module_levels:
    for module_name, level_str in CONFIG.logging.module_levels.items():
        module_numeric_level = getattr(logging, str(level_str).upper(), None)
        if module_numeric_level is not None:
            logging.getLogger(module_name).setLevel(module_numeric_level)
        else:
            logger.warning("Invalid log level '%s' for module '%s' in config.", level_str, module_name)


def bootstrap(config_path: str | Path | None = None) -> World:
    """Build a world with managers and the movement and GOAP systems registered."""

    cfg = load_config(Path(config_path)) if config_path is not None else CONFIG

    world = World(cfg.world.size)
    world.config = cfg
    world.entity_manager = EntityManager()
    world.component_manager = ComponentManager()
    world.time_manager = TimeManager(cfg.world.tick_rate)
    world.systems_manager = SystemsManager()

    # Movement resets its per-tick step budget before agents move.
    world.movement_system = MovementSystem(
        world,
        speed=cfg.movement.speed,
        arrive_distance=cfg.movement.arrive_distance,
        max_stalled_ticks=cfg.movement.max_stalled_ticks,
    )
    world.agent_system = GoapAgentSystem(world)
    world.register_system(world.movement_system)
    world.register_system(world.agent_system)

    logger.info(
        "[Bootstrap] World %s at %s ticks/s; planner budget %s states / %.0f ms slice",
        cfg.world.size,
        cfg.world.tick_rate,
        cfg.planner.max_visited_states,
        cfg.planner.time_slice_seconds * 1000,
    )
    return world


def make_planner(cfg: Config) -> GoapPlanner:
    return GoapPlanner(
        max_visited=cfg.planner.max_visited_states,
        time_slice=cfg.planner.time_slice_seconds,
        trace=trace_sink_from_config(cfg.planner.trace_dir),
    )


def spawn_villager(
    world: World,
    x: int,
    y: int,
    needs: Optional[Needs] = None,
    goals: Optional[Iterable[Goal]] = None,
    name: str = "villager",
) -> GoapAgent:
    """Spawn a villager entity with a goal manager and the default action pools."""

    cfg: Config = world.config or CONFIG
    entity_id = world.spawn(name, x, y)
    world.component_manager.add_component(entity_id, needs or Needs())
    agent = GoapAgent(
        entity_id,
        world,
        mover=world.movement_system,
        planner=make_planner(cfg),
    )
    if goals is None:
        goals = [
            Goal("avoid_starving", True, attribute="hunger"),
            Goal("regenerate_stamina", True, attribute="stamina"),
            Goal("work", True, attribute="wealth"),
        ]
    events = PlanEventLog(entity_id, clock=lambda: world.now)
    GoalManager(agent, goals, villager_action_pools(), listeners=[events])
    world.agent_system.add_agent(agent)
    logger.info("[Bootstrap] Spawned %s (entity %s) at (%s, %s)", name, entity_id, x, y)
    return agent


def populate_demo(world: World) -> GoapAgent:
    """A hungry, tired villager with food, a bed, a tree and a stockpile nearby."""

    clear_obstacles()
    w, h = world.size
    cx, cy = w // 2, h // 2
    villager = spawn_villager(world, cx, cy, Needs(hunger=20.0, stamina=40.0, wealth=60.0))
    world.spawn("apple", min(cx + 2, w - 1), cy, tag="food")
    world.spawn("bed", cx, max(cy - 4, 0), tag="bed")
    world.spawn("oak", max(cx - 5, 0), cy, tag="tree")
    world.spawn("stockpile", cx, min(cy + 5, h - 1), tag="stockpile")
    return villager


def step(world: World) -> None:
    """Advance ``world`` by one tick without sleeping."""

    tm = world.time_manager
    world.systems_manager.update(tm.tick_counter)
    tm.advance()


def run(world: World, ticks: int, realtime: bool = False) -> None:
    """Run ``ticks`` ticks, sleeping between them when ``realtime`` is set."""

    tm = world.time_manager
    budget = 1.0 / tm.tick_rate
    for _ in range(ticks):
        started = time.perf_counter()
        world.systems_manager.update(tm.tick_counter)
        record_tick(time.perf_counter() - started, budget)
        if realtime:
            tm.sleep_until_next_tick()
        else:
            tm.advance()
    logger.info("Ran %s ticks: %s", ticks, fps_summary())


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the GOAP villager demo")
    parser.add_argument("--config", type=Path, default=None, help="path to config.yaml")
    parser.add_argument("--ticks", type=int, default=200)
    parser.add_argument("--realtime", action="store_true", help="sleep between ticks")
    args = parser.parse_args(argv)

    world = bootstrap(args.config)
    villager = populate_demo(world)
    try:
        run(world, args.ticks, realtime=args.realtime)
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt caught. Shutting down...")
    finally:
        for listener in villager.goal_manager.listeners:
            if isinstance(listener, PlanEventLog):
                for event in listener.events:
                    logger.info("Event: %s", event)
        clear_obstacles()


if __name__ == "__main__":
    main()

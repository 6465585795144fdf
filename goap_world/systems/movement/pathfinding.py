"""Basic grid-based pathfinding helpers."""

from __future__ import annotations

from heapq import heappop, heappush
from typing import Dict, Iterable, List, Optional, Set, Tuple


Coord = Tuple[int, int]

_OBSTACLES: Set[Coord] = set()

# Upper bound on expanded cells when no grid size is given.
DEFAULT_EXPANSION_LIMIT = 10_000


def set_obstacles(cells: Iterable[Coord]) -> None:
    """Replace the static obstacle set."""

    _OBSTACLES.clear()
    _OBSTACLES.update((int(x), int(y)) for x, y in cells)


def clear_obstacles() -> None:
    _OBSTACLES.clear()


def is_blocked(cell: Coord) -> bool:
    return cell in _OBSTACLES


def _heuristic(a: Coord, b: Coord) -> float:
    """Manhattan distance, exact on an open 4-neighbour grid."""

    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _neighbors(node: Coord, size: Optional[Tuple[int, int]]) -> List[Coord]:
    x, y = node
    cells = [(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)]
    if size is None:
        return cells
    width, height = size
    return [(cx, cy) for cx, cy in cells if 0 <= cx < width and 0 <= cy < height]


def _reconstruct(came_from: Dict[Coord, Coord], current: Coord) -> List[Coord]:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def a_star(
    start: Coord,
    goal: Coord,
    size: Optional[Tuple[int, int]] = None,
    limit: int = DEFAULT_EXPANSION_LIMIT,
) -> List[Coord]:
    """Return the shortest obstacle-free path from ``start`` to ``goal``.

    The goal cell itself may be blocked (it is usually occupied by the entity
    being approached). Returns an empty list when no path exists within
    ``limit`` expansions.
    """

    if start == goal:
        return [start]

    open_set: List[Tuple[float, float, Coord]] = []
    heappush(open_set, (_heuristic(start, goal), 0.0, start))

    came_from: Dict[Coord, Coord] = {}
    g_score: Dict[Coord, float] = {start: 0.0}
    closed: Set[Coord] = set()

    while open_set and len(closed) < limit:
        _, g, current = heappop(open_set)

        if current == goal:
            return _reconstruct(came_from, current)

        if current in closed:
            continue
        closed.add(current)

        for n in _neighbors(current, size):
            if n in closed or (n != goal and is_blocked(n)):
                continue
            tentative_g = g + 1
            if tentative_g < g_score.get(n, float("inf")):
                came_from[n] = current
                g_score[n] = tentative_g
                heappush(open_set, (tentative_g + _heuristic(n, goal), tentative_g, n))

    return []


def next_step(start: Coord, goal: Coord, size: Optional[Tuple[int, int]] = None) -> Optional[Coord]:
    """First cell to step into on the way from ``start`` to ``goal``."""

    path = a_star(start, goal, size)
    if len(path) < 2:
        return None
    return path[1]


__all__ = [
    "a_star",
    "next_step",
    "set_obstacles",
    "clear_obstacles",
    "is_blocked",
]

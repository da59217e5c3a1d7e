"""Seeded maze generation shared by server and clients."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from .types import Quat, Vec3

MazeGrid = list[list[bool]]

_MIN_SPAWN_DISTANCE = 6.0
_MAX_SPAWN_POINTS = 16
_TILE_SIZE = 4.0

# difficulty -> (extra connection chance, dead-end chance or None)
_DIFFICULTY = {
    "easy": (0.25, 0.4),
    "medium": (0.15, 0.2),
    "hard": (0.05, None),
}


@dataclass
class MazeConfig:
    seed: int
    width: int
    height: int
    difficulty: str


@dataclass
class SpawnPoint:
    position: Vec3
    rotation: Quat


@dataclass
class MazeData:
    grid: MazeGrid
    spawn_points: list[SpawnPoint]
    width: int
    height: int


class _Dir(Enum):
    NORTH = "n"
    SOUTH = "s"
    WEST = "w"
    EAST = "e"


_OPPOSITE = {
    _Dir.NORTH: _Dir.SOUTH,
    _Dir.SOUTH: _Dir.NORTH,
    _Dir.WEST: _Dir.EAST,
    _Dir.EAST: _Dir.WEST,
}


@dataclass
class _Node:
    visited: bool = False
    walls: set[_Dir] = field(default_factory=lambda: set(_Dir))


def _neighbors(pos: int, width: int, height: int) -> Iterator[tuple[_Dir, int]]:
    """Neighbouring node indices in north, south, west, east order."""
    if pos >= width:
        yield _Dir.NORTH, pos - width
    if pos + width < width * height:
        yield _Dir.SOUTH, pos + width
    if pos > 0 and pos % width != 0:
        yield _Dir.WEST, pos - 1
    if (pos + 1) % width != 0:
        yield _Dir.EAST, pos + 1


def _open(nodes: list[_Node], a: int, b: int, direction: _Dir) -> None:
    nodes[a].walls.discard(direction)
    nodes[b].walls.discard(_OPPOSITE[direction])


def _close(nodes: list[_Node], a: int, b: int, direction: _Dir) -> None:
    nodes[a].walls.add(direction)
    nodes[b].walls.add(_OPPOSITE[direction])


def _carve(nodes: list[_Node], width: int, height: int, rng: random.Random) -> None:
    """Depth-first search with backtracking."""
    count = len(nodes)
    stack: list[int] = []
    visited = 0
    position = rng.randrange(count)
    nodes[position].visited = True

    while visited < count - 1:
        options = [
            (d, n) for d, n in _neighbors(position, width, height) if not nodes[n].visited
        ]
        if options:
            visited += 1
            if len(options) > 1:
                stack.append(position)
            direction, nxt = rng.choice(options)
            _open(nodes, position, nxt, direction)
            position = nxt
            nodes[position].visited = True
        elif stack:
            position = stack.pop()
        else:
            break


def _add_extra_connections(
    nodes: list[_Node], width: int, height: int, chance: float, rng: random.Random
) -> None:
    for i, node in enumerate(nodes):
        walled = [
            (d, n)
            for d, n in _neighbors(i, width, height)
            if d in node.walls and _OPPOSITE[d] in nodes[n].walls
        ]
        for direction, nxt in walled:
            if rng.random() < chance:
                _open(nodes, i, nxt, direction)


def _remove_dead_ends(
    nodes: list[_Node], width: int, height: int, chance: float, rng: random.Random
) -> None:
    for i in range(len(nodes)):
        unvisited = [(d, n) for d, n in _neighbors(i, width, height) if not nodes[n].visited]
        if len(unvisited) == 1 and rng.random() < chance:
            direction, nxt = unvisited[0]
            _close(nodes, i, nxt, direction)


def _to_grid(nodes: list[_Node], width: int, height: int) -> MazeGrid:
    """Each node becomes a 2x2 open area inside a 3x3 cell, with a wall border."""
    grid_width = width * 3 + 2
    grid_height = height * 3 + 2
    grid = [[True] * grid_width for _ in range(grid_height)]

    for i, node in enumerate(nodes):
        node_x, node_y = i % width, i // width
        gx, gy = node_x * 3 + 2, node_y * 3 + 2
        cells = [(gx, gy), (gx + 1, gy), (gx, gy + 1), (gx + 1, gy + 1)]
        if _Dir.NORTH not in node.walls and node_y > 0:
            cells += [(gx, gy - 1), (gx + 1, gy - 1), (gx, gy - 2), (gx + 1, gy - 2)]
        if _Dir.SOUTH not in node.walls and node_y < height - 1:
            cells += [(gx, gy + 2), (gx + 1, gy + 2), (gx, gy + 3), (gx + 1, gy + 3)]
        if _Dir.WEST not in node.walls and node_x > 0:
            cells += [(gx - 1, gy), (gx - 1, gy + 1), (gx - 2, gy), (gx - 2, gy + 1)]
        if _Dir.EAST not in node.walls and node_x < width - 1:
            cells += [(gx + 2, gy), (gx + 2, gy + 1), (gx + 3, gy), (gx + 3, gy + 1)]
        for x, y in cells:
            grid[y][x] = False

    for row in (grid[0], grid[-1]):
        row[:] = [True] * grid_width
    for row in grid:
        row[0] = row[-1] = True
    return grid


def generate_maze_with_seed(width: int, height: int, difficulty: str, seed: int) -> MazeGrid:
    """Generate the wall grid for a maze of ``width`` x ``height`` nodes.

    Unknown difficulties are treated as ``"medium"``.
    """
    if width < 1 or height < 1:
        raise ValueError(f"maze size must be at least 1x1, got {width}x{height}")
    nodes = [_Node() for _ in range(width * height)]
    rng = random.Random(seed)
    _carve(nodes, width, height, rng)

    extra, dead_end = _DIFFICULTY.get(difficulty, _DIFFICULTY["medium"])
    _add_extra_connections(nodes, width, height, extra, rng)
    if dead_end is not None:
        _remove_dead_ends(nodes, width, height, dead_end, rng)

    return _to_grid(nodes, width, height)


def _is_safe_spawn_location(grid: MazeGrid, x: int, y: int) -> bool:
    """At least five open cells in the 3x3 area around (x, y)."""
    open_cells = sum(
        1
        for ny in range(y - 1, y + 2)
        for nx in range(x - 1, x + 2)
        if 0 <= ny < len(grid) and 0 <= nx < len(grid[0]) and not grid[ny][nx]
    )
    return open_cells >= 5


def _spawn_at(x: int, y: int, rng: random.Random) -> SpawnPoint:
    return SpawnPoint(
        position=Vec3(x * _TILE_SIZE, 1.0, y * _TILE_SIZE),
        rotation=Quat.from_rotation_y(math.pi * rng.random() * 2.0),
    )


def _generate_spawn_points(
    grid: MazeGrid, width: int, height: int, rng: random.Random
) -> list[SpawnPoint]:
    grid_width = width * 3 + 2
    grid_height = height * 3 + 2

    candidates = [
        (x, y)
        for y in range(2, grid_height - 2)
        for x in range(2, grid_width - 2)
        if not grid[y][x] and _is_safe_spawn_location(grid, x, y)
    ]

    spawn_points: list[SpawnPoint] = []
    while candidates and len(spawn_points) < _MAX_SPAWN_POINTS:
        idx = rng.randrange(len(candidates))
        x, y = candidates[idx]
        far_enough = all(
            math.hypot(x - p.position.x, y - p.position.z) >= _MIN_SPAWN_DISTANCE
            for p in spawn_points
        )
        if far_enough:
            spawn_points.append(_spawn_at(x, y, rng))
            candidates = [
                (cx, cy)
                for cx, cy in candidates
                if math.hypot(x - cx, y - cy) >= _MIN_SPAWN_DISTANCE
            ]
        else:
            del candidates[idx]

    if len(spawn_points) < 4:
        for y in range(2, grid_height - 2, 6):
            for x in range(2, grid_width - 2, 6):
                if not grid[y][x] and len(spawn_points) < 8:
                    spawn_points.append(_spawn_at(x, y, rng))

    return spawn_points


def generate_maze_from_config(config: MazeConfig) -> MazeData:
    """Generate the maze grid and its spawn points from ``config``."""
    grid = generate_maze_with_seed(config.width, config.height, config.difficulty, config.seed)
    rng = random.Random(config.seed)
    spawn_points = _generate_spawn_points(grid, config.width, config.height, rng)
    return MazeData(grid=grid, spawn_points=spawn_points, width=config.width, height=config.height)
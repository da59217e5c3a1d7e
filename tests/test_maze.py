from collections import deque

import pytest

from spherewars.maze import (
    MazeConfig,
    generate_maze_from_config,
    generate_maze_with_seed,
)


def open_cells(grid):
    return {(x, y) for y, row in enumerate(grid) for x, wall in enumerate(row) if not wall}


@pytest.mark.parametrize("width,height", [(12, 12), (5, 3), (1, 1), (1, 6)])
def test_grid_dimensions(width, height):
    grid = generate_maze_with_seed(width, height, "medium", 42)
    assert len(grid) == height * 3 + 2
    assert all(len(row) == width * 3 + 2 for row in grid)


@pytest.mark.parametrize("difficulty", ["easy", "medium", "hard", "unknown"])
def test_border_is_all_walls(difficulty):
    grid = generate_maze_with_seed(12, 12, difficulty, 7)
    assert all(grid[0]) and all(grid[-1])
    assert all(row[0] and row[-1] for row in grid)


def test_every_node_area_is_open():
    width, height = 6, 4
    grid = generate_maze_with_seed(width, height, "hard", 3)
    for ny in range(height):
        for nx in range(width):
            gx, gy = nx * 3 + 2, ny * 3 + 2
            assert not grid[gy][gx] and not grid[gy][gx + 1]
            assert not grid[gy + 1][gx] and not grid[gy + 1][gx + 1]


@pytest.mark.parametrize("seed", [0, 1, 99, 123456789])
@pytest.mark.parametrize("difficulty", ["easy", "medium", "hard"])
def test_open_cells_are_connected(seed, difficulty):
    grid = generate_maze_with_seed(12, 12, difficulty, seed)
    cells = open_cells(grid)
    start = next(iter(cells))
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for step in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nxt = (x + step[0], y + step[1])
            if nxt in cells and nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    assert seen == cells


def test_generation_is_deterministic():
    assert generate_maze_with_seed(12, 12, "easy", 555) == generate_maze_with_seed(
        12, 12, "easy", 555
    )
    config = MazeConfig(555, 12, 12, "medium")
    first = generate_maze_from_config(config)
    second = generate_maze_from_config(config)
    assert first == second


def test_different_seeds_give_different_mazes():
    grids = {str(generate_maze_with_seed(12, 12, "hard", seed)) for seed in range(5)}
    assert len(grids) > 1


def test_unknown_difficulty_behaves_like_medium():
    assert generate_maze_with_seed(8, 8, "bogus", 11) == generate_maze_with_seed(
        8, 8, "medium", 11
    )


@pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3)])
def test_invalid_size_raises(width, height):
    with pytest.raises(ValueError):
        generate_maze_with_seed(width, height, "medium", 1)


@pytest.mark.parametrize("seed", [1, 2, 3, 1000])
def test_spawn_points_lie_on_open_cells(seed):
    data = generate_maze_from_config(MazeConfig(seed, 12, 12, "medium"))
    assert (data.width, data.height) == (12, 12)
    assert 1 <= len(data.spawn_points) <= 16
    for point in data.spawn_points:
        x, z = point.position.x / 4.0, point.position.z / 4.0
        assert x.is_integer() and z.is_integer()
        assert point.position.y == 1.0
        assert not data.grid[int(z)][int(x)]
        q = point.rotation
        assert q.x**2 + q.y**2 + q.z**2 + q.w**2 == pytest.approx(1.0)


def test_spawn_points_on_tiny_maze_use_fallback():
    data = generate_maze_from_config(MazeConfig(9, 1, 1, "hard"))
    assert len(data.spawn_points) >= 1
    assert all(not data.grid[int(p.position.z / 4)][int(p.position.x / 4)] for p in data.spawn_points)
"""迷宫生成算法

Randomized depth-first backtracker over an n x n logical grid, rendered into
a (2n) x (2n) wall/floor tile matrix. Logical cell (x, y) lives at grid
(2x, 2y); a passage between two neighbours is the grid cell between them.
"""

import random
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from .rules import entrance_for_size


@dataclass
class MazeGrid:
    """Generated maze data."""
    size: int
    tiles: list[list[bool]] = field(default_factory=list)  # tiles[x][y], True = passable
    entrance: tuple[int, int] = (0, 0)
    cells: frozenset[tuple[int, int]] = frozenset()  # visited logical cells
    carved: list[tuple[int, int]] = field(default_factory=list)  # mid-edge grid cells
    candidates: list[tuple[int, int]] = field(default_factory=list)  # goal pool
    seed: Optional[int] = None

    @property
    def width(self) -> int:
        return len(self.tiles)

    @property
    def height(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    def is_passable(self, x: int, y: int) -> bool:
        """Whether the grid cell exists and is floor."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.tiles[x][y]
        return False

    def passable_cells(self) -> list[tuple[int, int]]:
        return [
            (x, y)
            for x in range(self.width)
            for y in range(self.height)
            if self.tiles[x][y]
        ]

    def neighbors(self, x: int, y: int) -> list[tuple[int, int]]:
        """Passable 4-neighbours of a grid cell."""
        return [
            (nx, ny)
            for nx, ny in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1))
            if self.is_passable(nx, ny)
        ]

    def reachable_from(self, start: tuple[int, int]) -> set[tuple[int, int]]:
        """Flood fill over passable cells."""
        if not self.is_passable(*start):
            return set()
        seen = {start}
        queue = deque([start])
        while queue:
            x, y = queue.popleft()
            for neighbor in self.neighbors(x, y):
                if neighbor not in seen:
                    seen.add(neighbor)
                    queue.append(neighbor)
        return seen

    def to_rows(self) -> list[list[bool]]:
        """Row-major copy (rows[y][x]) for serialization."""
        return [[self.tiles[x][y] for x in range(self.width)] for y in range(self.height)]


def _interior_neighbors(
    current: tuple[int, int],
    visited: list[list[bool]],
    size: int,
) -> list[tuple[int, int]]:
    """Unvisited 4-neighbours strictly inside the outer logical border."""
    x, y = current
    return [
        (nx, ny)
        for nx, ny in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1))
        if 0 < nx < size - 1 and 0 < ny < size - 1 and not visited[nx][ny]
    ]


def generate_maze(size: int, seed: Optional[int] = None) -> MazeGrid:
    """使用 DFS 回溯算法生成迷宫

    The caller is expected to clamp ``size`` to at least ``MIN_GEN_SIZE``;
    it is not re-validated here.

    Args:
        size: logical maze size n (grid is 2n x 2n)
        seed: random seed (None picks one)

    Returns:
        the generated MazeGrid with its goal candidate pool
    """
    if seed is None:
        seed = random.getrandbits(32)
    rng = random.Random(seed)

    visited = [[False] * size for _ in range(size)]
    tiles = [[False] * (size * 2) for _ in range(size * 2)]

    current = (size // 2, size // 2)
    visited[current[0]][current[1]] = True
    unvisited = size * size - 1

    stack: list[tuple[int, int]] = []
    carved: list[tuple[int, int]] = []
    cells = {current}

    while unvisited > 0:
        neighbors = _interior_neighbors(current, visited, size)

        if neighbors:
            nx, ny = rng.choice(neighbors)
            cx, cy = current

            # 打通墙壁
            tiles[2 * cx][2 * cy] = True
            edge = (cx + nx, cy + ny)  # midpoint of (2cx, 2cy) and (2nx, 2ny)
            tiles[edge[0]][edge[1]] = True
            carved.append(edge)

            stack.append(current)
            current = (nx, ny)
            visited[nx][ny] = True
            cells.add(current)
            unvisited -= 1
        elif stack:
            # 回溯
            current = stack.pop()
        else:
            # the preserved border is never visited
            break

    entrance = entrance_for_size(size)
    candidates = [
        (x, y)
        for x in range(size * 2)
        for y in range(size * 2)
        if tiles[x][y] and (x, y) != entrance
    ]

    return MazeGrid(
        size=size,
        tiles=tiles,
        entrance=entrance,
        cells=frozenset(cells),
        carved=carved,
        candidates=candidates,
        seed=seed,
    )

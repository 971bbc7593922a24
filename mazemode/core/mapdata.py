"""Map loading with maze generation.

``MapLoader`` sits in front of the host's own map loader: the sentinel id
``GENERATED_MAP_ID`` produces a freshly generated maze, every other id is
passed through unchanged.
"""

import logging
import random
from typing import Callable, Optional

from .goal import build_goal_event
from .maze import MazeGrid, generate_maze
from .models import GameEvent, MapDocument
from .rules import GENERATED_MAP_ID, MAP_LAYERS
from .state import Settings

logger = logging.getLogger(__name__)


def goal_rng(seed: int) -> random.Random:
    """Goal placement stream, derived from the maze seed but apart from the carving."""
    return random.Random(f"{seed}:goal")


def build_map_document(grid: MazeGrid, goal: GameEvent, settings: Settings) -> MapDocument:
    """Assemble a generated grid and its goal into a map document."""
    width = grid.width
    height = grid.height
    data = [0] * (MAP_LAYERS * width * height)
    for x in range(width):
        for y in range(height):
            data[x + y * width] = settings.gen_floor if grid.tiles[x][y] else settings.gen_wall

    return MapDocument(
        width=width,
        height=height,
        scroll_type=0,
        tileset_id=settings.gen_tileset_id,
        data=data,
        events=[None, goal],
    )


class MapLoader:
    """Loads map documents, generating a maze for ``GENERATED_MAP_ID``."""

    def __init__(
        self,
        settings: Settings,
        fallback: Callable[[int], MapDocument],
        template_source: Optional[Callable[[], Optional[GameEvent]]] = None,
    ) -> None:
        self.settings = settings
        self.fallback = fallback
        self.template_source = template_source
        self.last_grid: Optional[MazeGrid] = None

    def load_map(self, map_id: int) -> MapDocument:
        if map_id == GENERATED_MAP_ID:
            return self.generate()
        return self.fallback(map_id)

    def generate(self) -> MapDocument:
        """Generate a maze sized by ``settings.gen_size`` and place its goal."""
        grid = generate_maze(self.settings.gen_size, seed=self.settings.maze_seed)
        template = self.template_source() if self.template_source else None
        goal = build_goal_event(template)

        goal.x, goal.y = goal_rng(grid.seed).choice(grid.candidates)

        self.last_grid = grid
        logger.debug(
            "Generated %dx%d maze (seed=%s), goal at (%d, %d)",
            grid.width, grid.height, grid.seed, goal.x, goal.y,
        )
        return build_map_document(grid, goal, self.settings)

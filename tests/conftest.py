from collections import deque

import pytest

from mazemode.core.models import MapDocument
from mazemode.core.rules import MAP_LAYERS
from mazemode.core.session import MazeSessionController
from mazemode.core.state import Settings
from mazemode.host.memory import MemoryHost


def make_map(width=10, height=10, events=None):
    return MapDocument(
        width=width,
        height=height,
        data=[0] * (MAP_LAYERS * width * height),
        events=[None] + list(events or []),
    )


def shortest_path(is_passable, start, goal):
    """BFS path of grid cells from start to goal (both included)."""
    previous = {start: None}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        if (x, y) == goal:
            break
        for nxt in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
            if nxt not in previous and is_passable(*nxt):
                previous[nxt] = (x, y)
                queue.append(nxt)
    if goal not in previous:
        return None
    path = [goal]
    while previous[path[-1]] is not None:
        path.append(previous[path[-1]])
    return list(reversed(path))


@pytest.fixture
def settings(tmp_path):
    s = Settings()
    s.maps_dir = str(tmp_path / "data")
    s.export_dir = str(tmp_path / "export")
    s.start_map_id = 3
    s.start_x = 5
    s.start_y = 5
    s.start_direction = 8
    s.maze_seed = 1234
    return s


@pytest.fixture
def host(settings):
    h = MemoryHost(settings, maps={3: make_map(), 7: make_map(20, 15)})
    h.load_start_map()
    return h


@pytest.fixture
def controller(settings, host):
    return MazeSessionController(settings=settings, scene=host, player=host)

import random

import pytest

from mazemode.core.mapdata import MapLoader, build_map_document, goal_rng
from mazemode.core.maze import generate_maze
from mazemode.core.goal import build_goal_event
from mazemode.core.models import GameEvent
from mazemode.core.rules import GENERATED_MAP_ID, MAP_LAYERS

from conftest import make_map


def loader_for(settings, template=None):
    calls = []

    def fallback(map_id):
        calls.append(map_id)
        return make_map(4, 4)

    loader = MapLoader(settings, fallback=fallback, template_source=lambda: template)
    return loader, calls


def test_generated_map_layout(settings):
    settings.gen_size = 6
    loader, calls = loader_for(settings)
    document = loader.load_map(GENERATED_MAP_ID)

    assert calls == []
    assert (document.width, document.height) == (12, 12)
    assert document.tileset_id == settings.gen_tileset_id
    assert len(document.data) == MAP_LAYERS * 12 * 12
    assert document.events[0] is None

    grid = loader.last_grid
    for x in range(12):
        for y in range(12):
            expected = settings.gen_floor if grid.tiles[x][y] else settings.gen_wall
            assert document.tile_at(x, y) == expected
            assert document.tile_at(x, y, layer=1) == 0


def test_generated_map_has_single_goal_off_entrance(settings):
    for seed in range(25):
        settings.gen_size = 4
        settings.maze_seed = seed
        loader, _ = loader_for(settings)
        document = loader.load_map(GENERATED_MAP_ID)
        goals = document.goal_events()
        assert len(goals) == 1
        goal = goals[0]
        assert (goal.x, goal.y) != loader.last_grid.entrance
        assert document.tile_at(goal.x, goal.y) == settings.gen_floor


def test_seeded_generation_is_reproducible(settings):
    settings.gen_size = 9
    settings.maze_seed = 555
    first, _ = loader_for(settings)
    second, _ = loader_for(settings)
    assert first.load_map(GENERATED_MAP_ID) == second.load_map(GENERATED_MAP_ID)


def test_goal_stream_is_separate_from_carving(settings):
    settings.maze_seed = 555
    loader, _ = loader_for(settings)
    goal = loader.load_map(GENERATED_MAP_ID).goal_events()[0]
    grid = loader.last_grid
    assert (goal.x, goal.y) == goal_rng(555).choice(grid.candidates)
    assert [goal_rng(555).random() for _ in range(3)] != [random.Random(555).random() for _ in range(3)]


def test_other_ids_use_fallback(settings):
    loader, calls = loader_for(settings)
    document = loader.load_map(5)
    assert calls == [5]
    assert document.width == 4
    assert loader.last_grid is None


def test_fallback_errors_propagate(settings):
    def fallback(map_id):
        raise KeyError(map_id)

    loader = MapLoader(settings, fallback=fallback)
    with pytest.raises(KeyError):
        loader.load_map(2)


def test_template_source_gives_goal_its_look(settings):
    template = GameEvent(id=9, name="Chest", locked=True)
    template.pages[0].image.character_name = "!Chest"
    loader, _ = loader_for(settings, template)
    goal = loader.load_map(GENERATED_MAP_ID).goal_events()[0]
    assert goal.pages[0].image.character_name == "!Chest"
    assert goal.name == "Chest"


def test_build_map_document_places_given_goal(settings):
    grid = generate_maze(5, seed=8)
    goal = build_goal_event()
    goal.x, goal.y = grid.candidates[0]
    document = build_map_document(grid, goal, settings)
    assert document.events == [None, goal]
    assert document.event_at(goal.x, goal.y) == goal

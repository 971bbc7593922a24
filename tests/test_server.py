from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mazemode.core import save
from mazemode.core.models import EventPage, GameEvent
from mazemode.server.api import create_app
from mazemode.server.controller import build_controller

from conftest import make_map, shortest_path


@pytest.fixture
def maze_controller(settings):
    guide = GameEvent(id=1, name="Guide", pages=[EventPage()], x=5, y=4)
    guide.pages[0].image.character_name = "People1"
    save.save_map_document(make_map(events=[guide]), save.map_path(settings.maps_dir, 3))
    save.save_map_document(make_map(12, 8), save.map_path(settings.maps_dir, 7))
    return build_controller(settings=settings)


@pytest.fixture
def client(maze_controller):
    return TestClient(create_app(maze_controller))


def walk_to_goal(client, maze_controller):
    host = maze_controller.host
    goal = host.current_map.goal_events()[0]
    start = (host.get_position().x, host.get_position().y)
    path = shortest_path(host.is_passable, start, (goal.x, goal.y))
    assert path is not None
    response = None
    for x, y in path[1:]:
        response = client.post("/api/player/move", json={"x": x, "y": y})
        assert response.status_code == 200
    return response.json()


def test_ping(client):
    assert client.get("/api/ping").json() == {"status": "ok"}


def test_initial_state(client):
    state = client.get("/api/state").json()
    assert state["scene"] == "map"
    assert state["phase"] == "inactive"
    assert state["session"] is None
    assert state["player"] == {"map_id": 3, "x": 5, "y": 5, "direction": 8}


def test_enter_generate_and_map_payload(client):
    response = client.post("/api/maze/enter", json={"mode": "generate", "size": 6, "retry": "false"})
    body = response.json()
    assert body["entered"] is True
    session = body["state"]["session"]
    assert session["is_generated_map"] is True
    assert session["can_retry"] is False
    assert session["can_quit"] is True

    maze = client.get("/api/map").json()
    assert (maze["width"], maze["height"]) == (12, 12)
    assert len(maze["wall_grid"]) == 12
    assert maze["entrance"] == {"x": 6, "y": 6}
    assert len(maze["goals"]) == 1
    assert maze["seed"] == 1234

    again = client.post("/api/maze/enter", json={"mode": "reskin"}).json()
    assert again["entered"] is False


def test_goal_touch_succeeds(client, maze_controller):
    client.post("/api/maze/enter", json={"mode": "generate", "size": 5, "event_id": 1})
    goal = maze_controller.host.current_map.goal_events()[0]
    assert goal.pages[0].image.character_name == "People1"

    body = walk_to_goal(client, maze_controller)
    assert body["triggered"] == [{"command": "Maze success", "result": "success"}]
    assert body["state"]["maze_clear"] is True
    assert body["state"]["last_outcome"] == "success"
    assert body["state"]["player"] == {"map_id": 3, "x": 5, "y": 5, "direction": 8}
    assert body["state"]["scene"] == "map"


def test_default_goal_without_invoking_event(client, maze_controller):
    client.post("/api/maze/enter", json={"mode": "generate", "size": 5})
    goal = maze_controller.host.current_map.goal_events()[0]
    assert goal.pages[0].image.character_name == "Actor1"


def test_move_into_wall_is_rejected(client, maze_controller):
    client.post("/api/maze/enter", json={"mode": "generate", "size": 4})
    host = maze_controller.host
    x, y = host.get_position().x, host.get_position().y
    wall = next(n for n in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)) if not host.is_passable(*n))
    response = client.post("/api/player/move", json={"x": wall[0], "y": wall[1]})
    assert response.status_code == 400


def test_move_must_be_single_step(client):
    response = client.post("/api/player/move", json={"x": 9, "y": 9})
    assert response.status_code == 400


def test_exit_and_quit(client):
    assert client.post("/api/maze/exit", json={"outcome": "fail"}).json()["exited"] is False
    client.post("/api/maze/enter", json={"mode": "map", "map_id": 7, "x": 2, "y": 2, "quit": "false"})
    assert client.post("/api/maze/quit").json()["accepted"] is False
    body = client.post("/api/maze/exit", json={"outcome": "fail"}).json()
    assert body["exited"] is True
    assert body["state"]["maze_clear"] is False
    assert body["state"]["player"]["map_id"] == 3


def test_retry_route(client, maze_controller):
    client.post("/api/maze/enter", json={"mode": "generate", "size": 6})
    assert client.post("/api/maze/retry").json()["accepted"] is True
    assert maze_controller.host.get_position().x == 6


def test_toggle_route(client):
    state = client.post("/api/maze/toggle", json={}).json()
    assert state["phase"] == "active_normal"
    state = client.post("/api/maze/toggle", json={}).json()
    assert state["phase"] == "inactive"


def test_command_route(client):
    body = client.post("/api/maze/command", json={"command": "Maze generate 4 true false"}).json()
    assert body["result"] == "generate"
    assert body["state"]["session"]["can_quit"] is False
    assert client.post("/api/maze/command", json={"command": "Maze success"}).json()["result"] == "success"


def test_command_route_rejects_other_commands(client):
    assert client.post("/api/maze/command", json={"command": "Quest start"}).status_code == 400


def test_unknown_map_is_bad_request(client):
    response = client.post("/api/maze/enter", json={"mode": "map", "map_id": 42, "x": 1, "y": 1})
    assert response.status_code == 400

    state = client.get("/api/state").json()
    assert state["phase"] == "inactive"
    assert state["scene"] == "map"
    assert state["player"] == {"map_id": 3, "x": 5, "y": 5, "direction": 8}
    assert client.post("/api/maze/enter", json={"mode": "generate", "size": 4}).json()["entered"] is True


def test_failed_map_command_leaves_maze_mode(client):
    response = client.post("/api/maze/command", json={"command": "Maze map 42 1 1"})
    assert response.status_code == 400
    state = client.get("/api/state").json()
    assert state["phase"] == "inactive"
    assert state["scene"] == "map"


def test_failed_entry_keeps_running_session(client):
    client.post("/api/maze/enter", json={"mode": "generate", "size": 4})
    response = client.post("/api/maze/enter", json={"mode": "map", "map_id": 42, "x": 1, "y": 1, "event_id": 99})
    assert response.status_code == 400
    assert client.get("/api/state").json()["phase"] == "active_generated"


def test_export_generated_map(client):
    client.post("/api/maze/enter", json={"mode": "generate", "size": 4})
    path = client.post("/api/map/export", json={}).json()["path"]
    assert path.endswith("Generated1234.json")
    document = save.load_map_document(Path(path))
    assert document.width == 8
    assert len(document.goal_events()) == 1


def test_blank_start_map_when_missing(tmp_path):
    from mazemode.core.state import Settings

    settings = Settings()
    settings.maps_dir = str(tmp_path)
    controller = build_controller(settings=settings)
    assert controller.host.current_map.width == 17

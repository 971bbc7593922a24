"""Maze mode backend controller.

Wraps the in-memory host and the session controller, serializes them for
the web layer and keeps every request on one lock.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Optional

from ..core import save
from ..core.commands import plugin_commands, run_command_line
from ..core.models import MapDocument
from ..core.rules import GENERATED_MAP_ID, MAP_LAYERS
from ..core.session import (
    Generate,
    LoadMap,
    MazeSessionController,
    Mode,
    Outcome,
    Reskin,
)
from ..core.state import Settings
from ..host.memory import MemoryHost

logger = logging.getLogger(__name__)

OUTCOMES = {
    "success": Outcome.SUCCESS,
    "fail": Outcome.FAILURE,
}

DEFAULT_MAP_SIZE = 17


class MazeController:
    """Wrap maze mode flow and provide data to the web layer."""

    def __init__(
        self,
        *,
        settings: Settings,
        host: MemoryHost,
        session: MazeSessionController,
    ) -> None:
        self.settings = settings
        self.host = host
        self.session = session
        self._lock = threading.Lock()
        self._last_outcome: Optional[Outcome] = None
        self.session.subscribe(self._on_exit)

        if self.host.current_map is None:
            self.host.load_start_map()

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------
    def get_state_payload(self) -> dict:
        """State payload for HUD/UI."""
        session = self.session.session
        position = self.host.get_position()
        return {
            "scene": self.host.scene,
            "phase": self.session.phase.value,
            "maze_clear": self.session.maze_clear,
            "last_outcome": self._last_outcome.value if self._last_outcome else None,
            "player": position.model_dump(),
            "session": None
            if session is None
            else {
                "mode": type(session.mode).__name__.lower(),
                "is_generated_map": session.is_generated_map,
                "can_retry": session.can_retry,
                "can_quit": session.can_quit,
                "outcome": session.outcome.value,
                "return_location": session.return_location.model_dump(),
            },
        }

    def get_map_payload(self) -> dict:
        """Serialized current map for the frontend renderer."""
        document = self.host.current_map
        width, height = document.width, document.height
        walls = [
            [document.tile_at(x, y) == self.settings.gen_wall for x in range(width)]
            for y in range(height)
        ]
        goals = [{"x": ev.x, "y": ev.y} for ev in document.goal_events()]
        payload = {
            "map_id": self.host.get_position().map_id,
            "width": width,
            "height": height,
            "tileset_id": document.tileset_id,
            "wall_grid": walls,
            "goals": goals,
        }
        grid = self.host.map_loader.last_grid
        if self.host.get_position().map_id == GENERATED_MAP_ID and grid is not None:
            payload["seed"] = grid.seed
            payload["entrance"] = {"x": grid.entrance[0], "y": grid.entrance[1]}
        return payload

    # ------------------------------------------------------------------
    # Session operations
    # ------------------------------------------------------------------
    def enter(self, mode: Mode, retry: Any = None, quit: Any = None, event_id: Optional[int] = None) -> dict:
        with self._lock:
            if event_id is not None:
                self.host.lock_event(event_id)
            was_active = self.session.is_active
            try:
                started = self.session.enter(mode, {"retry": retry, "quit": quit})
            except (KeyError, ValueError):
                self._abandon_failed_entry(was_active)
                raise
            return {"entered": started is not None, "state": self.get_state_payload()}

    def exit(self, outcome: str) -> dict:
        if outcome not in OUTCOMES:
            raise ValueError(f"unknown outcome: {outcome}")
        with self._lock:
            result = self.session.exit(OUTCOMES[outcome])
            return {"exited": result is not None, "state": self.get_state_payload()}

    def toggle(self, retry: Any = None, quit: Any = None) -> dict:
        with self._lock:
            self.session.toggle(Reskin(), {"retry": retry, "quit": quit})
            return self.get_state_payload()

    def retry(self) -> dict:
        with self._lock:
            return {"accepted": self.session.retry(), "state": self.get_state_payload()}

    def quit(self) -> dict:
        with self._lock:
            return {"accepted": self.session.quit(), "state": self.get_state_payload()}

    def run_command(self, text: str) -> dict:
        with self._lock:
            was_active = self.session.is_active
            try:
                result = run_command_line(self.session, text)
            except (KeyError, ValueError):
                self._abandon_failed_entry(was_active)
                raise
            if result is None:
                raise ValueError(f"not a maze command: {text}")
            return {"result": result, "state": self.get_state_payload()}

    def move_player(self, x: int, y: int) -> dict:
        """Step the player; touching an event runs its maze commands."""
        with self._lock:
            event = self.host.move_player(x, y)
            triggered = []
            if event is not None:
                for line in plugin_commands(event):
                    result = run_command_line(self.session, line)
                    if result is not None:
                        triggered.append({"command": line, "result": result})
            return {"triggered": triggered, "state": self.get_state_payload()}

    def export_map(self, name: Optional[str] = None) -> dict:
        with self._lock:
            map_id = self.host.get_position().map_id
            filename = name or (
                f"Generated{self.host.map_loader.last_grid.seed}.json"
                if map_id == GENERATED_MAP_ID and self.host.map_loader.last_grid
                else save.map_path(".", map_id).name
            )
            path = save.save_map_document(self.host.current_map, Path(self.settings.export_dir) / filename)
            return {"path": str(path)}

    def _on_exit(self, outcome: Outcome) -> None:
        self._last_outcome = outcome

    def _abandon_failed_entry(self, was_active: bool) -> None:
        # the host could not load the maze map; fall back to the normal scene
        if not was_active and self.session.is_active:
            logger.warning("Maze map failed to load, leaving maze mode")
            self.session.leave()


def blank_map(width: int = DEFAULT_MAP_SIZE, height: int = DEFAULT_MAP_SIZE) -> MapDocument:
    """Empty floor map used when no start map is stored."""
    return MapDocument(width=width, height=height, data=[0] * (MAP_LAYERS * width * height))


def build_controller(*, settings: Settings) -> MazeController:
    """Factory to build MazeController with an in-memory host."""
    host = MemoryHost(settings)
    if not save.has_map(settings.maps_dir, settings.start_map_id):
        logger.warning("Start map %s not found, using a blank map", settings.start_map_id)
        host.maps[settings.start_map_id] = blank_map()
    session = MazeSessionController(settings=settings, scene=host, player=host)
    return MazeController(settings=settings, host=host, session=session)


def make_mode(kind: str, **params: Any) -> Mode:
    """Build a session mode from request fields."""
    if kind == "reskin":
        return Reskin()
    if kind == "map":
        return LoadMap(
            map_id=params.get("map_id"),
            x=params.get("x"),
            y=params.get("y"),
            direction=params.get("direction"),
        )
    if kind == "generate":
        return Generate(size=params.get("size"))
    raise ValueError(f"unknown mode: {kind}")

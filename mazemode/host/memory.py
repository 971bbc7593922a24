"""In-memory host

Reference host engine holding the scene, the player and the loaded map.
Used by the web service and by tests in place of a real engine.
"""

import logging
from typing import Any, Optional

from ..core import save
from ..core.goal import find_template
from ..core.mapdata import MapLoader
from ..core.models import GameEvent, Location, MapDocument
from ..core.rules import DIRECTIONS, SceneKind, TRIGGER_PLAYER_TOUCH
from ..core.state import Settings
from .base import PlayerStore, SceneHost

logger = logging.getLogger(__name__)


class MemoryHost(SceneHost, PlayerStore):
    """Scene host and player store backed by plain attributes."""

    def __init__(self, settings: Settings, maps: Optional[dict[int, MapDocument]] = None):
        self.settings = settings
        self.maps: dict[int, MapDocument] = dict(maps or {})
        self.map_loader = MapLoader(
            settings,
            fallback=self.load_persisted_map,
            template_source=self.find_locked_event,
        )
        self.scene: SceneKind = "map"
        self.scene_changes = 0
        self.player = Location(
            map_id=settings.start_map_id,
            x=settings.start_x,
            y=settings.start_y,
            direction=settings.start_direction,
        )
        self.pending_transfer: Optional[tuple[Location, int]] = None
        self.current_map: Optional[MapDocument] = None

    # ------------------------------------------------------------------
    # SceneHost
    # ------------------------------------------------------------------
    def switch_scene(self, kind: SceneKind) -> None:
        self.scene = kind
        self.scene_changes += 1
        if self.pending_transfer is not None:
            self.perform_transfer()

    def is_maze_scene(self) -> bool:
        return self.scene == "maze"

    # ------------------------------------------------------------------
    # PlayerStore
    # ------------------------------------------------------------------
    def get_position(self) -> Location:
        return self.player

    def reserve_transfer(
        self, map_id: Any, x: Any, y: Any, direction: Any, fade_type: int
    ) -> None:
        target = Location(map_id=map_id, x=x, y=y, direction=direction)
        self.pending_transfer = (target, fade_type)

    def perform_transfer(self) -> None:
        """Load the pending transfer's map and place the player on it.

        The pending transfer is dropped even if loading fails.
        """
        target, _fade = self.pending_transfer
        self.pending_transfer = None
        document = self.map_loader.load_map(target.map_id)
        self.current_map = document
        self.player = target
        logger.debug("Player transferred to map %s (%s, %s)", target.map_id, target.x, target.y)

    # ------------------------------------------------------------------
    # Maps and events
    # ------------------------------------------------------------------
    def load_persisted_map(self, map_id: int) -> MapDocument:
        """Load a stored map, from memory first and then from disk."""
        if map_id in self.maps:
            return self.maps[map_id].model_copy(deep=True)
        document = save.load_map_document(save.map_path(self.settings.maps_dir, map_id))
        if document is None:
            raise KeyError(f"map {map_id} not found")
        self.maps[map_id] = document
        return document.model_copy(deep=True)

    def load_start_map(self) -> MapDocument:
        self.current_map = self.load_persisted_map(self.player.map_id)
        return self.current_map

    def events(self) -> list[Optional[GameEvent]]:
        return self.current_map.events if self.current_map else []

    def find_locked_event(self) -> Optional[GameEvent]:
        return find_template(self.events())

    def lock_event(self, event_id: int) -> GameEvent:
        """Flag an event of the current map as the one running commands."""
        for event in self.events():
            if event is not None and event.id == event_id:
                event.locked = True
                return event
        raise KeyError(f"event {event_id} not found")

    def is_passable(self, x: int, y: int) -> bool:
        document = self.current_map
        if document is None or not (0 <= x < document.width and 0 <= y < document.height):
            return False
        return document.tile_at(x, y) != self.settings.gen_wall

    def move_player(self, x: int, y: int) -> Optional[GameEvent]:
        """Step the player onto an adjacent passable tile.

        Returns:
            the player-touch event found on the new tile, if any

        Raises:
            ValueError: the move is not a single step onto a passable tile
        """
        dx = x - self.player.x
        dy = y - self.player.y
        direction = next((d for d, delta in DIRECTIONS.items() if delta == (dx, dy)), None)
        if direction is None:
            raise ValueError("Only single-step moves are allowed")
        if not self.is_passable(x, y):
            raise ValueError("Blocked by wall")

        self.player = Location(map_id=self.player.map_id, x=x, y=y, direction=direction)
        event = self.current_map.event_at(x, y)
        if event is not None and event.pages and event.pages[0].trigger == TRIGGER_PLAYER_TOUCH:
            return event
        return None

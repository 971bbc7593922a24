"""Maze mode session lifecycle.

One session runs from ``enter`` to ``exit`` (or ``leave``). While it is
active the scene host shows maze mode; when it ends the scene goes back to
the normal map and, for sessions that moved the player, the player is
returned to where the session started.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union

from ..host.base import PlayerStore, SceneHost
from .models import Location
from .rules import (
    DOWN,
    FADE_NONE,
    GENERATED_MAP_ID,
    clamp_gen_size,
    entrance_for_size,
    parse_flag,
)
from .state import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reskin:
    """Show the current map as a maze without moving the player."""


@dataclass(frozen=True)
class LoadMap:
    """Move the player to an existing map shown as a maze."""
    map_id: Any
    x: Any
    y: Any
    direction: Any = DOWN


@dataclass(frozen=True)
class Generate:
    """Move the player into a freshly generated maze."""
    size: Any


Mode = Union[Reskin, LoadMap, Generate]


class Outcome(Enum):
    UNRESOLVED = "unresolved"
    SUCCESS = "success"
    FAILURE = "failure"


class SessionPhase(Enum):
    INACTIVE = "inactive"
    ACTIVE_NORMAL = "active_normal"
    ACTIVE_GENERATED = "active_generated"


@dataclass(frozen=True)
class Permissions:
    """Pause menu permissions of a session."""
    can_retry: bool = True
    can_quit: bool = True

    @classmethod
    def from_flags(cls, retry: Any = None, quit: Any = None) -> "Permissions":
        return cls(can_retry=parse_flag(retry), can_quit=parse_flag(quit))

    @classmethod
    def coerce(cls, value: Union["Permissions", dict, None]) -> "Permissions":
        """Accept a Permissions, a ``{"retry": ..., "quit": ...}`` dict or None."""
        if isinstance(value, Permissions):
            return value
        if not value:
            return cls()
        return cls.from_flags(value.get("retry"), value.get("quit"))


@dataclass
class MazeSession:
    mode: Mode
    return_location: Location
    start_location: Optional[Location]
    permissions: Permissions = field(default_factory=Permissions)
    outcome: Outcome = Outcome.UNRESOLVED

    @property
    def is_generated_map(self) -> bool:
        return isinstance(self.mode, Generate)

    @property
    def restores_origin(self) -> bool:
        return isinstance(self.mode, (LoadMap, Generate))

    @property
    def can_retry(self) -> bool:
        return self.permissions.can_retry

    @property
    def can_quit(self) -> bool:
        return self.permissions.can_quit


class MazeSessionController:
    """Owns the single maze session and drives the scene host through it."""

    def __init__(
        self,
        *,
        settings: Settings,
        scene: SceneHost,
        player: PlayerStore,
    ) -> None:
        self.settings = settings
        self.scene = scene
        self.player = player
        self.session: Optional[MazeSession] = None
        self.maze_clear = False
        self._subscribers: list[Callable[[Outcome], None]] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.session is not None

    @property
    def phase(self) -> SessionPhase:
        if self.session is None:
            return SessionPhase.INACTIVE
        if self.session.is_generated_map:
            return SessionPhase.ACTIVE_GENERATED
        return SessionPhase.ACTIVE_NORMAL

    def subscribe(self, callback: Callable[[Outcome], None]) -> None:
        """Register a listener called with the outcome of every ``exit``."""
        self._subscribers.append(callback)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def enter(
        self,
        mode: Mode,
        permissions: Union[Permissions, dict, None] = None,
    ) -> Optional[MazeSession]:
        """Start a session; ignored while one is already active."""
        if self.is_active or self.scene.is_maze_scene():
            logger.debug("enter(%s) ignored: already in maze mode", mode)
            return None

        perms = Permissions.coerce(permissions)
        start = self._start_location(mode)
        origin = self.player.get_position()

        if isinstance(mode, Generate):
            self.settings.gen_size = clamp_gen_size(mode.size)
        if start is not None:
            self.player.reserve_transfer(
                start.map_id, start.x, start.y, start.direction, FADE_NONE
            )

        self.session = MazeSession(
            mode=mode,
            return_location=origin,
            start_location=start,
            permissions=perms,
        )
        self.scene.switch_scene("maze")
        logger.debug("Entered maze mode (%s)", self.phase.value)
        return self.session

    def exit(self, outcome: Outcome) -> Optional[Outcome]:
        """End the session with an outcome and publish it."""
        session = self.session
        if session is None:
            return None

        session.outcome = outcome
        self.maze_clear = outcome == Outcome.SUCCESS
        if session.restores_origin:
            origin = session.return_location
            self.player.reserve_transfer(
                origin.map_id, origin.x, origin.y, origin.direction, FADE_NONE
            )
        self.session = None
        self.scene.switch_scene("map")
        logger.debug("Left maze mode: %s", outcome.value)

        for callback in list(self._subscribers):
            callback(outcome)
        return outcome

    def leave(self) -> bool:
        """Bare switch back to the map scene, outcome left untouched."""
        if self.session is None:
            return False
        self.session = None
        self.scene.switch_scene("map")
        logger.debug("Maze mode switched off")
        return True

    def toggle(
        self,
        mode: Mode,
        permissions: Union[Permissions, dict, None] = None,
    ) -> Optional[MazeSession]:
        if self.is_active:
            self.leave()
            return None
        return self.enter(mode, permissions)

    # ------------------------------------------------------------------
    # Pause menu actions
    # ------------------------------------------------------------------
    def quit(self) -> bool:
        """Give up the maze; refused unless the session allows quitting."""
        if self.session is None or not self.session.can_quit:
            return False
        self.exit(Outcome.FAILURE)
        return True

    def retry(self) -> bool:
        """Restart from the session's start location.

        A generated maze is generated again. Refused unless the session
        allows retrying.
        """
        session = self.session
        if session is None or not session.can_retry:
            return False
        start = session.start_location or session.return_location
        self.player.reserve_transfer(
            start.map_id, start.x, start.y, start.direction, FADE_NONE
        )
        self.scene.switch_scene("maze")
        return True

    def _start_location(self, mode: Mode) -> Optional[Location]:
        if isinstance(mode, LoadMap):
            return Location(map_id=mode.map_id, x=mode.x, y=mode.y, direction=mode.direction)
        if isinstance(mode, Generate):
            x, y = entrance_for_size(clamp_gen_size(mode.size))
            return Location(map_id=GENERATED_MAP_ID, x=x, y=y, direction=DOWN)
        return None

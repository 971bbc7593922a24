"""Interfaces of the host engine consumed by maze mode."""

from abc import ABC, abstractmethod
from typing import Any

from ..core.models import Location
from ..core.rules import SceneKind


class SceneHost(ABC):
    """Switches between the normal map scene and maze mode."""

    @abstractmethod
    def switch_scene(self, kind: SceneKind) -> None:
        raise NotImplementedError

    @abstractmethod
    def is_maze_scene(self) -> bool:
        raise NotImplementedError


class PlayerStore(ABC):
    """Player position and pending map transfers."""

    @abstractmethod
    def get_position(self) -> Location:
        raise NotImplementedError

    @abstractmethod
    def reserve_transfer(
        self, map_id: Any, x: Any, y: Any, direction: Any, fade_type: int
    ) -> None:
        """Queue a transfer, performed by the host on its next scene start."""
        raise NotImplementedError

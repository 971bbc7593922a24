"""Data models (Pydantic) for map documents, events and locations."""

from typing import Any, Optional
from pydantic import BaseModel, Field

from .rules import CODE_END, GOAL_NOTE, MAP_LAYERS, PRIORITY_SAME, TRIGGER_ACTION_BUTTON


class Location(BaseModel):
    """A player position on a given map."""

    map_id: Any = Field(..., description="Map id (GENERATED_MAP_ID for generated mazes)")
    x: Any = Field(..., description="Tile x coordinate")
    y: Any = Field(..., description="Tile y coordinate")
    direction: Any = Field(default=2, description="Facing (2 down, 4 left, 6 right, 8 up)")

    model_config = {"frozen": True}


class EventCommand(BaseModel):
    """One entry of an event page's command list."""

    code: int = Field(..., description="Command code")
    indent: int = Field(default=0, ge=0)
    parameters: list[Any] = Field(default_factory=list)


class EventImage(BaseModel):
    """Visual descriptor of an event page."""

    tile_id: int = 0
    character_name: str = ""
    direction: int = 2
    pattern: int = 0
    character_index: int = 0


class MoveRoute(BaseModel):
    commands: list[EventCommand] = Field(
        default_factory=lambda: [EventCommand(code=CODE_END)]
    )
    repeat: bool = True
    skippable: bool = False
    wait: bool = False


class EventPage(BaseModel):
    """A single page of a map event: appearance, trigger and commands."""

    conditions: dict[str, Any] = Field(default_factory=dict)
    direction_fix: bool = False
    image: EventImage = Field(default_factory=EventImage)
    commands: list[EventCommand] = Field(
        default_factory=lambda: [EventCommand(code=CODE_END)]
    )
    move_frequency: int = 3
    move_route: MoveRoute = Field(default_factory=MoveRoute)
    move_speed: int = 3
    move_type: int = 0
    priority_type: int = PRIORITY_SAME
    step_anime: bool = False
    through: bool = False
    trigger: int = TRIGGER_ACTION_BUTTON
    walk_anime: bool = True


class GameEvent(BaseModel):
    """A placeable, triggerable map entity."""

    id: int = Field(..., ge=1, description="Event id (index in the map's event list)")
    name: str = Field(default="", description="Editor name")
    note: str = Field(default="", description="Note tags such as <goal>")
    pages: list[EventPage] = Field(default_factory=lambda: [EventPage()])
    x: int = 0
    y: int = 0
    locked: bool = Field(
        default=False,
        exclude=True,
        description="Runtime flag: event is currently running an interpreter",
    )

    @property
    def is_goal(self) -> bool:
        return GOAL_NOTE in self.note

    @property
    def effects(self) -> list[EventCommand]:
        """Commands of the first page, without the list terminator."""
        if not self.pages:
            return []
        return [cmd for cmd in self.pages[0].commands if cmd.code != CODE_END]


class MapDocument(BaseModel):
    """In-memory map consumed by the host's persistence and render layers."""

    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    scroll_type: int = 0
    tileset_id: int = 1
    data: list[int] = Field(default_factory=list, description="Tile ids, MAP_LAYERS layers of width*height")
    events: list[Optional[GameEvent]] = Field(
        default_factory=lambda: [None],
        description="Event list; index 0 is always empty",
    )

    def tile_at(self, x: int, y: int, layer: int = 0) -> int:
        """Tile id of a given layer at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"({x}, {y}) outside {self.width}x{self.height} map")
        if not 0 <= layer < MAP_LAYERS:
            raise IndexError(f"layer {layer} out of range")
        return self.data[(layer * self.height + y) * self.width + x]

    def goal_events(self) -> list[GameEvent]:
        return [event for event in self.events if event is not None and event.is_goal]

    def event_at(self, x: int, y: int) -> Optional[GameEvent]:
        for event in self.events:
            if event is not None and event.x == x and event.y == y:
                return event
        return None

"""Goal event factory.

Builds the single event that ends a generated maze with success when the
player touches it. Its appearance is borrowed from the event that invoked
maze mode, when there is one.
"""

import logging
from typing import Iterable, Optional

from .models import EventCommand, EventImage, EventPage, GameEvent, MoveRoute
from .rules import (
    CODE_END,
    CODE_PLUGIN_COMMAND,
    DOWN,
    GOAL_NOTE,
    PRIORITY_SAME,
    SUCCESS_COMMAND,
    TRIGGER_PLAYER_TOUCH,
)

logger = logging.getLogger(__name__)

GOAL_EVENT_ID = 1
DEFAULT_CHARACTER = "Actor1"


def success_commands() -> list[EventCommand]:
    """The goal's fixed action list: signal success, then end."""
    return [
        EventCommand(code=CODE_PLUGIN_COMMAND, indent=0, parameters=[SUCCESS_COMMAND]),
        EventCommand(code=CODE_END, indent=0, parameters=[]),
    ]


def find_template(events: Iterable[Optional[GameEvent]]) -> Optional[GameEvent]:
    """First event flagged as locked (the one running the maze command)."""
    for event in events:
        if event is not None and event.locked:
            return event
    return None


def _default_page() -> EventPage:
    return EventPage(
        conditions={
            "actor_id": 1,
            "actor_valid": False,
            "item_id": 1,
            "item_valid": False,
            "self_switch_ch": "A",
            "self_switch_valid": False,
            "switch1_id": 1,
            "switch1_valid": False,
            "switch2_id": 1,
            "switch2_valid": False,
            "variable_id": 1,
            "variable_valid": False,
            "variable_value": 0,
        },
        image=EventImage(character_name=DEFAULT_CHARACTER, direction=DOWN),
        move_frequency=3,
        move_route=MoveRoute(),
        move_speed=3,
        move_type=0,
        priority_type=PRIORITY_SAME,
        step_anime=True,
        walk_anime=True,
    )


def build_goal_event(template: Optional[GameEvent] = None) -> GameEvent:
    """Create the goal event, optionally cloned from a template.

    Args:
        template: event whose look and metadata are copied (first page only)

    Returns:
        a goal event at (0, 0); the caller assigns the position
    """
    if template is not None and template.pages:
        page = template.pages[0].model_copy(deep=True)
        name = template.name
    else:
        logger.warning("Invoking event not found. Creating default goal event.")
        page = _default_page()
        name = f"EV{GOAL_EVENT_ID:03d}"

    page.through = False
    page.trigger = TRIGGER_PLAYER_TOUCH
    page.direction_fix = True
    page.image.direction = DOWN
    page.commands = success_commands()
    return GameEvent(id=GOAL_EVENT_ID, name=name, note=GOAL_NOTE, pages=[page])

"""Maze mode rules and constants.

Shared numbers of the host engine (map ids, facing, event codes) plus the
small pure helpers the session controller and the generator agree on.
"""

from typing import Any, Literal

# Map id that makes the map loader generate a maze instead of loading data
GENERATED_MAP_ID = -1

# Smallest logical size a generated maze may have
MIN_GEN_SIZE = 4

# Player facing (numpad layout)
DOWN = 2
LEFT = 4
RIGHT = 6
UP = 8

DIRECTIONS = {
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
    UP: (0, -1),
}

# Transfer fade types
FADE_BLACK = 0
FADE_WHITE = 1
FADE_NONE = 2

# Event command codes
CODE_END = 0
CODE_PLUGIN_COMMAND = 356

# Event page triggers
TRIGGER_ACTION_BUTTON = 0
TRIGGER_PLAYER_TOUCH = 1
TRIGGER_EVENT_TOUCH = 2

# Event page priority
PRIORITY_BELOW = 0
PRIORITY_SAME = 1
PRIORITY_ABOVE = 2

GOAL_NOTE = "<goal>"
COMMAND_NAME = "Maze"
SUCCESS_COMMAND = f"{COMMAND_NAME} success"
FAIL_COMMAND = f"{COMMAND_NAME} fail"

# Number of tile layers in a map's data array
MAP_LAYERS = 6

SceneKind = Literal["map", "maze"]


def clamp_gen_size(size: Any) -> Any:
    """Clamp a requested generation size to the minimum.

    No numeric validation happens here: a value that cannot be compared
    with an int raises the interpreter's own ``TypeError``.
    """
    return max(size, MIN_GEN_SIZE)


def entrance_for_size(size: int) -> tuple[int, int]:
    """Grid coordinate of a generated maze's entrance."""
    half = size // 2
    return half * 2, half * 2


def parse_flag(value: Any) -> bool:
    """Interpret an optional boolean-ish command flag.

    Only an explicit ``"false"`` disables; anything else, including
    absence, enables.
    """
    if value is False:
        return False
    return value != "false"

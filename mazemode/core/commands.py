"""Maze plugin commands.

Text commands of the form ``Maze <sub> [args...]``:

    Maze on [retry [quit]]
    Maze off
    Maze toggle [retry [quit]]
    Maze map id x y direction [retry [quit]]
    Maze generate n [retry [quit]]
    Maze success
    Maze fail

Arguments are not validated; a non-numeric token is passed on as-is and
fails wherever it is first used as a number.
"""

import shlex
from typing import Any, Optional

from .models import GameEvent
from .rules import CODE_PLUGIN_COMMAND, COMMAND_NAME
from .session import Generate, LoadMap, MazeSessionController, Outcome, Permissions, Reskin


def parse_command(text: str) -> tuple[str, list[str]]:
    """Split a command line into its name and arguments."""
    parts = shlex.split(text)
    if not parts:
        return "", []
    return parts[0], parts[1:]


def plugin_commands(event: GameEvent) -> list[str]:
    """Plugin command lines in the first page of an event."""
    return [
        str(cmd.parameters[0])
        for cmd in event.effects
        if cmd.code == CODE_PLUGIN_COMMAND and cmd.parameters
    ]


def _number(token: Optional[str]) -> Any:
    if token is None:
        return None
    try:
        return int(token)
    except ValueError:
        try:
            return float(token)
        except ValueError:
            return token


def _arg(args: list[str], index: int) -> Optional[str]:
    return args[index] if index < len(args) else None


def _permissions(args: list[str], start: int) -> Permissions:
    return Permissions.from_flags(_arg(args, start), _arg(args, start + 1))


def dispatch_command(controller: MazeSessionController, args: list[str]) -> str:
    """Run one ``Maze`` sub-command against the session controller.

    Returns:
        a short status word: the sub-command on success, ``ignored`` when
        the transition was not allowed in the current state
    """
    sub = _arg(args, 0)

    if sub == "on":
        done = controller.enter(Reskin(), _permissions(args, 1)) is not None
    elif sub == "off":
        done = controller.leave()
    elif sub == "toggle":
        was_active = controller.is_active
        controller.toggle(Reskin(), _permissions(args, 1))
        done = was_active != controller.is_active
    elif sub == "map":
        mode = LoadMap(
            map_id=_number(_arg(args, 1)),
            x=_number(_arg(args, 2)),
            y=_number(_arg(args, 3)),
            direction=_number(_arg(args, 4)),
        )
        done = controller.enter(mode, _permissions(args, 5)) is not None
    elif sub == "generate":
        mode = Generate(size=_number(_arg(args, 1)))
        done = controller.enter(mode, _permissions(args, 2)) is not None
    elif sub == "success":
        done = controller.exit(Outcome.SUCCESS) is not None
    elif sub == "fail":
        done = controller.exit(Outcome.FAILURE) is not None
    else:
        return "unknown"

    return sub if done else "ignored"


def run_command_line(controller: MazeSessionController, text: str) -> Optional[str]:
    """Run a full ``Maze ...`` line; other plugin commands return None."""
    name, args = parse_command(text)
    if name != COMMAND_NAME:
        return None
    return dispatch_command(controller, args)

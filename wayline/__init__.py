"""
Wayline: random encounter tables for tabletop play.

Entry points:
- load(text): parse TOML table data into a Table or a list of Tables
- parse_command(line): turn a line of input into a Command
- resolve(table, dice): roll and find the matching Entry
- evaluate(dice): roll <count>d<sides> and return the sum
"""

from wayline.data_models import (
    DiceError,
    DiceErrorKind,
    DiceResult,
    DiceRoller,
    GameClock,
    InvalidSidesError,
    MalformedDiceError,
    MAX_DICE,
    TooManyDiceError,
    WaylineError,
    evaluate,
)
from wayline.tables import (
    Entry,
    FormatError,
    Table,
    TableManager,
    TableResolution,
    load,
    resolve,
)
from wayline.commands import Command, CommandType, parse_command
from wayline.game_state import SessionController

__version__ = "0.1.0"

__all__ = [
    "DiceError",
    "DiceErrorKind",
    "DiceResult",
    "DiceRoller",
    "GameClock",
    "InvalidSidesError",
    "MalformedDiceError",
    "MAX_DICE",
    "TooManyDiceError",
    "WaylineError",
    "evaluate",
    "Entry",
    "FormatError",
    "Table",
    "TableManager",
    "TableResolution",
    "load",
    "resolve",
    "Command",
    "CommandType",
    "parse_command",
    "SessionController",
]

"""
Command parser for Wayline.

Turns one line of user input into a typed, immutable command. Parsing
never fails: input that does not fit any command becomes an
UnknownCommand carrying the text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional
import re


class CommandType(str, Enum):
    """The closed set of commands a user can issue."""
    ROLL_TABLE = "roll_table"   # roll [table]
    ROLL_DICE = "roll_dice"     # dice <notation>
    LIST = "list"               # list [table]
    TIME = "time"               # time
    ADD = "add"                 # add <minutes>
    USE = "use"                 # use <table>
    HELP = "help"               # help
    UNKNOWN = "unknown"         # anything else


# =============================================================================
# COMMANDS
# =============================================================================


@dataclass(frozen=True)
class Command:
    """Base class for parsed commands."""
    command_type: ClassVar[CommandType] = CommandType.UNKNOWN


@dataclass(frozen=True)
class RollTable(Command):
    """Roll on a named table, or on the active table when no name is given."""
    command_type: ClassVar[CommandType] = CommandType.ROLL_TABLE
    table_name: Optional[str] = None


@dataclass(frozen=True)
class RollDice(Command):
    """Roll a dice expression not tied to any table."""
    command_type: ClassVar[CommandType] = CommandType.ROLL_DICE
    notation: str = ""


@dataclass(frozen=True)
class ListTable(Command):
    """Show a table's contents, or the active table when no name is given."""
    command_type: ClassVar[CommandType] = CommandType.LIST
    table_name: Optional[str] = None


@dataclass(frozen=True)
class ShowTime(Command):
    command_type: ClassVar[CommandType] = CommandType.TIME


@dataclass(frozen=True)
class AddTime(Command):
    """Advance the in-game clock."""
    command_type: ClassVar[CommandType] = CommandType.ADD
    minutes: int = 0


@dataclass(frozen=True)
class UseTable(Command):
    """Select the active table."""
    command_type: ClassVar[CommandType] = CommandType.USE
    table_name: str = ""


@dataclass(frozen=True)
class ShowHelp(Command):
    command_type: ClassVar[CommandType] = CommandType.HELP


@dataclass(frozen=True)
class UnknownCommand(Command):
    """Input that did not parse as any command."""
    command_type: ClassVar[CommandType] = CommandType.UNKNOWN
    text: str = ""


# =============================================================================
# PARSING
# =============================================================================


_MINUTES_PATTERN = re.compile(r"[0-9]+")


def _table_name(args: list[str]) -> str:
    """Join multi-word table names and normalize case."""
    return " ".join(args).lower()


def _parse_roll(args: list[str], text: str) -> Command:
    return RollTable(_table_name(args) if args else None)


def _parse_list(args: list[str], text: str) -> Command:
    return ListTable(_table_name(args) if args else None)


def _parse_use(args: list[str], text: str) -> Command:
    if not args:
        return UnknownCommand(text)
    return UseTable(_table_name(args))


def _parse_dice(args: list[str], text: str) -> Command:
    if len(args) != 1:
        return UnknownCommand(text)
    return RollDice(args[0])


def _parse_add(args: list[str], text: str) -> Command:
    if len(args) != 1 or not _MINUTES_PATTERN.fullmatch(args[0]):
        return UnknownCommand(text)
    return AddTime(int(args[0]))


def _parse_time(args: list[str], text: str) -> Command:
    # Trailing words are ignored: "time please" shows the time
    return ShowTime()


def _parse_help(args: list[str], text: str) -> Command:
    return ShowHelp()


_PARSERS = {
    "roll": _parse_roll,
    "list": _parse_list,
    "use": _parse_use,
    "dice": _parse_dice,
    "add": _parse_add,
    "time": _parse_time,
    "help": _parse_help,
}

COMMAND_KEYWORDS: tuple[str, ...] = tuple(_PARSERS)


def parse_command(text: str) -> Command:
    """
    Parse one line of user input.

    The first word picks the command (case-insensitive); the remaining
    words are its arguments. Table names are lower-cased, dice notation
    is passed through as typed.

    Args:
        text: Raw input line

    Returns:
        The parsed command; UnknownCommand when the line does not fit
    """
    trimmed = text.strip()
    if not trimmed:
        return UnknownCommand(text)

    keyword, *args = trimmed.split()
    parser = _PARSERS.get(keyword.lower())
    if parser is None:
        return UnknownCommand(trimmed)
    return parser(args, trimmed)

"""Command language for Wayline."""

from wayline.commands.command_parser import (
    CommandType,
    Command,
    RollTable,
    RollDice,
    ListTable,
    ShowTime,
    AddTime,
    UseTable,
    ShowHelp,
    UnknownCommand,
    COMMAND_KEYWORDS,
    parse_command,
)

__all__ = [
    "CommandType",
    "Command",
    "RollTable",
    "RollDice",
    "ListTable",
    "ShowTime",
    "AddTime",
    "UseTable",
    "ShowHelp",
    "UnknownCommand",
    "COMMAND_KEYWORDS",
    "parse_command",
]

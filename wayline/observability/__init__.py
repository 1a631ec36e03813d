"""
Observability for Wayline sessions.

Provides a session-wide log of dice rolls, table lookups, clock advances
and dispatched commands.
"""

from wayline.observability.run_log import (
    RunLog,
    LogEvent,
    EventType,
    RollEvent,
    TableLookupEvent,
    TimeStepEvent,
    CommandEvent,
    get_run_log,
    reset_run_log,
)

__all__ = [
    "RunLog",
    "LogEvent",
    "EventType",
    "RollEvent",
    "TableLookupEvent",
    "TimeStepEvent",
    "CommandEvent",
    "get_run_log",
    "reset_run_log",
]

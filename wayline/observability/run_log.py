"""
Run Log for session event tracking.

Captures dice rolls, table lookups, clock advances and dispatched commands
so a session can be inspected or saved after play.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Callable
import json
import logging

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of events that can be logged."""

    ROLL = "roll"  # Dice roll
    TABLE_LOOKUP = "table_lookup"  # Roll resolved against a table
    TIME_STEP = "time_step"  # In-game clock advanced
    COMMAND = "command"  # User command dispatched
    CUSTOM = "custom"  # Named event with free-form details


@dataclass
class LogEvent:
    """Base class for all logged events."""

    # Subclasses overwrite event_type in __post_init__
    event_type: EventType = EventType.CUSTOM
    timestamp: datetime = field(default_factory=datetime.now)
    sequence_number: int = 0
    game_time: Optional[str] = None  # In-game time as string
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            "sequence_number": self.sequence_number,
            "game_time": self.game_time,
            "context": self.context,
        }

    def __str__(self) -> str:
        return f"[{self.sequence_number}] {self.event_type.value.upper()} {self.context}"


@dataclass
class RollEvent(LogEvent):
    """A dice roll event."""

    notation: str = ""  # e.g., "2d6"
    rolls: list[int] = field(default_factory=list)  # Individual die results
    total: int = 0
    reason: str = ""  # Why this roll was made

    def __post_init__(self):
        self.event_type = EventType.ROLL

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "notation": self.notation,
                "rolls": self.rolls,
                "total": self.total,
                "reason": self.reason,
            }
        )
        return base

    def __str__(self) -> str:
        return f"[{self.sequence_number}] ROLL {self.notation}: {self.rolls} = {self.total} ({self.reason})"


@dataclass
class TableLookupEvent(LogEvent):
    """A roll matched (or not) against a table's rows."""

    table_key: str = ""
    table_name: str = ""
    dice: str = ""
    roll_total: int = 0
    result_text: Optional[str] = None  # Entry name, None when nothing matched
    dice_error: Optional[str] = None

    def __post_init__(self):
        self.event_type = EventType.TABLE_LOOKUP

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "table_key": self.table_key,
                "table_name": self.table_name,
                "dice": self.dice,
                "roll_total": self.roll_total,
                "result_text": self.result_text,
                "dice_error": self.dice_error,
            }
        )
        return base

    def __str__(self) -> str:
        outcome = self.result_text if self.result_text is not None else "no match"
        return f"[{self.sequence_number}] TABLE {self.table_name} ({self.dice}): {self.roll_total} -> {outcome}"


@dataclass
class TimeStepEvent(LogEvent):
    """An advance of the in-game clock."""

    old_time: str = ""
    new_time: str = ""
    minutes_advanced: int = 0
    reason: str = ""

    def __post_init__(self):
        self.event_type = EventType.TIME_STEP

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "old_time": self.old_time,
                "new_time": self.new_time,
                "minutes_advanced": self.minutes_advanced,
                "reason": self.reason,
            }
        )
        return base

    def __str__(self) -> str:
        return f"[{self.sequence_number}] TIME {self.old_time} -> {self.new_time} (+{self.minutes_advanced}m)"


@dataclass
class CommandEvent(LogEvent):
    """A user input line and the command it parsed to."""

    raw_input: str = ""
    command_type: str = ""

    def __post_init__(self):
        self.event_type = EventType.COMMAND

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update({"raw_input": self.raw_input, "command_type": self.command_type})
        return base

    def __str__(self) -> str:
        return f"[{self.sequence_number}] COMMAND {self.command_type}: {self.raw_input!r}"


class RunLog:
    """
    Session-wide event log.

    A single instance is shared by the dice roller, the table resolver and
    the session controller. Events are numbered in the order they happen
    and can be filtered, summarized, or written out as JSON.
    """

    _instance: Optional["RunLog"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._events: list[LogEvent] = []
        self._sequence = 0
        self._seed: Optional[int] = None
        self._session_start = datetime.now()
        self._game_time_provider: Optional[Callable[[], str]] = None

    def reset(self) -> None:
        """Clear all events and start a new session."""
        self._events = []
        self._sequence = 0
        self._seed = None
        self._session_start = datetime.now()
        self._game_time_provider = None

    def set_seed(self, seed: int) -> None:
        """Record the seed used for this session."""
        self._seed = seed

    def get_seed(self) -> Optional[int]:
        return self._seed

    def set_game_time_provider(self, provider: Optional[Callable[[], str]]) -> None:
        """
        Set the callable used to stamp events with in-game time.

        The session controller passes its clock's string form here.
        """
        self._game_time_provider = provider

    def _get_game_time(self) -> Optional[str]:
        if self._game_time_provider is None:
            return None
        try:
            return self._game_time_provider()
        except Exception as e:
            logger.debug(f"Game time provider failed: {e}")
            return None

    def _log_event(self, event: LogEvent) -> None:
        self._sequence += 1
        event.sequence_number = self._sequence
        event.game_time = self._get_game_time()
        self._events.append(event)

    def log_roll(
        self,
        notation: str,
        rolls: list[int],
        total: int,
        reason: str = "",
        context: Optional[dict[str, Any]] = None,
    ) -> RollEvent:
        """Log a dice roll."""
        event = RollEvent(
            notation=notation,
            rolls=list(rolls),
            total=total,
            reason=reason,
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_table_lookup(
        self,
        table_key: str,
        table_name: str,
        dice: str,
        roll_total: int,
        result_text: Optional[str],
        dice_error: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> TableLookupEvent:
        """Log a table lookup."""
        event = TableLookupEvent(
            table_key=table_key,
            table_name=table_name,
            dice=dice,
            roll_total=roll_total,
            result_text=result_text,
            dice_error=dice_error,
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_time_step(
        self,
        old_time: str,
        new_time: str,
        minutes_advanced: int = 0,
        reason: str = "",
        context: Optional[dict[str, Any]] = None,
    ) -> TimeStepEvent:
        """Log a clock advance."""
        event = TimeStepEvent(
            old_time=old_time,
            new_time=new_time,
            minutes_advanced=minutes_advanced,
            reason=reason,
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_command(self, raw_input: str, command_type: str) -> CommandEvent:
        """Log a dispatched user command."""
        event = CommandEvent(raw_input=raw_input, command_type=command_type)
        self._log_event(event)
        return event

    def log_custom(
        self,
        event_name: str,
        details: dict[str, Any],
    ) -> LogEvent:
        """Log a custom event."""
        event = LogEvent(
            event_type=EventType.CUSTOM,
            context={"event_name": event_name, **details},
        )
        self._log_event(event)
        return event

    def get_events(
        self,
        event_type: Optional[EventType] = None,
        since_sequence: int = 0,
    ) -> list[LogEvent]:
        """
        Get logged events.

        Args:
            event_type: Filter by event type (None = all)
            since_sequence: Only events after this sequence number

        Returns:
            List of events
        """
        events = [e for e in self._events if e.sequence_number > since_sequence]
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return events

    def get_rolls(self) -> list[RollEvent]:
        return [e for e in self._events if isinstance(e, RollEvent)]

    def get_table_lookups(self) -> list[TableLookupEvent]:
        return [e for e in self._events if isinstance(e, TableLookupEvent)]

    def get_time_steps(self) -> list[TimeStepEvent]:
        return [e for e in self._events if isinstance(e, TimeStepEvent)]

    def get_commands(self) -> list[CommandEvent]:
        return [e for e in self._events if isinstance(e, CommandEvent)]

    def get_event_count(self) -> int:
        return len(self._events)

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the run log."""
        return {
            "session_start": self._session_start.isoformat(),
            "seed": self._seed,
            "total_events": len(self._events),
            "rolls": len(self.get_rolls()),
            "table_lookups": len(self.get_table_lookups()),
            "time_steps": len(self.get_time_steps()),
            "commands": len(self.get_commands()),
            "last_sequence": self._sequence,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize the entire log to a dictionary."""
        return {
            "session_start": self._session_start.isoformat(),
            "seed": self._seed,
            "sequence": self._sequence,
            "events": [e.to_dict() for e in self._events],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def save(self, filepath: str) -> None:
        """Save the log to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.to_json())
        logger.info(f"RunLog saved to {filepath}")

    def format_log(
        self,
        event_types: Optional[list[EventType]] = None,
        max_events: Optional[int] = None,
    ) -> str:
        """
        Format the log as a human-readable string.

        Args:
            event_types: Filter by event types (None = all)
            max_events: Maximum number of most recent events to include

        Returns:
            Formatted log string
        """
        lines = [
            "=== Run Log ===",
            f"Session: {self._session_start.isoformat()}",
            f"Seed: {self._seed if self._seed is not None else 'not set'}",
            f"Total Events: {len(self._events)}",
            "",
        ]

        events = self._events
        if event_types:
            events = [e for e in events if e.event_type in event_types]
        if max_events:
            events = events[-max_events:]

        for event in events:
            lines.append(str(event))

        return "\n".join(lines)


# Singleton access
_run_log: Optional[RunLog] = None


def get_run_log() -> RunLog:
    """Get the global RunLog instance."""
    global _run_log
    if _run_log is None:
        _run_log = RunLog()
    return _run_log


def reset_run_log() -> RunLog:
    """Reset and return the global RunLog instance."""
    log = get_run_log()
    log.reset()
    return log

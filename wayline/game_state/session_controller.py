"""
Session Controller for Wayline.

Owns the loaded tables, the active-table selection, the in-game clock and
the transcript shown to the user. Every user command flows through
`handle_input`, which always answers with lines of text and never raises.
"""

from typing import Callable, Optional, Union
import logging

from wayline.commands.command_parser import (
    AddTime,
    Command,
    CommandType,
    ListTable,
    RollDice,
    RollTable,
    UnknownCommand,
    UseTable,
    parse_command,
)
from wayline.data_models import DiceError, DiceRoller, GameClock
from wayline.observability.run_log import get_run_log
from wayline.tables.table_loader import FormatError, load
from wayline.tables.table_manager import TableManager
from wayline.tables.table_resolver import resolve
from wayline.tables.table_types import Table, table_key

logger = logging.getLogger(__name__)


HELP_LINES = [
    "Available commands:",
    "  roll [table]   - Roll on the active table, or on the named table",
    "  dice NdM       - Roll dice, e.g. 'dice 2d6'",
    "  list [table]   - Show the active or named table, or all loaded tables",
    "  use TABLE      - Make TABLE the active table",
    "  time           - Show the in-game time",
    "  add MINUTES    - Advance the in-game time",
    "  help           - Show this help",
]


class SessionController:
    """
    Central coordinator for a Wayline session.

    Commands are processed one at a time and each is applied in full
    before the next is accepted.

    Attributes:
        tables: Loaded tables keyed by lower-cased name
        active_table: Key of the table used by bare `roll` / `list`
        clock: In-game clock
        transcript: Every line shown to the user, in order
    """

    def __init__(
        self,
        tables: Optional[TableManager] = None,
        clock: Optional[GameClock] = None,
    ):
        self.tables = tables if tables is not None else TableManager()
        self.active_table: Optional[str] = None
        self.clock = clock if clock is not None else GameClock()
        self.transcript: list[str] = []

        self._handlers: dict[CommandType, Callable[[Command], list[str]]] = {
            CommandType.ROLL_TABLE: self._on_roll_table,
            CommandType.ROLL_DICE: self._on_roll_dice,
            CommandType.LIST: self._on_list,
            CommandType.TIME: self._on_time,
            CommandType.ADD: self._on_add,
            CommandType.USE: self._on_use,
            CommandType.HELP: self._on_help,
            CommandType.UNKNOWN: self._on_unknown,
        }

        get_run_log().set_game_time_provider(lambda: str(self.clock))
        self._select_single_table()

    # =========================================================================
    # TRANSCRIPT
    # =========================================================================

    def _emit(self, lines: list[str]) -> list[str]:
        self.transcript.extend(lines)
        return lines

    def note(self, line: str) -> list[str]:
        """Append an informational line to the transcript."""
        return self._emit([line])

    # =========================================================================
    # LOADING
    # =========================================================================

    def load_text(self, text: str, source: Optional[str] = None) -> list[str]:
        """
        Load tables from TOML text.

        A file that fails to parse is rejected as a whole; tables loaded
        earlier stay as they were.

        Args:
            text: Table file contents
            source: Where the text came from, for messages

        Returns:
            Lines describing what was loaded or why loading failed
        """
        try:
            loaded = load(text)
        except FormatError as e:
            return self.load_failed(e, source)
        return self.add_tables(loaded, source)

    def load_failed(self, error: FormatError, source: Optional[str] = None) -> list[str]:
        """Report a table file that could not be loaded."""
        origin = f" from {source}" if source else ""
        logger.error(f"Failed to load tables{origin}: {error.message}")
        return self._emit([f"Failed to load tables{origin}: {error.message}"])

    def add_tables(
        self,
        loaded: Union[Table, list[Table]],
        source: Optional[str] = None,
    ) -> list[str]:
        """Register tables that were already parsed, reporting each one."""
        origin = f" from {source}" if source else ""
        new_tables = loaded if isinstance(loaded, list) else [loaded]
        get_run_log().log_custom(
            "tables_loaded",
            {"source": source, "tables": [table.name for table in new_tables]},
        )
        return self._emit(self._register_loaded(new_tables, origin))

    def _register_loaded(self, new_tables: list[Table], origin: str) -> list[str]:
        lines = []
        for table in new_tables:
            replaced = self.tables.register_table(table)
            lines.append(f"Loaded table{origin}: {table.name} ({len(table.rows)} entries, {table.roll})")
            if replaced is not None:
                lines.append(f"Warning: '{table.name}' replaced earlier table '{replaced.name}'.")

        if not new_tables:
            lines.append(f"No tables found{origin}.")

        logger.info(f"Loaded {len(new_tables)} tables{origin}; {len(self.tables)} available")
        self._select_single_table()
        return lines

    def _select_single_table(self) -> None:
        if self.active_table is None and len(self.tables) == 1:
            self.active_table = self.tables.list_tables()[0].key

    def get_active_table(self) -> Optional[Table]:
        if self.active_table is None:
            return None
        return self.tables.get_table(self.active_table)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def handle_input(self, line: str) -> list[str]:
        """
        Echo, parse and dispatch one line of input.

        Returns:
            The lines added to the transcript for this input
        """
        command = parse_command(line)
        get_run_log().log_command(line, command.command_type.value)
        lines = [f"> {line}"]
        lines.extend(self._dispatch(command))
        return self._emit(lines)

    def dispatch(self, command: Command) -> list[str]:
        """Apply an already-parsed command and append its output to the transcript."""
        return self._emit(self._dispatch(command))

    def _dispatch(self, command: Command) -> list[str]:
        handler = self._handlers[command.command_type]
        try:
            return handler(command)
        except Exception as e:
            logger.exception(f"Command {command!r} failed")
            return [f"Error: {e}"]

    # =========================================================================
    # COMMAND HANDLERS
    # =========================================================================

    def _resolve_target(self, name: Optional[str]) -> tuple[Optional[Table], Optional[str]]:
        """Find the named table, or the active one. Returns (table, error line)."""
        if name is not None:
            table = self.tables.get_table(name)
            if table is None:
                return None, f"Table not found: {name}"
            return table, None

        if self.active_table is None:
            if len(self.tables) == 0:
                return None, "No table loaded."
            return None, "No table selected. Use 'use TABLE' to pick one."

        table = self.get_active_table()
        if table is None:
            return None, f"Table not found: {self.active_table}"
        return table, None

    def _on_roll_table(self, command: RollTable) -> list[str]:
        table, error = self._resolve_target(command.table_name)
        if table is None:
            return [error]

        result = resolve(table)
        lines = []
        if result.dice_error is not None:
            lines.append(f"Warning: {table.name} has invalid dice '{result.dice}', counting the roll as 0.")
        if result.entry is not None:
            lines.append(f"Rolled on {table.name}: {result.entry.name} ({result.roll})")
        else:
            lines.append(f"No matching entry on {table.name} ({result.roll}).")
        return lines

    def _on_roll_dice(self, command: RollDice) -> list[str]:
        try:
            result = DiceRoller.roll(command.notation, "dice command")
        except DiceError as e:
            return [f"Invalid dice expression '{command.notation}': {e.message}"]
        return [f"Rolled {result}"]

    def _on_list(self, command: ListTable) -> list[str]:
        if command.table_name is None and self.active_table is None:
            return self._list_all()

        table, error = self._resolve_target(command.table_name)
        if table is None:
            return [error]

        lines = [f"Table: {table.name}", f"Dice: {table.roll}"]
        if not table.rows:
            lines.append("(no entries)")
        for entry in table.rows:
            lines.append(f"- {entry.name}: {entry.numbers}")
        return lines

    def _list_all(self) -> list[str]:
        tables = self.tables.list_tables()
        if not tables:
            return ["No tables loaded."]
        lines = ["Loaded tables:"]
        for table in tables:
            lines.append(f"- {table.name} ({table.roll})")
        return lines

    def _on_time(self, command: Command) -> list[str]:
        return [f"Current in-game time: {self.clock}"]

    def _on_add(self, command: AddTime) -> list[str]:
        old_time = str(self.clock)
        self.clock.advance(command.minutes)
        get_run_log().log_time_step(
            old_time=old_time,
            new_time=str(self.clock),
            minutes_advanced=command.minutes,
            reason="add command",
        )
        return [f"Added {command.minutes} minutes. New time: {self.clock}"]

    def _on_use(self, command: UseTable) -> list[str]:
        table = self.tables.get_table(command.table_name)
        if table is None:
            return [f"Table not found: {command.table_name}"]
        self.active_table = table_key(table.name)
        logger.info(f"Active table is now '{table.name}'")
        return [f"Now using table: {table.name}"]

    def _on_help(self, command: Command) -> list[str]:
        return list(HELP_LINES)

    def _on_unknown(self, command: UnknownCommand) -> list[str]:
        return [f"Unknown command: {command.text}"]

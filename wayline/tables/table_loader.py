"""
TOML loading and saving for Wayline tables.

A file holds either one table at the top level:

    name = "Wilderness Encounters"
    roll = "2d6"

    [[rows]]
    name = "Goblin Ambush"
    numbers = [2, 3]

or several tables under a `table` key:

    [[table]]
    name = "Caves"
    roll = "1d6"

    [[table.rows]]
    name = "Bats"
    numbers = [1, 2, 3]

Only the shape of the data is checked here. A `roll` that is not valid
dice notation loads fine and fails later, when the table is rolled on.
"""

from pathlib import Path
from typing import Any, Optional, Union
import logging
import tomllib

import tomli_w

from wayline.data_models import WaylineError
from wayline.tables.table_types import Entry, Table

logger = logging.getLogger(__name__)


class FormatError(WaylineError):
    """Raised when table data is missing fields or has the wrong shape."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.message = message
        self.source = source
        if source:
            super().__init__(f"{source}: {message}")
        else:
            super().__init__(message)


# =============================================================================
# VALIDATION
# =============================================================================


def _require(data: dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise FormatError(f"{where} is missing required field '{key}'")
    return data[key]


def _require_str(data: dict[str, Any], key: str, where: str) -> str:
    value = _require(data, key, where)
    if not isinstance(value, str):
        raise FormatError(f"{where} field '{key}' must be a string, got {type(value).__name__}")
    return value


def _validate_numbers(value: Any, where: str) -> list[int]:
    if not isinstance(value, list):
        raise FormatError(f"{where} field 'numbers' must be an array of integers")
    for number in value:
        # bool is a subclass of int; `true` is not a roll value
        if isinstance(number, bool) or not isinstance(number, int):
            raise FormatError(f"{where} field 'numbers' contains non-integer value {number!r}")
        if number < 0:
            raise FormatError(f"{where} field 'numbers' contains negative value {number}")
    return list(value)


def _validate_entry(data: Any, where: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise FormatError(f"{where} must be a table with 'name' and 'numbers'")
    return {
        "name": _require_str(data, "name", where),
        "numbers": _validate_numbers(_require(data, "numbers", where), where),
    }


def _validate_table(data: Any, where: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise FormatError(f"{where} must be a table")

    name = _require_str(data, "name", where)
    label = f"table '{name}'"
    roll = _require_str(data, "roll", label)
    rows = _require(data, "rows", label)
    if not isinstance(rows, list):
        raise FormatError(f"{label} field 'rows' must be an array of tables")

    return {
        "name": name,
        "roll": roll,
        "rows": [
            _validate_entry(row, f"{label} row {index + 1}")
            for index, row in enumerate(rows)
        ],
    }


def _decode(text: str) -> dict[str, Any]:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise FormatError(f"invalid TOML: {e}") from e


# =============================================================================
# LOADING
# =============================================================================


def table_from_dict(data: Any, where: str = "table") -> Table:
    """
    Validate a decoded dictionary and build a Table from it.

    Raises:
        FormatError: if a required field is missing or has the wrong type
    """
    return Table.from_dict(_validate_table(data, where))


def parse_table(text: str) -> Table:
    """Parse a file holding a single top-level table."""
    return table_from_dict(_decode(text))


def _tables_from_document(document: dict[str, Any]) -> list[Table]:
    tables = document["table"]
    if not isinstance(tables, list):
        raise FormatError("'table' must be an array of tables ([[table]])")
    return [
        table_from_dict(data, f"table {index + 1}")
        for index, data in enumerate(tables)
    ]


def parse_tables(text: str) -> list[Table]:
    """Parse a file holding a list of tables under the `table` key."""
    document = _decode(text)
    _require(document, "table", "document")
    return _tables_from_document(document)


def load(text: str) -> Union[Table, list[Table]]:
    """
    Parse table file contents.

    Returns a list when the document has a top-level `table` key and a
    single Table otherwise.

    Raises:
        FormatError: on invalid TOML or badly shaped table data
    """
    document = _decode(text)
    if "table" in document:
        tables = _tables_from_document(document)
        logger.debug(f"Parsed {len(tables)} tables")
        return tables

    table = table_from_dict(document)
    logger.debug(f"Parsed table '{table.name}' with {len(table.rows)} rows")
    return table


def load_file(path: Union[str, Path]) -> Union[Table, list[Table]]:
    """
    Read and parse a table file.

    Raises:
        FormatError: if the file cannot be read or its contents are invalid
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FormatError(f"cannot read file: {e}", source=str(path)) from e

    try:
        return load(text)
    except FormatError as e:
        raise FormatError(e.message, source=str(path)) from e


# =============================================================================
# SAVING
# =============================================================================


def dump_table(table: Table) -> str:
    """Serialize one table as a top-level TOML document."""
    return tomli_w.dumps(table.to_dict())


def dump_tables(tables: list[Table]) -> str:
    """Serialize several tables under a `table` array."""
    return tomli_w.dumps({"table": [table.to_dict() for table in tables]})

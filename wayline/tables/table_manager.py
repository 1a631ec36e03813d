"""
Table collection for Wayline.

Keeps the loaded tables indexed by lower-cased name and rolls on them
by name.
"""

from typing import Iterable, Optional
import logging

from wayline.tables.table_resolver import TableResolution, resolve
from wayline.tables.table_types import Table, table_key

logger = logging.getLogger(__name__)


class TableManager:
    """
    Central manager for loaded tables.

    Tables are keyed by their lower-cased name. Registering a table whose
    key is already taken replaces the earlier table; the replacement is
    logged as a warning because the older table becomes unreachable.
    """

    def __init__(self, tables: Optional[Iterable[Table]] = None):
        self._tables: dict[str, Table] = {}
        if tables:
            self.register_tables(tables)

    def register_table(self, table: Table) -> Optional[Table]:
        """
        Add a table to the collection.

        Returns:
            The table that was replaced, if the key was already taken
        """
        previous = self._tables.get(table.key)
        if previous is not None:
            logger.warning(
                f"Table '{table.name}' replaces previously loaded table "
                f"'{previous.name}' (same key '{table.key}')"
            )
        self._tables[table.key] = table
        logger.debug(f"Registered table '{table.name}' ({len(table.rows)} rows, {table.roll})")
        return previous

    def register_tables(self, tables: Iterable[Table]) -> list[Table]:
        """Register several tables in order. Returns the tables replaced."""
        replaced = []
        for table in tables:
            previous = self.register_table(table)
            if previous is not None:
                replaced.append(previous)
        return replaced

    def get_table(self, name: str) -> Optional[Table]:
        """Look up a table by name, ignoring case."""
        return self._tables.get(table_key(name))

    def has_table(self, name: str) -> bool:
        return table_key(name) in self._tables

    def list_tables(self) -> list[Table]:
        """All tables, sorted by key."""
        return [self._tables[key] for key in sorted(self._tables)]

    def roll_table(self, name: str, dice_expression: Optional[str] = None) -> Optional[TableResolution]:
        """
        Roll on a table by name.

        Returns:
            The resolution, or None if no table has that name
        """
        table = self.get_table(name)
        if table is None:
            return None
        return resolve(table, dice_expression)

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_table(name)

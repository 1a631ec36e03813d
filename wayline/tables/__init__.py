"""
Random tables for Wayline.

This module provides:
- Table and Entry types
- TOML loading and saving with shape validation
- Roll-to-entry resolution with first-match precedence
- A name-indexed table collection
"""

from wayline.tables.table_types import (
    Entry,
    Table,
    table_key,
)

from wayline.tables.table_loader import (
    FormatError,
    dump_table,
    dump_tables,
    load,
    load_file,
    parse_table,
    parse_tables,
    table_from_dict,
)

from wayline.tables.table_resolver import (
    TableResolution,
    resolve,
)

from wayline.tables.table_manager import (
    TableManager,
)

__all__ = [
    # Table types
    "Entry",
    "Table",
    "table_key",
    # Loading
    "FormatError",
    "dump_table",
    "dump_tables",
    "load",
    "load_file",
    "parse_table",
    "parse_tables",
    "table_from_dict",
    # Resolution
    "TableResolution",
    "resolve",
    # Table manager
    "TableManager",
]

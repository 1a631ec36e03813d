"""
Table type definitions for Wayline.

A table is a named, ordered list of entries plus the dice expression
rolled against it. Each entry claims a set of roll values.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class Entry:
    """
    A single outcome in a table.

    `numbers` lists every roll value that selects this entry. Values may
    repeat or leave gaps, and may overlap with other entries; in that case
    the entry listed first in the table wins.
    """
    name: str
    numbers: list[int] = field(default_factory=list)

    def matches_roll(self, roll: int) -> bool:
        """Check if a roll value is claimed by this entry."""
        return roll in self.numbers

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "numbers": list(self.numbers)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Entry":
        return cls(name=data["name"], numbers=list(data["numbers"]))


@dataclass
class Table:
    """
    A random table.

    The dice expression in `roll` is stored as written; it is only checked
    when the table is rolled on.
    """
    name: str
    roll: str                                  # Default dice, e.g. "2d6"
    rows: list[Entry] = field(default_factory=list)

    @property
    def key(self) -> str:
        """Lookup key: the table name, lower-cased."""
        return table_key(self.name)

    def find_entry(self, roll: int) -> Optional[Entry]:
        """
        Return the first row claiming `roll`, or None.

        Rows are scanned in order so earlier rows take precedence over
        later rows that claim the same value.
        """
        for entry in self.rows:
            if entry.matches_roll(roll):
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the dictionary shape used in table files."""
        return {
            "name": self.name,
            "roll": self.roll,
            "rows": [entry.to_dict() for entry in self.rows],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Table":
        """Build from an already-validated dictionary."""
        return cls(
            name=data["name"],
            roll=data["roll"],
            rows=[Entry.from_dict(row) for row in data["rows"]],
        )


def table_key(name: str) -> str:
    """Normalize a table name for lookup."""
    return name.lower()

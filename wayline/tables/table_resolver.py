"""
Roll-to-entry resolution for Wayline tables.

Resolving never fails because of bad dice: an expression that cannot be
evaluated counts as a roll of 0, and the table is still searched for an
entry claiming 0. Callers that need to surface dice errors should use the
dice roller directly.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Union
import logging

from wayline.data_models import DiceError, DiceRoller
from wayline.observability.run_log import get_run_log
from wayline.tables.table_types import Entry, Table

logger = logging.getLogger(__name__)


@dataclass
class TableResolution:
    """
    Outcome of rolling on a table.

    Unpacks as ``roll, entry = resolve(table)``.
    """
    table_name: str
    dice: str
    roll: int
    entry: Optional[Entry] = None
    dice_error: Optional[DiceError] = None

    @property
    def matched(self) -> bool:
        return self.entry is not None

    def __iter__(self) -> Iterator[Union[int, Optional[Entry]]]:
        yield self.roll
        yield self.entry


def resolve(table: Table, dice_expression: Optional[str] = None) -> TableResolution:
    """
    Roll dice and find the table entry claiming the result.

    Args:
        table: Table to roll on
        dice_expression: Dice to roll; defaults to the table's own `roll`

    Returns:
        TableResolution with the roll value and the first matching entry,
        if any. A dice error is recorded on the result with a roll of 0.
    """
    dice = table.roll if dice_expression is None else dice_expression
    dice_error: Optional[DiceError] = None

    try:
        roll = DiceRoller.evaluate(dice, f"roll on {table.name}")
    except DiceError as e:
        logger.warning(f"Table '{table.name}' rolled with bad dice {dice!r}: {e.message}; using 0")
        roll = 0
        dice_error = e

    entry = table.find_entry(roll)

    get_run_log().log_table_lookup(
        table_key=table.key,
        table_name=table.name,
        dice=dice,
        roll_total=roll,
        result_text=entry.name if entry else None,
        dice_error=str(dice_error) if dice_error else None,
    )

    return TableResolution(
        table_name=table.name,
        dice=dice,
        roll=roll,
        entry=entry,
        dice_error=dice_error,
    )

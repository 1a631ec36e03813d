"""
Shared data structures for Wayline.

Holds the dice evaluator used by every roll in the system and the
in-game clock owned by the session controller.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import logging
import random
import re

from wayline.observability.run_log import get_run_log

logger = logging.getLogger(__name__)

# Largest <count> a single expression may roll
MAX_DICE = 1000


# =============================================================================
# ERRORS
# =============================================================================


class WaylineError(ValueError):
    """Base class for errors raised by the Wayline core."""
    pass


class DiceErrorKind(str, Enum):
    """Why a dice expression could not be evaluated."""
    MALFORMED = "malformed"           # Not of the form <count>d<sides>
    INVALID_SIDES = "invalid_sides"   # Zero-sided die
    TOO_MANY_DICE = "too_many_dice"   # More than MAX_DICE dice


class DiceError(WaylineError):
    """Raised when a dice expression cannot be evaluated."""

    kind: DiceErrorKind = DiceErrorKind.MALFORMED

    def __init__(self, expression: str, message: str):
        self.expression = expression
        self.message = message
        super().__init__(f"{message}: {expression!r}")


class MalformedDiceError(DiceError):
    """The expression does not match <count>d<sides>."""

    kind = DiceErrorKind.MALFORMED

    def __init__(self, expression: str):
        super().__init__(expression, "expected dice notation like '2d6'")


class InvalidSidesError(DiceError):
    """The expression names a die with zero sides."""

    kind = DiceErrorKind.INVALID_SIDES

    def __init__(self, expression: str):
        super().__init__(expression, "a die must have at least one side")


class TooManyDiceError(DiceError):
    """The expression asks for more than MAX_DICE dice."""

    kind = DiceErrorKind.TOO_MANY_DICE

    def __init__(self, expression: str):
        super().__init__(expression, f"at most {MAX_DICE} dice can be rolled at once")


# =============================================================================
# DICE AND RANDOMIZATION
# =============================================================================


# ASCII digits only; \d would also accept other Unicode digits
_DICE_PATTERN = re.compile(r"([0-9]+)d([0-9]+)")
_CLOCK_PATTERN = re.compile(r"([0-9]+):([0-5][0-9])")


def parse_notation(expression: str) -> tuple[int, int]:
    """
    Split a dice expression into (count, sides).

    Raises:
        MalformedDiceError: if the expression is not exactly <count>d<sides>
        InvalidSidesError: if sides is zero
        TooManyDiceError: if count is greater than MAX_DICE
    """
    match = _DICE_PATTERN.fullmatch(expression)
    if match is None:
        raise MalformedDiceError(expression)

    count_text, sides_text = match.groups()
    try:
        sides = int(sides_text)
    except ValueError as e:
        # More digits than int() will convert
        raise MalformedDiceError(expression) from e
    if sides == 0:
        raise InvalidSidesError(expression)

    count_text = count_text.lstrip("0") or "0"
    if len(count_text) > len(str(MAX_DICE)) or int(count_text) > MAX_DICE:
        raise TooManyDiceError(expression)
    return int(count_text), sides


class DiceRoller:
    """
    Centralized randomization interface.
    All dice rolls must go through this class for reproducibility and logging.
    """

    _instance = None
    _seed: Optional[int] = None
    _roll_log: list = []

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def set_seed(cls, seed: int) -> None:
        """Set random seed for reproducibility."""
        cls._seed = seed
        random.seed(seed)

    @classmethod
    def get_seed(cls) -> Optional[int]:
        return cls._seed

    @classmethod
    def roll(cls, dice: str, reason: str = "") -> "DiceResult":
        """
        Roll dice using <count>d<sides> notation (e.g., '2d6', '1d20').

        Each die is an independent draw from [1, sides] inclusive. A count
        of zero yields a total of 0 without drawing.

        Args:
            dice: Dice notation string
            reason: Why this roll is being made (for logging)

        Returns:
            DiceResult with individual rolls and total

        Raises:
            DiceError: if the notation is malformed or names a zero-sided die
        """
        num_dice, die_size = parse_notation(dice)

        rolls = [random.randint(1, die_size) for _ in range(num_dice)]
        result = DiceResult(
            notation=dice,
            rolls=rolls,
            total=sum(rolls),
            reason=reason,
        )

        cls._roll_log.append(result)
        logger.debug(f"Rolled {result} ({reason or 'no reason'})")

        get_run_log().log_roll(
            notation=result.notation,
            rolls=result.rolls,
            total=result.total,
            reason=reason,
        )
        return result

    @classmethod
    def evaluate(cls, dice: str, reason: str = "") -> int:
        """Roll dice and return only the total."""
        return cls.roll(dice, reason).total

    @classmethod
    def get_roll_log(cls) -> list:
        """Get the complete roll log for the session."""
        return cls._roll_log.copy()

    @classmethod
    def clear_roll_log(cls) -> None:
        """Clear the roll log."""
        cls._roll_log = []


def evaluate(expression: str) -> int:
    """
    Evaluate a dice expression and return the summed result.

    Raises:
        DiceError: on malformed notation or a zero-sided die
    """
    return DiceRoller.evaluate(expression, "dice expression")


@dataclass
class DiceResult:
    """Result of a dice roll with full information."""
    notation: str
    rolls: list[int]
    total: int
    reason: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.notation}: {self.rolls} = {self.total}"


# =============================================================================
# TIME TRACKING
# =============================================================================


@dataclass
class GameClock:
    """
    In-game clock counted in elapsed minutes.

    Hours are not wrapped at midnight: 1500 minutes reads as "25:00".
    """
    elapsed_minutes: int = 0

    def __post_init__(self):
        if self.elapsed_minutes < 0:
            raise ValueError(f"Clock cannot start before 00:00: {self.elapsed_minutes}")

    @property
    def hours(self) -> int:
        return self.elapsed_minutes // 60

    @property
    def minutes(self) -> int:
        return self.elapsed_minutes % 60

    def advance(self, minutes: int) -> "GameClock":
        """
        Move the clock forward.

        Args:
            minutes: Non-negative number of minutes to add

        Returns:
            This clock, for chaining
        """
        if minutes < 0:
            raise ValueError(f"Cannot move the clock backwards by {minutes} minutes")
        self.elapsed_minutes += minutes
        return self

    @classmethod
    def from_string(cls, value: str) -> "GameClock":
        """Build a clock from an "HH:MM" string."""
        match = _CLOCK_PATTERN.fullmatch(value.strip())
        if match is None:
            raise ValueError(f"Expected a time like 08:30, got {value!r}")
        return cls(elapsed_minutes=int(match.group(1)) * 60 + int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}"

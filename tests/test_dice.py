"""
Unit tests for dice rolling system.

Tests the DiceRoller class, DiceResult and evaluate() from
wayline/data_models.py.
"""

import pytest

from wayline.data_models import (
    DiceError,
    DiceErrorKind,
    DiceResult,
    DiceRoller,
    InvalidSidesError,
    MAX_DICE,
    MalformedDiceError,
    TooManyDiceError,
    WaylineError,
    evaluate,
    parse_notation,
)


class TestDiceRoller:
    """Tests for DiceRoller class."""

    def test_singleton_pattern(self):
        """Test that DiceRoller is a singleton."""
        roller1 = DiceRoller()
        roller2 = DiceRoller()
        assert roller1 is roller2

    def test_roll_basic_d6(self, seeded_dice):
        """Test rolling a basic d6."""
        result = seeded_dice.roll("1d6", "test roll")
        assert isinstance(result, DiceResult)
        assert 1 <= result.total <= 6
        assert len(result.rolls) == 1

    def test_roll_multiple_dice(self, seeded_dice):
        """Test rolling multiple dice."""
        result = seeded_dice.roll("3d6", "attribute roll")
        assert len(result.rolls) == 3
        assert all(1 <= r <= 6 for r in result.rolls)
        assert result.total == sum(result.rolls)

    def test_zero_dice_total_zero(self, seeded_dice):
        """Zero dice draw nothing and total 0."""
        result = seeded_dice.roll("0d6")
        assert result.rolls == []
        assert result.total == 0

    def test_single_sided_die_is_constant(self, seeded_dice):
        """A d1 always shows 1."""
        assert seeded_dice.roll("7d1").total == 7

    def test_seeded_reproducibility(self):
        """Test that seeded rolls are reproducible."""
        DiceRoller.set_seed(12345)
        first_results = [DiceRoller.roll("1d6", "test").total for _ in range(5)]

        DiceRoller.set_seed(12345)
        second_results = [DiceRoller.roll("1d6", "test").total for _ in range(5)]

        assert first_results == second_results
        assert DiceRoller.get_seed() == 12345

    def test_roll_log(self, clean_dice):
        """Test that rolls are logged."""
        clean_dice.roll("1d20", "first")
        clean_dice.roll("2d6", "second")

        log = clean_dice.get_roll_log()
        assert [r.reason for r in log] == ["first", "second"]

    def test_clear_roll_log(self, clean_dice):
        clean_dice.roll("1d6")
        clean_dice.clear_roll_log()
        assert clean_dice.get_roll_log() == []

    def test_failed_roll_is_not_logged(self, clean_dice):
        with pytest.raises(DiceError):
            clean_dice.roll("2x6")
        assert clean_dice.get_roll_log() == []

    def test_roll_reported_to_run_log(self, seeded_dice, run_log):
        result = seeded_dice.roll("2d6", "reaction")
        rolls = run_log.get_rolls()
        assert len(rolls) == 1
        assert rolls[0].notation == "2d6"
        assert rolls[0].total == result.total
        assert rolls[0].reason == "reaction"


class TestDiceResult:
    """Tests for DiceResult formatting."""

    def test_str(self):
        result = DiceResult(notation="2d6", rolls=[3, 4], total=7)
        assert str(result) == "2d6: [3, 4] = 7"


class TestEvaluate:
    """Tests for the evaluate() entry point."""

    @pytest.mark.parametrize("count,sides", [(1, 6), (2, 6), (3, 4), (10, 10), (1, 1), (4, 20)])
    def test_result_in_range(self, seeded_dice, count, sides):
        for _ in range(50):
            value = evaluate(f"{count}d{sides}")
            assert count <= value <= count * sides

    @pytest.mark.parametrize("sides", [1, 6, 100])
    def test_zero_count_is_zero(self, seeded_dice, sides):
        assert evaluate(f"0d{sides}") == 0

    def test_covers_whole_range(self, seeded_dice):
        """Every face of a d6 shows up in enough rolls."""
        seen = {evaluate("1d6") for _ in range(500)}
        assert seen == {1, 2, 3, 4, 5, 6}

    @pytest.mark.parametrize("expression", [
        "",
        "d",
        "2",
        "26",
        "d6",
        "2d",
        "2d6d6",
        "1dd6",
        "ad6",
        "2db",
        "two d six",
        " 2d6",
        "2d6 ",
        "2 d6",
        "2D6",
        "+2d6",
        "2d+6",
        "-1d6",
        "2d6+1",
        "1.5d6",
        "1_0d6",
        "٢d6",   # Arabic-Indic digit two
    ])
    def test_malformed(self, expression):
        with pytest.raises(MalformedDiceError) as exc_info:
            evaluate(expression)
        assert exc_info.value.kind == DiceErrorKind.MALFORMED
        assert exc_info.value.expression == expression

    @pytest.mark.parametrize("expression", ["1d0", "0d0", "12d00"])
    def test_zero_sides(self, expression):
        with pytest.raises(InvalidSidesError) as exc_info:
            evaluate(expression)
        assert exc_info.value.kind == DiceErrorKind.INVALID_SIDES

    @pytest.mark.parametrize("expression", [
        f"{MAX_DICE + 1}d6",
        "5000000d6",
        "1000000000d1",
        "9" * 5000 + "d6",
    ])
    def test_too_many_dice(self, expression, clean_dice):
        with pytest.raises(TooManyDiceError) as exc_info:
            evaluate(expression)
        assert exc_info.value.kind == DiceErrorKind.TOO_MANY_DICE
        assert DiceRoller.get_roll_log() == []

    def test_max_dice_is_allowed(self, seeded_dice):
        assert evaluate(f"{MAX_DICE}d1") == MAX_DICE

    def test_zero_sides_reported_before_count(self):
        with pytest.raises(InvalidSidesError):
            evaluate("5000000d0")

    def test_oversized_sides_is_malformed(self):
        with pytest.raises(MalformedDiceError):
            evaluate("1d" + "9" * 5000)

    def test_errors_share_base_classes(self):
        assert issubclass(MalformedDiceError, DiceError)
        assert issubclass(InvalidSidesError, DiceError)
        assert issubclass(TooManyDiceError, DiceError)
        assert issubclass(DiceError, WaylineError)
        assert issubclass(WaylineError, ValueError)

    def test_error_message_names_expression(self):
        with pytest.raises(DiceError) as exc_info:
            evaluate("xd6")
        assert "'xd6'" in str(exc_info.value)


class TestParseNotation:
    def test_splits_count_and_sides(self):
        assert parse_notation("3d8") == (3, 8)

    def test_leading_zeros_allowed(self):
        assert parse_notation("02d06") == (2, 6)

    def test_leading_zeros_do_not_count_toward_limit(self):
        assert parse_notation("0000001d6") == (1, 6)
        assert parse_notation("00d6") == (0, 6)

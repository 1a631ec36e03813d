"""
Pytest fixtures for the Wayline test suite.

Provides reusable fixtures for dice, tables, run log and session state.
"""

import pytest

from wayline.data_models import DiceRoller, GameClock
from wayline.game_state import SessionController
from wayline.observability.run_log import reset_run_log
from wayline.tables import Entry, Table, TableManager


# =============================================================================
# DICE FIXTURES
# =============================================================================


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    DiceRoller.clear_roll_log()
    DiceRoller.set_seed(42)
    yield DiceRoller()
    DiceRoller.clear_roll_log()


@pytest.fixture
def clean_dice():
    """Provide a clean DiceRoller without seed."""
    DiceRoller.clear_roll_log()
    yield DiceRoller()
    DiceRoller.clear_roll_log()


@pytest.fixture(autouse=True)
def run_log():
    """Start every test with an empty run log."""
    log = reset_run_log()
    yield log
    reset_run_log()


# =============================================================================
# TABLE FIXTURES
# =============================================================================


@pytest.fixture
def encounter_table():
    """Table with a gap at 6-11 and a lone entry at 12."""
    return Table(
        name="Wilderness Encounters",
        roll="2d6",
        rows=[
            Entry(name="A", numbers=[2, 3]),
            Entry(name="B", numbers=[4, 5]),
            Entry(name="C", numbers=[12]),
        ],
    )


@pytest.fixture
def overlap_table():
    """Two entries claiming the same value."""
    return Table(
        name="Overlap",
        roll="1d6",
        rows=[
            Entry(name="A", numbers=[5]),
            Entry(name="B", numbers=[5]),
        ],
    )


@pytest.fixture
def caves_table():
    return Table(
        name="Wild Caves",
        roll="1d6",
        rows=[
            Entry(name="Bats", numbers=[1, 2, 3]),
            Entry(name="Cave Bear", numbers=[4, 5]),
            Entry(name="Lost Explorer", numbers=[6]),
        ],
    )


SINGLE_TABLE_TOML = """
name = "Wilderness Encounters"
roll = "2d6"

[[rows]]
name = "Goblin Ambush"
numbers = [2, 3]

[[rows]]
name = "Bandit Raid"
numbers = [4, 5]

[[rows]]
name = "Dragon Sighting"
numbers = [12]
"""


MULTI_TABLE_TOML = """
[[table]]
name = "Wild Caves"
roll = "1d6"

[[table.rows]]
name = "Bats"
numbers = [1, 2, 3]

[[table.rows]]
name = "Cave Bear"
numbers = [4, 5, 6]

[[table]]
name = "Road"
roll = "1d1"

[[table.rows]]
name = "Pilgrims"
numbers = [1]
"""


@pytest.fixture
def single_table_toml():
    return SINGLE_TABLE_TOML


@pytest.fixture
def multi_table_toml():
    return MULTI_TABLE_TOML


# =============================================================================
# SESSION FIXTURES
# =============================================================================


@pytest.fixture
def controller():
    """A session with no tables loaded."""
    return SessionController()


@pytest.fixture
def loaded_controller(seeded_dice, caves_table):
    """A session with two tables loaded and none active."""
    road = Table(name="Road", roll="1d1", rows=[Entry(name="Pilgrims", numbers=[1])])
    return SessionController(
        tables=TableManager([caves_table, road]),
        clock=GameClock(),
    )

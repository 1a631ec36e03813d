"""
Tests for the session run log.

Covers event capture from dice and table rolls, filtering, summaries,
formatting and saving to JSON.
"""

import json

from wayline.data_models import DiceRoller
from wayline.observability.run_log import (
    CommandEvent,
    EventType,
    LogEvent,
    RollEvent,
    RunLog,
    TableLookupEvent,
    TimeStepEvent,
    get_run_log,
    reset_run_log,
)
from wayline.tables import resolve


class TestRunLogSingleton:
    def test_get_run_log_is_shared(self):
        assert get_run_log() is get_run_log()
        assert RunLog() is get_run_log()

    def test_reset_clears_events(self, run_log):
        run_log.log_custom("note", {"a": 1})
        reset_run_log()
        assert run_log.get_event_count() == 0


class TestEventCapture:
    def test_sequence_numbers_increase(self, run_log, seeded_dice):
        DiceRoller.roll("1d6")
        DiceRoller.roll("1d6")
        assert [e.sequence_number for e in run_log.get_events()] == [1, 2]

    def test_one_roll_per_evaluation(self, run_log, seeded_dice, encounter_table):
        resolve(encounter_table)
        resolve(encounter_table)
        assert len(run_log.get_rolls()) == 2
        assert len(run_log.get_table_lookups()) == 2

    def test_filter_by_type(self, run_log, encounter_table):
        resolve(encounter_table, "3d1")
        run_log.log_time_step("00:00", "00:10", minutes_advanced=10)

        assert [type(e) for e in run_log.get_events(EventType.TABLE_LOOKUP)] == [TableLookupEvent]
        assert len(run_log.get_events(since_sequence=2)) == 1

    def test_summary(self, run_log, encounter_table):
        resolve(encounter_table, "3d1")
        run_log.log_command("roll", "roll_table")

        summary = run_log.get_summary()
        assert summary["total_events"] == 3
        assert summary["rolls"] == 1
        assert summary["table_lookups"] == 1
        assert summary["commands"] == 1
        assert summary["time_steps"] == 0

    def test_game_time_provider(self, run_log):
        run_log.set_game_time_provider(lambda: "12:34")
        event = run_log.log_command("time", "time")
        assert event.game_time == "12:34"

    def test_failing_game_time_provider(self, run_log):
        def broken():
            raise RuntimeError("no clock")

        run_log.set_game_time_provider(broken)
        assert run_log.log_command("time", "time").game_time is None

    def test_custom_event(self, run_log):
        event = run_log.log_custom("tables_loaded", {"source": "caves.toml"})
        assert event.event_type == EventType.CUSTOM
        assert type(event) is LogEvent
        assert event.context == {"event_name": "tables_loaded", "source": "caves.toml"}
        assert str(event).startswith("[1] CUSTOM ")


class TestEventFormatting:
    def test_roll_str(self):
        event = RollEvent(notation="2d6", rolls=[1, 5], total=6, reason="test", sequence_number=3)
        assert str(event) == "[3] ROLL 2d6: [1, 5] = 6 (test)"

    def test_lookup_str_no_match(self):
        event = TableLookupEvent(table_name="Caves", dice="1d6", roll_total=7, sequence_number=1)
        assert str(event) == "[1] TABLE Caves (1d6): 7 -> no match"

    def test_time_str(self):
        event = TimeStepEvent(old_time="00:00", new_time="00:15", minutes_advanced=15, sequence_number=2)
        assert str(event) == "[2] TIME 00:00 -> 00:15 (+15m)"

    def test_format_log(self, run_log, encounter_table):
        resolve(encounter_table, "12d1")
        text = run_log.format_log(event_types=[EventType.TABLE_LOOKUP])

        assert text.startswith("=== Run Log ===")
        assert "TABLE Wilderness Encounters (12d1): 12 -> C" in text
        assert "ROLL" not in text

    def test_format_log_max_events(self, run_log):
        for minutes in range(5):
            run_log.log_command(f"add {minutes}", "add")
        text = run_log.format_log(max_events=2)
        assert "'add 3'" in text
        assert "'add 4'" in text
        assert "'add 2'" not in text


class TestSave:
    def test_save_writes_json(self, run_log, tmp_path, encounter_table):
        run_log.set_seed(7)
        resolve(encounter_table, "3d1")
        run_log.log_time_step("00:00", "00:05", minutes_advanced=5, reason="add command")
        run_log.log_command("add 5", "add")
        run_log.log_custom("marker", {"note": "x"})

        path = tmp_path / "run_log.json"
        run_log.save(str(path))
        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["seed"] == 7
        assert data["sequence"] == 5
        assert [e["event_type"] for e in data["events"]] == [
            "roll",
            "table_lookup",
            "time_step",
            "command",
            "custom",
        ]
        assert data["events"][1]["result_text"] == "A"
        assert data["events"][2]["reason"] == "add command"
        assert data["events"][4]["context"] == {"event_name": "marker", "note": "x"}

    def test_event_to_dict(self):
        event = CommandEvent(raw_input="roll", command_type="roll_table")
        data = event.to_dict()
        assert data["event_type"] == "command"
        assert data["raw_input"] == "roll"
        assert data["command_type"] == "roll_table"

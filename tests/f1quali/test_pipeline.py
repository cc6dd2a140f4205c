"""End-to-end tests for ``build_qualifying_result``."""

from __future__ import annotations

from datetime import timedelta

import pytest

from f1quali.models import Lap, RaceControl
from f1quali.qualifying import QualifyingRules, build_qualifying_result
from f1quali.qualifying.records import SessionMetadata
from tests.conftest import (
    NOW,
    SAMPLE_SESSION,
    T0,
    chequered,
    full_field_session,
    green,
    make_driver,
    make_lap,
    make_stint,
    red_flag,
    three_stage_events,
)

SPRINT_SESSION = {**SAMPLE_SESSION, "session_name": "Sprint Qualifying"}


@pytest.fixture
def full_field() -> tuple[list[dict], list[dict]]:
    return full_field_session(20)


class TestKnockoutSession:
    def test_three_stages_with_eliminations(self, full_field) -> None:
        drivers, laps = full_field
        result = build_qualifying_result(three_stage_events(), laps, [], drivers, SAMPLE_SESSION, now=NOW)

        assert [s.name for s in result.stages] == ["Q1", "Q2", "Q3"]
        assert [len(s.drivers) for s in result.stages] == [20, 15, 10]
        q1, q2, q3 = result.stages
        assert {d.driver_number for d in q1.drivers if d.eliminated} == set(range(16, 21))
        assert {d.driver_number for d in q2.drivers if d.eliminated} == set(range(11, 16))
        assert not any(d.eliminated for d in q3.drivers)

    def test_final_grid_order_and_stage_times(self, full_field) -> None:
        drivers, laps = full_field
        result = build_qualifying_result(three_stage_events(), laps, [], drivers, SAMPLE_SESSION, now=NOW)

        grid = result.final_grid
        assert [e.driver_number for e in grid] == list(range(1, 21))
        assert grid[0].q1_time == pytest.approx(90.1)
        assert grid[0].q2_time == pytest.approx(89.6)
        assert grid[0].q3_time == pytest.approx(89.1)
        assert grid[12].q3_time is None
        assert grid[12].q2_time is not None
        assert grid[19].q2_time is None

    def test_eliminated_driver_laps_in_later_stage_ignored(self) -> None:
        drivers = [make_driver(n) for n in range(1, 7)]
        laps = [make_lap(n, 2, 5, 90.0 + n) for n in range(1, 7)]
        # driver 6 is knocked out in Q1 but still sets a lap during Q2
        laps.append(make_lap(6, 6, 30, 80.0))
        laps.append(make_lap(1, 6, 30, 89.0))
        result = build_qualifying_result(
            [green(0), chequered(18), green(25), chequered(40)], laps, [], drivers, SAMPLE_SESSION, now=NOW,
        )
        q2 = result.stages[1]
        assert 6 not in {d.driver_number for d in q2.drivers}
        assert q2.drivers[0].driver_number == 1

    def test_driver_without_stage_lap_ranks_last_in_stage(self, full_field) -> None:
        drivers, laps = full_field
        q1_end = (T0 + timedelta(minutes=18)).isoformat()
        laps = [lap for lap in laps if not (lap["driver_number"] == 1 and lap["date_start"] < q1_end)]
        result = build_qualifying_result(three_stage_events(), laps, [], drivers, SAMPLE_SESSION, now=NOW)
        q1 = result.stages[0]
        assert q1.drivers[-1].driver_number == 1
        assert q1.drivers[-1].best_lap_time is None
        assert q1.drivers[-1].eliminated

    def test_compound_and_sectors_from_best_lap(self) -> None:
        drivers = [make_driver(1), make_driver(2)]
        laps = [
            make_lap(1, 3, 5, 91.0),
            make_lap(1, 15, 30, 90.0),
            make_lap(2, 3, 5, 92.0),
            make_lap(2, 15, 30, 91.0),
        ]
        stints = [make_stint(1, 1, 1, 10, "MEDIUM"), make_stint(1, 2, 11, 20, "soft", tyre_age_at_start=1)]
        result = build_qualifying_result(
            [green(0), chequered(18), green(25), chequered(40)], laps, stints, drivers, SAMPLE_SESSION,
            rules=QualifyingRules(eliminations_per_stage=0), now=NOW,
        )
        q1_best = result.stages[0].drivers[0]
        assert q1_best.best_lap_time == 91.0
        assert q1_best.compound == "MEDIUM"
        assert q1_best.sector_1_time == pytest.approx(27.3)
        q2_best = result.stages[1].drivers[0]
        assert q2_best.compound == "SOFT"
        assert q2_best.tyre_age == 5
        assert result.stages[1].drivers[1].compound is None

    def test_red_flag_keeps_single_stage(self, full_field) -> None:
        drivers, laps = full_field
        events = [green(0), red_flag(3), green(4), chequered(18)] + three_stage_events()[2:]
        result = build_qualifying_result(events, laps, [], drivers, SAMPLE_SESSION, now=NOW)
        assert [s.name for s in result.stages] == ["Q1", "Q2", "Q3"]

    def test_sprint_names(self, full_field) -> None:
        drivers, laps = full_field
        result = build_qualifying_result(three_stage_events(), laps, [], drivers, SPRINT_SESSION, now=NOW)
        assert [s.name for s in result.stages] == ["SQ1", "SQ2", "SQ3"]

    def test_accepts_client_models(self, full_field) -> None:
        drivers, laps = full_field
        events = [RaceControl.model_validate(e) for e in three_stage_events()]
        lap_models = [Lap.model_validate(lap) for lap in laps]
        result = build_qualifying_result(events, lap_models, [], drivers, SAMPLE_SESSION, now=NOW)
        assert len(result.stages) == 3

    def test_idempotent(self, full_field) -> None:
        drivers, laps = full_field
        first = build_qualifying_result(three_stage_events(), laps, [], drivers, SAMPLE_SESSION, now=NOW)
        second = build_qualifying_result(three_stage_events(), laps, [], drivers, SAMPLE_SESSION, now=NOW)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_small_field_eliminates_everyone_possible(self) -> None:
        drivers = [make_driver(n) for n in range(1, 4)]
        laps = [make_lap(n, 2, 5, 90.0 + n) for n in range(1, 4)]
        result = build_qualifying_result(
            [green(0), chequered(18), green(25), chequered(40)], laps, [], drivers, SAMPLE_SESSION, now=NOW,
        )
        assert all(d.eliminated for d in result.stages[0].drivers)
        assert result.stages[1].drivers == ()
        assert [e.driver_number for e in result.final_grid] == [1, 2, 3]

    def test_custom_elimination_count(self, full_field) -> None:
        drivers, laps = full_field
        rules = QualifyingRules(eliminations_per_stage=2)
        result = build_qualifying_result(
            three_stage_events(), laps, [], drivers, SAMPLE_SESSION, rules=rules, now=NOW,
        )
        assert [len(s.drivers) for s in result.stages] == [20, 18, 16]


class TestFallback:
    def test_single_event_uses_session_window(self) -> None:
        drivers = [make_driver(1), make_driver(2)]
        laps = [make_lap(1, 2, 65, 92.0), make_lap(2, 2, 66, 91.0), make_lap(1, 4, 75, 90.5)]
        result = build_qualifying_result([green(60)], laps, [], drivers, SAMPLE_SESSION, now=NOW)

        assert len(result.stages) == 1
        stage = result.stages[0]
        assert stage.name == "Q1"
        assert stage.start_time == T0 + timedelta(hours=1)
        assert stage.end_time == T0 + timedelta(hours=2)
        assert [d.driver_number for d in stage.drivers] == [1, 2]
        assert stage.drivers[0].best_lap_time == 90.5
        assert not any(d.eliminated for d in stage.drivers)
        assert [e.q1_time for e in result.final_grid] == [90.5, 91.0]

    def test_sprint_fallback_named_sq1(self) -> None:
        result = build_qualifying_result(
            [], [make_lap(1, 2, 65, 92.0)], [], [make_driver(1)], SPRINT_SESSION, now=NOW,
        )
        assert [s.name for s in result.stages] == ["SQ1"]

    def test_single_complete_stage_falls_back(self) -> None:
        drivers = [make_driver(1)]
        laps = [make_lap(1, 2, 5, 91.0), make_lap(1, 9, 30, 89.0)]
        result = build_qualifying_result(
            [green(0), chequered(18)], laps, [], drivers, SAMPLE_SESSION, now=NOW,
        )
        assert len(result.stages) == 1
        assert result.stages[0].drivers[0].best_lap_time == 89.0

    def test_session_without_dates_uses_lap_span(self) -> None:
        session = SessionMetadata(session_name="Qualifying")
        laps = [make_lap(1, 2, 5, 91.0), make_lap(1, 9, 30, 89.0)]
        result = build_qualifying_result([], laps, [], [make_driver(1)], session, now=NOW)
        stage = result.stages[0]
        assert stage.start_time == T0 + timedelta(minutes=5)
        assert stage.end_time == T0 + timedelta(minutes=30)

    def test_naive_session_start_compared_with_lap_span(self) -> None:
        session = SessionMetadata(session_name="Qualifying", date_start=T0.replace(tzinfo=None))
        result = build_qualifying_result([], [make_lap(1, 2, 5, 91.0)], [], [make_driver(1)], session, now=NOW)
        stage = result.stages[0]
        assert stage.start_time == T0
        assert stage.end_time == T0 + timedelta(minutes=5)
        assert stage.drivers[0].best_lap_time == 91.0


class TestUnusableValues:
    def test_nan_lap_never_wins(self) -> None:
        laps = [make_lap(1, 2, 5, None, lap_duration="NaN"), make_lap(1, 3, 7, 90.0), make_lap(2, 2, 6, 91.0)]
        result = build_qualifying_result([], laps, [], [make_driver(1), make_driver(2)], SAMPLE_SESSION, now=NOW)
        drivers = result.stages[0].drivers
        assert [(d.driver_number, d.position, d.best_lap_time) for d in drivers] == [(1, 1, 90.0), (2, 2, 91.0)]

    def test_nan_only_driver_ranked_last(self) -> None:
        laps = [make_lap(1, 2, 5, None, lap_duration=float("nan")), make_lap(2, 2, 6, 91.0)]
        result = build_qualifying_result([], laps, [], [make_driver(1), make_driver(2)], SAMPLE_SESSION, now=NOW)
        drivers = result.stages[0].drivers
        assert [d.driver_number for d in drivers] == [2, 1]
        assert drivers[1].best_lap_time is None
        assert drivers[1].lap_count == 1


class TestEmptyInputs:
    def test_no_session(self, full_field) -> None:
        drivers, laps = full_field
        result = build_qualifying_result(three_stage_events(), laps, [], drivers, None, now=NOW)
        assert result.is_empty

    def test_no_drivers(self, full_field) -> None:
        _, laps = full_field
        assert build_qualifying_result(three_stage_events(), laps, [], [], SAMPLE_SESSION, now=NOW).is_empty

    def test_no_laps(self, full_field) -> None:
        drivers, _ = full_field
        assert build_qualifying_result(three_stage_events(), [], [], drivers, SAMPLE_SESSION, now=NOW).is_empty


class TestWireShape:
    def test_camel_case_keys(self, full_field) -> None:
        drivers, laps = full_field
        payload = build_qualifying_result(
            three_stage_events(), laps, [], drivers, SAMPLE_SESSION, now=NOW,
        ).to_dict()

        assert set(payload) == {"stages", "finalGrid"}
        stage = payload["stages"][0]
        assert set(stage) == {"name", "startTime", "endTime", "drivers"}
        driver = stage["drivers"][0]
        assert driver["driverNumber"] == 1
        assert "bestLapTime" in driver
        assert "sector1Time" in driver
        entry = payload["finalGrid"][0]
        assert {"q1Time", "q2Time", "q3Time", "q1Compound", "q2Compound", "q3Compound"} <= set(entry)

"""Shared test fixtures and sample API responses."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

BASE_URL = "https://api.openf1.org/v1"

T0 = datetime(2024, 3, 1, 15, 0, tzinfo=UTC)
NOW = datetime(2024, 3, 1, 18, 0, tzinfo=UTC)


SAMPLE_DRIVER = {
    "broadcast_name": "M VERSTAPPEN",
    "country_code": "NED",
    "driver_number": 1,
    "first_name": "Max",
    "full_name": "Max VERSTAPPEN",
    "headshot_url": "https://example.com/ver.png",
    "last_name": "Verstappen",
    "meeting_key": 1229,
    "name_acronym": "VER",
    "session_key": 9468,
    "team_colour": "3671C6",
    "team_name": "Red Bull Racing",
}

SAMPLE_SESSION = {
    "circuit_key": 63,
    "circuit_short_name": "Sakhir",
    "country_code": "BRN",
    "country_name": "Bahrain",
    "date_end": "2024-03-01T17:00:00+00:00",
    "date_start": "2024-03-01T16:00:00+00:00",
    "gmt_offset": "03:00:00",
    "location": "Sakhir",
    "meeting_key": 1229,
    "session_key": 9468,
    "session_name": "Qualifying",
    "session_type": "Qualifying",
    "year": 2024,
}

SAMPLE_MEETING = {
    "circuit_short_name": "Sakhir",
    "country_name": "Bahrain",
    "date_start": "2024-02-29T11:30:00+00:00",
    "location": "Sakhir",
    "meeting_key": 1229,
    "meeting_name": "Bahrain Grand Prix",
    "year": 2024,
}

SAMPLE_LAP = {
    "date_start": "2024-03-01T16:05:00+00:00",
    "driver_number": 1,
    "duration_sector_1": 28.5,
    "duration_sector_2": 35.2,
    "duration_sector_3": 30.1,
    "i1_speed": 305,
    "is_pit_out_lap": False,
    "lap_duration": 93.8,
    "lap_number": 5,
    "meeting_key": 1229,
    "session_key": 9468,
}

SAMPLE_STINT = {
    "compound": "SOFT",
    "driver_number": 1,
    "lap_end": 20,
    "lap_start": 1,
    "meeting_key": 1229,
    "session_key": 9468,
    "stint_number": 1,
    "tyre_age_at_start": 3,
}

SAMPLE_RACE_CONTROL = {
    "category": "Flag",
    "date": "2024-03-01T16:00:00+00:00",
    "driver_number": None,
    "flag": "GREEN",
    "lap_number": 1,
    "meeting_key": 1229,
    "message": "GREEN LIGHT - PIT EXIT OPEN",
    "scope": "Track",
    "sector": None,
    "session_key": 9468,
}


# ── Record builders ──────────────────────────────────────────────────────────


def at(minutes: float) -> str:
    """ISO timestamp *minutes* after T0."""
    return (T0 + timedelta(minutes=minutes)).isoformat()


def green(minutes: float) -> dict:
    return {"date": at(minutes), "flag": "GREEN", "message": "GREEN LIGHT - PIT EXIT OPEN"}


def chequered(minutes: float) -> dict:
    return {"date": at(minutes), "flag": "CHEQUERED", "message": "CHEQUERED FLAG"}


def red_flag(minutes: float) -> dict:
    return {"date": at(minutes), "flag": "RED", "message": "RED FLAG"}


def make_driver(number: int, acronym: str | None = None, team: str = "Team") -> dict:
    return {
        "driver_number": number,
        "full_name": f"Driver {number}",
        "name_acronym": acronym or f"D{number:02d}",
        "team_name": team,
        "team_colour": "FFFFFF",
        "headshot_url": None,
    }


def make_lap(
    driver_number: int,
    lap_number: int,
    minutes: float,
    duration: float | None,
    **extra: object,
) -> dict:
    return {
        "driver_number": driver_number,
        "lap_number": lap_number,
        "date_start": at(minutes),
        "lap_duration": duration,
        "duration_sector_1": None if duration is None else round(duration * 0.3, 3),
        "duration_sector_2": None if duration is None else round(duration * 0.4, 3),
        "duration_sector_3": None if duration is None else round(duration * 0.3, 3),
        "is_pit_out_lap": False,
        **extra,
    }


def make_stint(
    driver_number: int,
    stint_number: int,
    lap_start: int,
    lap_end: int,
    compound: str,
    tyre_age_at_start: int = 0,
) -> dict:
    return {
        "driver_number": driver_number,
        "stint_number": stint_number,
        "lap_start": lap_start,
        "lap_end": lap_end,
        "compound": compound,
        "tyre_age_at_start": tyre_age_at_start,
    }


def three_stage_events() -> list[dict]:
    """Q1 [0, 18], Q2 [25, 40], Q3 [48, 60] minutes after T0."""
    return [green(0), chequered(18), green(25), chequered(40), green(48), chequered(60)]


def full_field_session(field_size: int = 20) -> tuple[list[dict], list[dict]]:
    """Drivers 1..N with one timed lap per stage they can reach.

    Driver n laps in (90 + n / 10) seconds in every stage, so the order is
    always 1, 2, ..., N and knockouts remove the highest numbers first.
    """
    drivers = [make_driver(n) for n in range(1, field_size + 1)]
    laps = []
    for n in range(1, field_size + 1):
        time = round(90 + n / 10, 3)
        laps.append(make_lap(n, 2, 5, time))
        laps.append(make_lap(n, 5, 30, time - 0.5))
        laps.append(make_lap(n, 8, 52, time - 1.0))
    return drivers, laps


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def now() -> datetime:
    return NOW

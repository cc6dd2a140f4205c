"""Data contracts for the dashboard data layer.

Date fields are kept as the backend delivers them: ISO strings from the
OpenF1 repository, ``{"$date": ...}`` wrappers or strings from document
exports. The qualifying pipeline normalises both.
"""

from __future__ import annotations

from typing import Any, TypedDict


class MeetingData(TypedDict):
    meeting_name: str
    meeting_key: int
    year: int | None


class SessionData(TypedDict):
    session_name: str
    session_key: int
    session_type: str
    date_start: Any
    date_end: Any


class DriverInfo(TypedDict):
    driver_number: int
    name_acronym: str
    full_name: str
    team_name: str
    team_colour: str | None
    headshot_url: str | None


class LapData(TypedDict):
    driver_number: int
    lap_number: int
    date_start: Any
    lap_duration: float | None
    duration_sector_1: float | None
    duration_sector_2: float | None
    duration_sector_3: float | None
    is_pit_out_lap: bool


class StintData(TypedDict):
    driver_number: int
    stint_number: int
    compound: str
    lap_start: int
    lap_end: int
    tyre_age_at_start: int


class RaceControlData(TypedDict):
    date: Any
    flag: str | None
    category: str | None
    message: str | None

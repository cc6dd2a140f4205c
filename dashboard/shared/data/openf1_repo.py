"""OpenF1 API repository implementation."""

from __future__ import annotations

import threading
import time
from datetime import datetime
from typing import Any

import streamlit as st

from f1quali import OpenF1Client
from f1quali.qualifying import SessionMetadata
from f1quali.qualifying.records import ingest_session

from .base import F1DataRepository
from .errors import F1DataError
from ..api_logging import log_api_call
from .types import DriverInfo, LapData, MeetingData, RaceControlData, SessionData, StintData

# ── Rate limiting ────────────────────────────────────────────────────────────

_last_request_time: float = 0.0
_rate_limit_lock = threading.Lock()
_MIN_REQUEST_INTERVAL = 0.35  # OpenF1 allows 3 req/s; 350ms keeps us safe


def _rate_limit() -> None:
    """Sleep if needed to respect the OpenF1 API rate limit."""
    global _last_request_time
    with _rate_limit_lock:
        now = time.monotonic()
        elapsed = now - _last_request_time
        if elapsed < _MIN_REQUEST_INTERVAL:
            time.sleep(_MIN_REQUEST_INTERVAL - elapsed)
        _last_request_time = time.monotonic()


def _project(record: dict[str, Any], contract: type) -> dict[str, Any]:
    """Keep only the keys of a TypedDict contract, dates as ISO strings."""
    projected: dict[str, Any] = {}
    for key in contract.__annotations__:
        value = record.get(key)
        projected[key] = value.isoformat() if isinstance(value, datetime) else value
    return projected


# ── Cached fetch helpers ─────────────────────────────────────────────────────


@st.cache_data(ttl=600)
def _fetch_meetings(year: int) -> list[MeetingData]:
    _rate_limit()
    try:
        with OpenF1Client() as f1:
            return [_project(m.model_dump(), MeetingData) for m in f1.meetings(year=year)]
    except Exception as exc:
        raise F1DataError(f"Failed to fetch meetings for {year}: {exc}") from exc


@st.cache_data(ttl=600)
def _fetch_sessions(meeting_key: int) -> list[SessionData]:
    _rate_limit()
    try:
        with OpenF1Client() as f1:
            return [_project(s.model_dump(), SessionData) for s in f1.sessions(meeting_key=meeting_key)]
    except Exception as exc:
        raise F1DataError(f"Failed to fetch sessions for meeting {meeting_key}: {exc}") from exc


@st.cache_data(ttl=600)
def _fetch_session(session_key: int) -> SessionData | None:
    _rate_limit()
    try:
        with OpenF1Client() as f1:
            sessions = f1.sessions(session_key=session_key)
    except Exception as exc:
        raise F1DataError(f"Failed to fetch session {session_key}: {exc}") from exc
    return _project(sessions[0].model_dump(), SessionData) if sessions else None


@st.cache_data(ttl=600)
def _fetch_drivers(session_key: int) -> list[DriverInfo]:
    _rate_limit()
    try:
        with OpenF1Client() as f1:
            return [_project(d.model_dump(), DriverInfo) for d in f1.drivers(session_key=session_key)]
    except Exception as exc:
        raise F1DataError(f"Failed to fetch drivers for session {session_key}: {exc}") from exc


@st.cache_data(ttl=600)
def _fetch_laps(session_key: int) -> list[LapData]:
    _rate_limit()
    try:
        with OpenF1Client() as f1:
            return [_project(lap.model_dump(), LapData) for lap in f1.laps(session_key=session_key)]
    except Exception as exc:
        raise F1DataError(f"Failed to fetch laps for session {session_key}: {exc}") from exc


@st.cache_data(ttl=600)
def _fetch_stints(session_key: int) -> list[StintData]:
    _rate_limit()
    try:
        with OpenF1Client() as f1:
            return [_project(s.model_dump(), StintData) for s in f1.stints(session_key=session_key)]
    except Exception as exc:
        raise F1DataError(f"Failed to fetch stints for session {session_key}: {exc}") from exc


@st.cache_data(ttl=600)
def _fetch_race_control(session_key: int) -> list[RaceControlData]:
    _rate_limit()
    try:
        with OpenF1Client() as f1:
            return [
                _project(e.model_dump(), RaceControlData)
                for e in f1.race_control(session_key=session_key)
            ]
    except Exception as exc:
        raise F1DataError(
            f"Failed to fetch race control messages for session {session_key}: {exc}",
        ) from exc


# ── Repository class ─────────────────────────────────────────────────────────


class OpenF1Repository(F1DataRepository):
    """OpenF1 API data repository."""

    @log_api_call
    def get_meetings(self, year: int) -> list[MeetingData]:
        return _fetch_meetings(year)

    @log_api_call
    def get_sessions(self, meeting_key: int | str) -> list[SessionData]:
        return _fetch_sessions(int(meeting_key))

    @log_api_call
    def get_session_metadata(self, session_key: int | str) -> SessionMetadata | None:
        session = _fetch_session(int(session_key))
        return ingest_session(session) if session is not None else None

    @log_api_call
    def get_drivers_for_session(self, session_key: int | str) -> list[DriverInfo]:
        return _fetch_drivers(int(session_key))

    @log_api_call
    def get_laps_for_session(self, session_key: int | str) -> list[LapData]:
        return _fetch_laps(int(session_key))

    @log_api_call
    def get_stints_for_session(self, session_key: int | str) -> list[StintData]:
        return _fetch_stints(int(session_key))

    @log_api_call
    def get_race_control_events(self, session_key: int | str) -> list[RaceControlData]:
        return _fetch_race_control(int(session_key))

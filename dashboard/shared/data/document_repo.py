"""Repository over exported document-store collections.

Reads one file per collection (``meetings.json``, ``sessions.json``,
``drivers.json``, ``laps.json``, ``stints.json``, ``race_control.json``) from
a directory, either as a JSON array or as one JSON document per line.
Dates and numbers are left in whatever shape the export used, typically
``{"$date": "..."}`` and ``{"$numberInt": "..."}`` wrappers; the library's
ingestion helpers unwrap them.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import streamlit as st

from f1quali.qualifying import SessionMetadata
from f1quali.qualifying.records import ingest_session, int_or_none, str_or_none

from .base import F1DataRepository
from .errors import F1DataError
from ..api_logging import log_api_call
from .types import DriverInfo, LapData, MeetingData, RaceControlData, SessionData, StintData

DOCUMENTS_ENV_VAR = "F1_DOCUMENTS_DIR"
DEFAULT_DOCUMENTS_DIR = "data"


def _date_sort_key(value: object) -> str:
    if isinstance(value, dict):
        value = value.get("$date")
    return value if isinstance(value, str) else ""


@st.cache_data(ttl=600)
def _load_collection(path: str) -> list[dict[str, Any]]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except OSError as exc:
        raise F1DataError(f"Failed to read collection {path}: {exc}") from exc

    try:
        if text.lstrip().startswith("["):
            docs = json.loads(text)
        else:
            docs = [json.loads(line) for line in text.splitlines() if line.strip()]
    except json.JSONDecodeError as exc:
        raise F1DataError(f"Malformed collection {path}: {exc}") from exc
    return [doc for doc in docs if isinstance(doc, dict)]


class DocumentRepository(F1DataRepository):
    """Exported document collections on local disk."""

    def __init__(self, directory: str | os.PathLike[str] | None = None) -> None:
        self._directory = Path(
            directory if directory is not None
            else os.environ.get(DOCUMENTS_ENV_VAR, DEFAULT_DOCUMENTS_DIR),
        )

    def __repr__(self) -> str:
        return f"DocumentRepository({str(self._directory)!r})"

    def _collection(self, name: str) -> list[dict[str, Any]]:
        return _load_collection(str(self._directory / f"{name}.json"))

    def _for_session(self, name: str, session_key: int | str) -> list[dict[str, Any]]:
        key = int_or_none(session_key)
        if key is None:
            return []
        return [doc for doc in self._collection(name) if int_or_none(doc.get("session_key")) == key]

    @log_api_call
    def get_meetings(self, year: int) -> list[MeetingData]:
        meetings = [m for m in self._collection("meetings") if int_or_none(m.get("year")) == year]
        meetings.sort(key=lambda m: _date_sort_key(m.get("date_start")), reverse=True)
        return [
            {
                "meeting_name": m.get("meeting_name"),
                "meeting_key": int_or_none(m.get("meeting_key")),
                "year": int_or_none(m.get("year")),
            }
            for m in meetings
        ]

    @log_api_call
    def get_sessions(self, meeting_key: int | str) -> list[SessionData]:
        key = int_or_none(meeting_key)
        if key is None:
            return []
        sessions = [s for s in self._collection("sessions") if int_or_none(s.get("meeting_key")) == key]
        sessions.sort(key=lambda s: _date_sort_key(s.get("date_start")))
        return [
            {
                "session_name": s.get("session_name"),
                "session_key": int_or_none(s.get("session_key")),
                "session_type": s.get("session_type"),
                "date_start": s.get("date_start"),
                "date_end": s.get("date_end"),
            }
            for s in sessions
        ]

    @log_api_call
    def get_session_metadata(self, session_key: int | str) -> SessionMetadata | None:
        matches = self._for_session("sessions", session_key)
        return ingest_session(matches[0]) if matches else None

    @log_api_call
    def get_drivers_for_session(self, session_key: int | str) -> list[DriverInfo]:
        drivers = self._for_session("drivers", session_key)
        drivers.sort(key=lambda d: (str_or_none(d.get("team_name")) or "", int_or_none(d.get("driver_number")) or 0))
        return drivers  # type: ignore[return-value]

    @log_api_call
    def get_laps_for_session(self, session_key: int | str) -> list[LapData]:
        laps = self._for_session("laps", session_key)
        laps.sort(key=lambda lap: (int_or_none(lap.get("driver_number")) or 0, int_or_none(lap.get("lap_number")) or 0))
        return laps  # type: ignore[return-value]

    @log_api_call
    def get_stints_for_session(self, session_key: int | str) -> list[StintData]:
        return self._for_session("stints", session_key)  # type: ignore[return-value]

    @log_api_call
    def get_race_control_events(self, session_key: int | str) -> list[RaceControlData]:
        return self._for_session("race_control", session_key)  # type: ignore[return-value]

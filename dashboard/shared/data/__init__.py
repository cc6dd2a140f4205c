"""Data layer: source-agnostic repository factory and re-exports."""

from __future__ import annotations

from .source import DataSource, get_active_source
from .base import F1DataRepository
from .errors import F1DataError
from .types import DriverInfo, LapData, MeetingData, RaceControlData, SessionData, StintData


def get_repository() -> F1DataRepository:
    """Return the active data repository based on the user's source selection."""
    if get_active_source() == DataSource.DOCUMENTS:
        from .document_repo import DocumentRepository

        return DocumentRepository()
    from .openf1_repo import OpenF1Repository

    return OpenF1Repository()


__all__ = [
    "DataSource",
    "DriverInfo",
    "F1DataError",
    "F1DataRepository",
    "LapData",
    "MeetingData",
    "RaceControlData",
    "SessionData",
    "StintData",
    "get_active_source",
    "get_repository",
]

"""Abstract base repository for F1 data access."""

from __future__ import annotations

from abc import abstractmethod

from f1quali.qualifying import QualifyingSource, SessionMetadata

from .types import DriverInfo, LapData, MeetingData, RaceControlData, SessionData, StintData


class F1DataRepository(QualifyingSource):
    """Source-agnostic interface for dashboard data access.

    Extends the qualifying source contract with the meeting/session lookups
    the sidebar needs.
    """

    @abstractmethod
    def get_meetings(self, year: int) -> list[MeetingData]: ...

    @abstractmethod
    def get_sessions(self, meeting_key: int | str) -> list[SessionData]: ...

    @abstractmethod
    def get_drivers_for_session(self, session_key: int | str) -> list[DriverInfo]: ...

    @abstractmethod
    def get_laps_for_session(self, session_key: int | str) -> list[LapData]: ...

    @abstractmethod
    def get_stints_for_session(self, session_key: int | str) -> list[StintData]: ...

    @abstractmethod
    def get_race_control_events(self, session_key: int | str) -> list[RaceControlData]: ...

    @abstractmethod
    def get_session_metadata(self, session_key: int | str) -> SessionMetadata | None: ...

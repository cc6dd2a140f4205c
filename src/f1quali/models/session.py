"""Session model (practice, qualifying, sprint qualifying, race)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

QUALIFYING_SESSION_TYPE = "Qualifying"
QUALIFYING_SESSION_NAMES = frozenset({"Qualifying", "Sprint Qualifying", "Sprint Shootout"})


def is_qualifying_session(session_name: str | None, session_type: str | None) -> bool:
    """True for any knockout qualifying format, including sprint shootouts."""
    return session_type == QUALIFYING_SESSION_TYPE or session_name in QUALIFYING_SESSION_NAMES


class Session(BaseModel):
    """A single timed session of a meeting."""

    model_config = ConfigDict(frozen=True)

    circuit_key: int | None = None
    circuit_short_name: str | None = None
    country_code: str | None = None
    country_name: str | None = None
    date_end: datetime | None = None
    date_start: datetime | None = None
    gmt_offset: str | None = None
    location: str | None = None
    meeting_key: int | None = None
    session_key: int | None = None
    session_name: str | None = None
    session_type: str | None = None
    year: int | None = None

    @property
    def is_qualifying(self) -> bool:
        return is_qualifying_session(self.session_name, self.session_type)

"""Meeting (Grand Prix weekend) model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Meeting(BaseModel):
    """Grand Prix weekend."""

    model_config = ConfigDict(frozen=True)

    circuit_short_name: str | None = None
    country_name: str | None = None
    date_start: datetime | None = None
    location: str | None = None
    meeting_key: int | None = None
    meeting_name: str | None = None
    year: int | None = None

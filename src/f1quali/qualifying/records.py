"""Normalised input records for the qualifying pipeline.

Sources hand over plain mappings (document exports, JSON) or the pydantic
models returned by the HTTP client. The ``ingest_*`` functions convert both
into frozen dataclasses, normalising every timestamp exactly once and
skipping records that cannot be keyed to a driver or lap.

Field values are coerced rather than trusted: Extended JSON number wrappers
are unwrapped, non-finite durations become None and identity fields are
coerced to text or None.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .rules import DEFAULT_RULES, QualifyingRules
from .timestamps import normalize_timestamp

logger = logging.getLogger(__name__)

_NUMBER_WRAPPER_KEYS = ("$numberInt", "$numberLong", "$numberDouble", "$numberDecimal")


@dataclass(frozen=True)
class RaceControlEvent:
    timestamp: datetime
    flag: str | None
    message: str | None
    timestamp_fallback: bool = False


@dataclass(frozen=True)
class LapRecord:
    driver_number: int
    lap_number: int
    date_start: datetime
    lap_duration: float | None = None
    duration_sector_1: float | None = None
    duration_sector_2: float | None = None
    duration_sector_3: float | None = None
    is_pit_out_lap: bool = False
    timestamp_fallback: bool = False


@dataclass(frozen=True)
class StintRecord:
    driver_number: int
    stint_number: int | None
    lap_start: int | None
    lap_end: int | None
    compound: str | None
    tyre_age_at_start: int | None = None


@dataclass(frozen=True)
class DriverRef:
    driver_number: int
    full_name: str | None = None
    name_acronym: str | None = None
    team_name: str | None = None
    team_colour: str | None = None
    headshot_url: str | None = None


@dataclass(frozen=True)
class SessionMetadata:
    """What the pipeline needs to know about the session itself."""

    session_name: str | None = None
    is_sprint: bool = False
    date_start: datetime | None = None
    date_end: datetime | None = None


def as_mapping(record: object) -> Mapping[str, Any] | None:
    """Return a mapping view of a dict or pydantic model, else None."""
    if isinstance(record, Mapping):
        return record
    dump = getattr(record, "model_dump", None)
    if callable(dump):
        return dump()
    return None


def unwrap_number(value: object) -> object:
    """Strip an Extended JSON number wrapper such as ``{"$numberInt": "44"}``."""
    if isinstance(value, Mapping):
        for key in _NUMBER_WRAPPER_KEYS:
            if key in value:
                return value[key]
    return value


def int_or_none(value: object) -> int | None:
    value = unwrap_number(value)
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return None


def float_or_none(value: object) -> float | None:
    """Finite float or None; NaN and infinities count as missing."""
    value = unwrap_number(value)
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def str_or_none(value: object) -> str | None:
    if isinstance(value, str):
        return value
    value = unwrap_number(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value if isinstance(value, str) else None


def _instant_or_none(value: object) -> datetime | None:
    ts = normalize_timestamp(value)
    return None if ts.is_fallback else ts.instant


def ingest_events(raw: Iterable[object], *, now: datetime) -> list[RaceControlEvent]:
    events: list[RaceControlEvent] = []
    for item in raw:
        data = as_mapping(item)
        if data is None:
            logger.warning("Skipping race control record of type %s", type(item).__name__)
            continue
        ts = normalize_timestamp(data.get("date"), now=now)
        if ts.is_fallback:
            logger.warning(
                "Race control event %r uses fallback timestamp: %s",
                data.get("message"), ts.fallback_reason,
            )
        events.append(RaceControlEvent(
            timestamp=ts.instant,
            flag=str_or_none(data.get("flag")),
            message=str_or_none(data.get("message")),
            timestamp_fallback=ts.is_fallback,
        ))
    return events


def ingest_laps(raw: Iterable[object], *, now: datetime) -> list[LapRecord]:
    laps: list[LapRecord] = []
    for item in raw:
        data = as_mapping(item)
        if data is None:
            logger.warning("Skipping lap record of type %s", type(item).__name__)
            continue
        driver_number = int_or_none(data.get("driver_number"))
        lap_number = int_or_none(data.get("lap_number"))
        if driver_number is None or lap_number is None:
            logger.warning(
                "Skipping lap without driver/lap number: driver=%r lap=%r",
                data.get("driver_number"), data.get("lap_number"),
            )
            continue
        ts = normalize_timestamp(data.get("date_start"), now=now)
        if ts.is_fallback:
            logger.warning(
                "Lap %d of driver %d uses fallback timestamp: %s",
                lap_number, driver_number, ts.fallback_reason,
            )
        laps.append(LapRecord(
            driver_number=driver_number,
            lap_number=lap_number,
            date_start=ts.instant,
            lap_duration=float_or_none(data.get("lap_duration")),
            duration_sector_1=float_or_none(data.get("duration_sector_1")),
            duration_sector_2=float_or_none(data.get("duration_sector_2")),
            duration_sector_3=float_or_none(data.get("duration_sector_3")),
            is_pit_out_lap=bool(data.get("is_pit_out_lap")),
            timestamp_fallback=ts.is_fallback,
        ))
    return laps


def ingest_stints(raw: Iterable[object]) -> dict[int, list[StintRecord]]:
    """Group stints by driver number, ordered by stint number."""
    by_driver: dict[int, list[StintRecord]] = {}
    for item in raw:
        data = as_mapping(item)
        if data is None:
            logger.warning("Skipping stint record of type %s", type(item).__name__)
            continue
        driver_number = int_or_none(data.get("driver_number"))
        if driver_number is None:
            logger.warning("Skipping stint without driver number: %r", data)
            continue
        compound = data.get("compound")
        by_driver.setdefault(driver_number, []).append(StintRecord(
            driver_number=driver_number,
            stint_number=int_or_none(data.get("stint_number")),
            lap_start=int_or_none(data.get("lap_start")),
            lap_end=int_or_none(data.get("lap_end")),
            compound=compound.upper() if isinstance(compound, str) and compound else None,
            tyre_age_at_start=int_or_none(data.get("tyre_age_at_start")),
        ))
    for stints in by_driver.values():
        stints.sort(key=lambda s: s.stint_number if s.stint_number is not None else 0)
    return by_driver


def ingest_drivers(raw: Iterable[object]) -> list[DriverRef]:
    """Build the roster, keeping the first entry for a repeated driver number."""
    roster: list[DriverRef] = []
    seen: set[int] = set()
    for item in raw:
        data = as_mapping(item)
        if data is None:
            logger.warning("Skipping driver record of type %s", type(item).__name__)
            continue
        driver_number = int_or_none(data.get("driver_number"))
        if driver_number is None:
            logger.warning("Skipping driver without number: %r", data.get("full_name"))
            continue
        if driver_number in seen:
            continue
        seen.add(driver_number)
        roster.append(DriverRef(
            driver_number=driver_number,
            full_name=str_or_none(data.get("full_name")),
            name_acronym=str_or_none(data.get("name_acronym")),
            team_name=str_or_none(data.get("team_name")),
            team_colour=str_or_none(data.get("team_colour")),
            headshot_url=str_or_none(data.get("headshot_url")),
        ))
    return roster


def ingest_session(raw: object, *, rules: QualifyingRules = DEFAULT_RULES) -> SessionMetadata | None:
    """Build session metadata from a session record; unparsable dates become None.

    A ``SessionMetadata`` built by the caller is normalised too, so its dates
    come back timezone-aware UTC like every other instant in the pipeline.
    """
    if isinstance(raw, SessionMetadata):
        return SessionMetadata(
            session_name=str_or_none(raw.session_name),
            is_sprint=bool(raw.is_sprint),
            date_start=_instant_or_none(raw.date_start),
            date_end=_instant_or_none(raw.date_end),
        )
    data = as_mapping(raw)
    if data is None:
        return None
    session_name = str_or_none(data.get("session_name"))
    return SessionMetadata(
        session_name=session_name,
        is_sprint=rules.is_sprint_session(session_name),
        date_start=_instant_or_none(data.get("date_start")),
        date_end=_instant_or_none(data.get("date_end")),
    )

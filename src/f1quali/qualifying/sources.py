"""Storage collaborators and the public qualifying entry points."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from f1quali.client import AsyncOpenF1Client, OpenF1Client
from f1quali.exceptions import DataSourceError, OpenF1Error

from .pipeline import build_qualifying_result
from .records import SessionMetadata, ingest_session
from .results import ErrorKind, QualifyingOutcome
from .rules import DEFAULT_RULES, QualifyingRules

logger = logging.getLogger(__name__)

STORAGE_ERRORS = (DataSourceError, OpenF1Error)


class QualifyingSource(ABC):
    """Read-only access to the collections a qualifying session is built from.

    Record methods return mappings or pydantic models. Implementations raise
    ``DataSourceError`` (or an ``OpenF1Error``) when storage is unreachable.
    """

    @abstractmethod
    def get_race_control_events(self, session_key: int | str) -> list[Any]: ...

    @abstractmethod
    def get_laps_for_session(self, session_key: int | str) -> list[Any]: ...

    @abstractmethod
    def get_stints_for_session(self, session_key: int | str) -> list[Any]: ...

    @abstractmethod
    def get_drivers_for_session(self, session_key: int | str) -> list[Any]: ...

    @abstractmethod
    def get_session_metadata(self, session_key: int | str) -> SessionMetadata | None: ...


@dataclass(frozen=True)
class QualifyingInputs:
    events: list[Any]
    laps: list[Any]
    stints: list[Any]
    drivers: list[Any]
    session: SessionMetadata | None


def load_inputs(source: QualifyingSource, session_key: int | str) -> QualifyingInputs:
    """Read everything the pipeline needs; storage errors propagate."""
    return QualifyingInputs(
        session=source.get_session_metadata(session_key),
        drivers=source.get_drivers_for_session(session_key),
        laps=source.get_laps_for_session(session_key),
        stints=source.get_stints_for_session(session_key),
        events=source.get_race_control_events(session_key),
    )


def _missing_data(inputs: QualifyingInputs) -> str | None:
    if inputs.session is None:
        return "session not found"
    if not inputs.drivers:
        return "no drivers for session"
    if not inputs.laps:
        return "no laps for session"
    return None


def _compute(
    inputs: QualifyingInputs,
    session_key: int | str,
    rules: QualifyingRules,
    now: datetime | None,
) -> QualifyingOutcome:
    missing = _missing_data(inputs)
    if missing is not None:
        logger.info("Session %s: %s", session_key, missing)
        return QualifyingOutcome.degraded(ErrorKind.MISSING_DATA, missing)

    try:
        result = build_qualifying_result(
            inputs.events, inputs.laps, inputs.stints, inputs.drivers, inputs.session,
            rules=rules, now=now,
        )
    except Exception as exc:
        logger.exception("Failed to reconstruct qualifying for session %s", session_key)
        return QualifyingOutcome.degraded(ErrorKind.INVALID_DATA, f"{type(exc).__name__}: {exc}")
    if result.is_empty:
        return QualifyingOutcome.degraded(ErrorKind.MISSING_DATA, "no classifiable laps")
    return QualifyingOutcome(result=result)


def compute_qualifying_result(
    source: QualifyingSource,
    session_key: int | str,
    *,
    rules: QualifyingRules = DEFAULT_RULES,
    now: datetime | None = None,
) -> QualifyingOutcome:
    """Reconstruct qualifying for *session_key*. Never raises for storage failures.

    Storage failures, missing data and records the pipeline cannot process
    come back as an empty result with ``outcome.error`` set; check
    ``outcome.ok`` before trusting the result.
    """
    try:
        inputs = load_inputs(source, session_key)
    except STORAGE_ERRORS as exc:
        logger.error("Failed to load qualifying data for session %s: %s", session_key, exc)
        return QualifyingOutcome.degraded(ErrorKind.STORAGE, str(exc))
    return _compute(inputs, session_key, rules, now)


# ── OpenF1 ───────────────────────────────────────────────────────────────────


class OpenF1Source(QualifyingSource):
    """Qualifying source backed by the synchronous OpenF1 client."""

    def __init__(self, client: OpenF1Client) -> None:
        self._client = client

    def get_race_control_events(self, session_key: int | str) -> list[Any]:
        return self._client.race_control(session_key=session_key)

    def get_laps_for_session(self, session_key: int | str) -> list[Any]:
        return self._client.laps(session_key=session_key)

    def get_stints_for_session(self, session_key: int | str) -> list[Any]:
        return self._client.stints(session_key=session_key)

    def get_drivers_for_session(self, session_key: int | str) -> list[Any]:
        return self._client.drivers(session_key=session_key)

    def get_session_metadata(self, session_key: int | str) -> SessionMetadata | None:
        sessions = self._client.sessions(session_key=session_key)
        if not sessions:
            return None
        return ingest_session(sessions[0])


async def load_inputs_async(client: AsyncOpenF1Client, session_key: int | str) -> QualifyingInputs:
    """Issue the five independent reads concurrently."""
    sessions, drivers, laps, stints, events = await asyncio.gather(
        client.sessions(session_key=session_key),
        client.drivers(session_key=session_key),
        client.laps(session_key=session_key),
        client.stints(session_key=session_key),
        client.race_control(session_key=session_key),
    )
    return QualifyingInputs(
        session=ingest_session(sessions[0]) if sessions else None,
        drivers=drivers,
        laps=laps,
        stints=stints,
        events=events,
    )


async def compute_qualifying_result_async(
    client: AsyncOpenF1Client,
    session_key: int | str,
    *,
    rules: QualifyingRules = DEFAULT_RULES,
    now: datetime | None = None,
) -> QualifyingOutcome:
    """Async counterpart of ``compute_qualifying_result`` over the OpenF1 API."""
    try:
        inputs = await load_inputs_async(client, session_key)
    except STORAGE_ERRORS as exc:
        logger.error("Failed to load qualifying data for session %s: %s", session_key, exc)
        return QualifyingOutcome.degraded(ErrorKind.STORAGE, str(exc))
    return _compute(inputs, session_key, rules, now)

"""Timestamp normalisation for records arriving from mixed ingestion paths.

Race control events and laps reach the pipeline as native datetimes (from
the HTTP client), ISO-8601 strings (from JSON) or ``{"$date": ...}`` wrapper
documents (from document-store exports). Everything is folded into a single
timezone-aware UTC ``datetime`` here, once, so the rest of the pipeline only
ever compares one type.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime

_ISO_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")
_WRAPPER_KEY = "$date"


@dataclass(frozen=True)
class NormalizedTimestamp:
    """A comparable instant, tagged with the reason when it is a fallback."""

    instant: datetime
    fallback_reason: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None


def utc_now() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def normalize_timestamp(value: object, *, now: datetime | None = None) -> NormalizedTimestamp:
    """Coerce *value* into a UTC instant.

    Accepts a ``datetime``, an ISO-8601 string with a
    ``YYYY-MM-DDTHH:MM:SS`` prefix, or a mapping wrapping either under
    ``"$date"``. Anything else resolves to *now* with ``fallback_reason`` set;
    this function never raises.
    """
    if isinstance(value, datetime):
        return NormalizedTimestamp(_as_utc(value))

    if isinstance(value, str):
        if _ISO_PREFIX_RE.match(value):
            try:
                return NormalizedTimestamp(_as_utc(datetime.fromisoformat(value)))
            except ValueError:
                pass
        return _fallback(f"unparsable date string {value!r}", now)

    if isinstance(value, Mapping):
        if _WRAPPER_KEY in value:
            return normalize_timestamp(value[_WRAPPER_KEY], now=now)
        return _fallback(f"date wrapper without {_WRAPPER_KEY!r} key", now)

    if value is None:
        return _fallback("missing date", now)
    return _fallback(f"unsupported date type {type(value).__name__}", now)


def _fallback(reason: str, now: datetime | None) -> NormalizedTimestamp:
    return NormalizedTimestamp(_as_utc(now) if now is not None else utc_now(), reason)

"""Tyre compound lookup from stint lap ranges."""

from __future__ import annotations

from collections.abc import Sequence

from .records import StintRecord


def find_stint(lap_number: int, stints: Sequence[StintRecord]) -> StintRecord | None:
    """Return the stint whose inclusive lap range contains *lap_number*."""
    for stint in stints:
        if stint.lap_start is None or stint.lap_end is None:
            continue
        if stint.lap_start <= lap_number <= stint.lap_end:
            return stint
    return None


def resolve_compound(lap_number: int | None, stints: Sequence[StintRecord]) -> str | None:
    """Compound used on *lap_number*, or None when no stint covers the lap."""
    if lap_number is None:
        return None
    stint = find_stint(lap_number, stints)
    return stint.compound if stint is not None else None


def resolve_tyre_age(lap_number: int | None, stints: Sequence[StintRecord]) -> int | None:
    """Tyre age in laps at *lap_number*: age at stint start plus laps into the stint."""
    if lap_number is None:
        return None
    stint = find_stint(lap_number, stints)
    if stint is None or stint.lap_start is None:
        return None
    return (stint.tyre_age_at_start or 0) + (lap_number - stint.lap_start)

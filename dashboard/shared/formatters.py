"""Formatting helpers for the qualifying dashboard."""

from __future__ import annotations


def format_lap_time(seconds: float | None) -> str:
    """Format seconds as m:ss.fff or '—' if None."""
    if seconds is None:
        return "—"
    mins, secs = divmod(seconds, 60)
    return f"{int(mins)}:{secs:06.3f}"


def format_gap(lap_time: float | None, reference: float | None) -> str:
    """Gap to a reference time as +s.fff; blank for the reference itself."""
    if lap_time is None or reference is None:
        return "—"
    gap = lap_time - reference
    if abs(gap) < 0.0005:
        return ""
    return f"+{gap:.3f}"


def format_compound(compound: str | None) -> str:
    if not compound:
        return "—"
    return compound.capitalize()

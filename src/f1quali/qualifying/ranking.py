"""Stage ranking and knockout elimination."""

from __future__ import annotations

from collections.abc import Sequence

from .results import DriverStageResult


def nulls_last(time: float | None) -> tuple[bool, float]:
    """Sort key ordering lap times ascending with missing times after all others."""
    return (time is None, time if time is not None else 0.0)


def rank_stage(
    results: Sequence[DriverStageResult],
    *,
    eliminations: int = 0,
) -> list[DriverStageResult]:
    """Order a stage by best lap time and assign positions.

    The sort is stable, so equal times keep their input order. The bottom
    ``min(eliminations, len(results))`` drivers are flagged as eliminated;
    pass 0 for the final stage.
    """
    ordered = sorted(results, key=lambda r: nulls_last(r.best_lap_time))
    cutoff = len(ordered) - min(max(eliminations, 0), len(ordered))
    return [
        result.model_copy(update={"position": index + 1, "eliminated": index >= cutoff})
        for index, result in enumerate(ordered)
    ]


def eliminated_drivers(ranked: Sequence[DriverStageResult]) -> frozenset[int]:
    return frozenset(r.driver_number for r in ranked if r.eliminated)

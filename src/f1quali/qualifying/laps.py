"""Lap attribution to stage windows and best-lap selection."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .records import LapRecord
from .stages import StageWindow


@dataclass(frozen=True)
class LapAttribution:
    """A driver's laps inside one stage window and the fastest timed one."""

    laps: tuple[LapRecord, ...]
    best_lap: LapRecord | None

    @property
    def lap_numbers(self) -> tuple[int, ...]:
        return tuple(lap.lap_number for lap in self.laps)


def select_best_lap(laps: Iterable[LapRecord]) -> LapRecord | None:
    """Fastest lap with a duration; the first one wins a tie."""
    best: LapRecord | None = None
    for lap in laps:
        if lap.lap_duration is None:
            continue
        if best is None or lap.lap_duration < best.lap_duration:  # type: ignore[operator]
            best = lap
    return best


def attribute_laps(
    window: StageWindow,
    driver_number: int,
    laps: Iterable[LapRecord],
) -> LapAttribution:
    """Select the driver's laps that started inside *window* (bounds inclusive).

    Untimed laps stay in the attributed set but are never chosen as best.
    """
    in_window = tuple(
        lap for lap in laps
        if lap.driver_number == driver_number and window.contains(lap.date_start)
    )
    return LapAttribution(laps=in_window, best_lap=select_best_lap(in_window))

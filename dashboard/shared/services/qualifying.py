"""Qualifying service: runs the reconstruction and shapes it for display."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from f1quali.qualifying import (
    DEFAULT_RULES,
    QualifyingOutcome,
    QualifyingRules,
    StageResult,
    compute_qualifying_result,
)

from ..api_logging import log_service_call
from ..data.base import F1DataRepository
from ..formatters import format_compound, format_gap, format_lap_time


@dataclass(frozen=True)
class GapPoint:
    """One bar of the gap-to-pole chart."""

    name_acronym: str
    gap: float
    team_colour: str | None


def normalize_team_color(colour: str | None, fallback: str) -> str:
    """OpenF1 team colours come without the leading '#'."""
    if not colour:
        return fallback
    return colour if colour.startswith("#") else f"#{colour}"


class QualifyingService:
    """Business logic for the qualifying page, independent of Streamlit."""

    def __init__(self, repo: F1DataRepository, rules: QualifyingRules = DEFAULT_RULES) -> None:
        self._repo = repo
        self._rules = rules

    @log_service_call
    def load(self, session_key: int | str, *, now: datetime | None = None) -> QualifyingOutcome:
        return compute_qualifying_result(self._repo, session_key, rules=self._rules, now=now)

    @staticmethod
    def stage_tab_names(outcome: QualifyingOutcome) -> list[str]:
        """Tab labels: the final grid first, then one tab per stage."""
        return ["Final Grid"] + [stage.name for stage in outcome.result.stages]

    @staticmethod
    def final_grid_rows(outcome: QualifyingOutcome) -> list[dict[str, str | int | None]]:
        result = outcome.result
        stage_names = [stage.name for stage in result.stages]
        rows: list[dict[str, str | int | None]] = []
        for entry in result.final_grid:
            row: dict[str, str | int | None] = {
                "Pos": entry.position,
                "No.": entry.driver_number,
                "Driver": entry.full_name or entry.name_acronym or str(entry.driver_number),
                "Team": entry.team_name or "",
            }
            splits = (
                (entry.q1_time, entry.q1_compound),
                (entry.q2_time, entry.q2_compound),
                (entry.q3_time, entry.q3_compound),
            )
            for name, (time, compound) in zip(stage_names, splits):
                row[name] = format_lap_time(time)
                row[f"{name} Tyre"] = format_compound(compound)
            rows.append(row)
        return rows

    @staticmethod
    def stage_rows(stage: StageResult) -> list[dict[str, str | int | bool | None]]:
        leader = stage.drivers[0].best_lap_time if stage.drivers else None
        return [
            {
                "Pos": driver.position,
                "No.": driver.driver_number,
                "Driver": driver.full_name or driver.name_acronym or str(driver.driver_number),
                "Team": driver.team_name or "",
                "Best Lap": format_lap_time(driver.best_lap_time),
                "Gap": format_gap(driver.best_lap_time, leader),
                "S1": format_lap_time(driver.sector_1_time),
                "S2": format_lap_time(driver.sector_2_time),
                "S3": format_lap_time(driver.sector_3_time),
                "Tyre": format_compound(driver.compound),
                "Tyre Age": driver.tyre_age,
                "Laps": driver.lap_count,
                "Eliminated": driver.eliminated,
            }
            for driver in stage.drivers
        ]

    @staticmethod
    def gap_to_pole(stage: StageResult) -> list[GapPoint]:
        """Gap of every timed driver to the stage's fastest lap, in rank order."""
        timed = [d for d in stage.drivers if d.best_lap_time is not None]
        if not timed:
            return []
        pole = timed[0].best_lap_time
        return [
            GapPoint(
                name_acronym=d.name_acronym or str(d.driver_number),
                gap=round(d.best_lap_time - pole, 3),
                team_colour=d.team_colour,
            )
            for d in timed
        ]

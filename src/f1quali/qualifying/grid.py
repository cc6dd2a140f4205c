"""Final grid assembly from per-stage results."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from .ranking import nulls_last
from .results import DriverStageResult, GridEntry, StageResult


@dataclass(frozen=True)
class StageSplit:
    """What a driver set in one stage: best time, its compound and lap."""

    time: float | None
    compound: str | None
    lap_number: int | None


@dataclass(frozen=True)
class StageAccumulator:
    """Per-driver stage splits keyed by stage index (1-based).

    Each ``with_stage`` call returns a new accumulator; instances are never
    mutated, so one can be shared between computations.
    """

    splits: Mapping[int, Mapping[int, StageSplit]] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    def with_stage(self, stage_index: int, results: Sequence[DriverStageResult]) -> StageAccumulator:
        merged = {driver: dict(by_stage) for driver, by_stage in self.splits.items()}
        for result in results:
            merged.setdefault(result.driver_number, {})[stage_index] = StageSplit(
                time=result.best_lap_time,
                compound=result.compound,
                lap_number=result.best_lap_number,
            )
        return StageAccumulator(MappingProxyType({
            driver: MappingProxyType(by_stage) for driver, by_stage in merged.items()
        }))

    def split(self, driver_number: int, stage_index: int) -> StageSplit | None:
        return self.splits.get(driver_number, {}).get(stage_index)


def to_grid_entry(result: DriverStageResult, accumulator: StageAccumulator) -> GridEntry:
    """Attach q1/q2/q3 time, compound and lap number to a stage result."""
    extra: dict[str, object] = {}
    for index in (1, 2, 3):
        split = accumulator.split(result.driver_number, index)
        if split is None:
            continue
        extra[f"q{index}_time"] = split.time
        extra[f"q{index}_compound"] = split.compound
        extra[f"q{index}_lap_number"] = split.lap_number
    return GridEntry(**result.model_dump(), **extra)


def assemble_final_grid(
    stages: Sequence[StageResult],
    accumulator: StageAccumulator,
) -> tuple[GridEntry, ...]:
    """Merge stage results into the final classification.

    Starts from everyone in the last stage, then appends the drivers knocked
    out in each earlier stage, most advanced group first, and re-sorts the
    whole list by position (stable).
    """
    if not stages:
        return ()

    combined: list[DriverStageResult] = list(stages[-1].drivers)
    for stage in reversed(stages[:-1]):
        combined.extend(r for r in stage.drivers if r.eliminated)

    combined.sort(key=lambda r: nulls_last(r.position))
    return tuple(to_grid_entry(r, accumulator) for r in combined)

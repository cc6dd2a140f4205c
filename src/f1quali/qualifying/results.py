"""Result shapes produced by the qualifying pipeline.

Attributes are snake_case; ``to_dict()`` emits the camelCase wire shape
(``finalGrid``, ``startTime``, ``bestLapTime``, ``q1Time`` ...).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_RESULT_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class DriverStageResult(BaseModel):
    """One driver's showing in one stage."""

    model_config = _RESULT_CONFIG

    driver_number: int
    full_name: str | None = None
    name_acronym: str | None = None
    team_name: str | None = None
    team_colour: str | None = None
    headshot_url: str | None = None
    best_lap_time: float | None = None
    best_lap_number: int | None = None
    sector_1_time: float | None = None
    sector_2_time: float | None = None
    sector_3_time: float | None = None
    compound: str | None = None
    tyre_age: int | None = None
    lap_count: int = 0
    position: int | None = None
    eliminated: bool = False


class GridEntry(DriverStageResult):
    """Final classification row with the driver's time in every stage reached."""

    q1_time: float | None = None
    q2_time: float | None = None
    q3_time: float | None = None
    q1_compound: str | None = None
    q2_compound: str | None = None
    q3_compound: str | None = None
    q1_lap_number: int | None = None
    q2_lap_number: int | None = None
    q3_lap_number: int | None = None


class StageResult(BaseModel):
    model_config = _RESULT_CONFIG

    name: str
    start_time: datetime
    end_time: datetime
    drivers: tuple[DriverStageResult, ...] = ()


class QualifyingResult(BaseModel):
    model_config = _RESULT_CONFIG

    stages: tuple[StageResult, ...] = ()
    final_grid: tuple[GridEntry, ...] = ()

    @classmethod
    def empty(cls) -> QualifyingResult:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.stages and not self.final_grid

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict in the camelCase wire shape."""
        return self.model_dump(mode="json", by_alias=True)


class ErrorKind(str, enum.Enum):
    """Why a computation degraded to an empty result."""

    MISSING_DATA = "missing_data"
    STORAGE = "storage"
    INVALID_DATA = "invalid_data"


@dataclass(frozen=True)
class QualifyingOutcome:
    """Result of the public entry point, with the degradation made explicit."""

    result: QualifyingResult
    error: ErrorKind | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def degraded(cls, error: ErrorKind, detail: str) -> QualifyingOutcome:
        return cls(result=QualifyingResult.empty(), error=error, detail=detail)

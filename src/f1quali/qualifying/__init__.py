"""Qualifying stage reconstruction from race control, lap and stint records."""

from .compounds import resolve_compound, resolve_tyre_age
from .grid import StageAccumulator, StageSplit, assemble_final_grid
from .laps import LapAttribution, attribute_laps, select_best_lap
from .pipeline import build_fallback_result, build_qualifying_result, reconstruct
from .ranking import nulls_last, rank_stage
from .records import DriverRef, LapRecord, RaceControlEvent, SessionMetadata, StintRecord
from .results import (
    DriverStageResult,
    ErrorKind,
    GridEntry,
    QualifyingOutcome,
    QualifyingResult,
    StageResult,
)
from .rules import DEFAULT_RULES, QualifyingRules
from .sources import (
    OpenF1Source,
    QualifyingSource,
    compute_qualifying_result,
    compute_qualifying_result_async,
)
from .stages import StageWindow, segment_stages
from .timestamps import NormalizedTimestamp, normalize_timestamp

__all__ = [
    "DEFAULT_RULES",
    "DriverRef",
    "DriverStageResult",
    "ErrorKind",
    "GridEntry",
    "LapAttribution",
    "LapRecord",
    "NormalizedTimestamp",
    "OpenF1Source",
    "QualifyingOutcome",
    "QualifyingResult",
    "QualifyingRules",
    "QualifyingSource",
    "RaceControlEvent",
    "SessionMetadata",
    "StageAccumulator",
    "StageResult",
    "StageSplit",
    "StageWindow",
    "StintRecord",
    "assemble_final_grid",
    "attribute_laps",
    "build_fallback_result",
    "build_qualifying_result",
    "compute_qualifying_result",
    "compute_qualifying_result_async",
    "normalize_timestamp",
    "nulls_last",
    "rank_stage",
    "reconstruct",
    "resolve_compound",
    "resolve_tyre_age",
    "segment_stages",
    "select_best_lap",
]

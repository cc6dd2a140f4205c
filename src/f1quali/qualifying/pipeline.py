"""Qualifying reconstruction: raw records in, ``QualifyingResult`` out.

The pipeline is pure. Given the same records, rules and clock it always
produces the same result, and it never raises for bad data: malformed
timestamps fall back to *now*, and a session without enough race control
signal is classified as a single synthetic stage.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from .compounds import resolve_compound, resolve_tyre_age
from .grid import StageAccumulator, assemble_final_grid
from .laps import LapAttribution, attribute_laps, select_best_lap
from .ranking import eliminated_drivers, rank_stage
from .records import (
    DriverRef,
    LapRecord,
    SessionMetadata,
    StintRecord,
    ingest_drivers,
    ingest_events,
    ingest_laps,
    ingest_session,
    ingest_stints,
)
from .results import DriverStageResult, QualifyingResult, StageResult
from .rules import DEFAULT_RULES, QualifyingRules
from .stages import StageWindow, count_stage_signals, segment_stages
from .timestamps import utc_now

logger = logging.getLogger(__name__)

MIN_STAGE_SIGNALS = 2
MIN_STAGE_WINDOWS = 2


def score_driver(
    driver: DriverRef,
    attribution: LapAttribution,
    stints: Sequence[StintRecord],
) -> DriverStageResult:
    """Unranked stage result for one driver; all time fields None without a best lap."""
    best = attribution.best_lap
    lap_number = best.lap_number if best is not None else None
    return DriverStageResult(
        driver_number=driver.driver_number,
        full_name=driver.full_name,
        name_acronym=driver.name_acronym,
        team_name=driver.team_name,
        team_colour=driver.team_colour,
        headshot_url=driver.headshot_url,
        best_lap_time=best.lap_duration if best is not None else None,
        best_lap_number=lap_number,
        sector_1_time=best.duration_sector_1 if best is not None else None,
        sector_2_time=best.duration_sector_2 if best is not None else None,
        sector_3_time=best.duration_sector_3 if best is not None else None,
        compound=resolve_compound(lap_number, stints),
        tyre_age=resolve_tyre_age(lap_number, stints),
        lap_count=len(attribution.laps),
    )


def score_stage(
    window: StageWindow,
    roster: Sequence[DriverRef],
    laps: Sequence[LapRecord],
    stints_by_driver: Mapping[int, Sequence[StintRecord]],
) -> list[DriverStageResult]:
    return [
        score_driver(
            driver,
            attribute_laps(window, driver.driver_number, laps),
            stints_by_driver.get(driver.driver_number, ()),
        )
        for driver in roster
    ]


def _fallback_window(
    name: str,
    session: SessionMetadata,
    laps: Sequence[LapRecord],
    now: datetime,
) -> StageWindow:
    """Session-wide window: session dates, else the lap span, else *now*."""
    lap_starts = [lap.date_start for lap in laps if not lap.timestamp_fallback]
    start = session.date_start or (min(lap_starts) if lap_starts else now)
    end = session.date_end or (max(lap_starts) if lap_starts else now)
    return StageWindow(name=name, start_time=start, end_time=max(start, end))


def build_fallback_result(
    roster: Sequence[DriverRef],
    laps: Sequence[LapRecord],
    stints_by_driver: Mapping[int, Sequence[StintRecord]],
    session: SessionMetadata,
    *,
    rules: QualifyingRules = DEFAULT_RULES,
    now: datetime,
) -> QualifyingResult:
    """Single synthetic stage ranking every driver by session-wide best lap."""
    window = _fallback_window(f"{rules.stage_prefix(session.is_sprint)}1", session, laps, now)

    results = []
    for driver in roster:
        driver_laps = tuple(lap for lap in laps if lap.driver_number == driver.driver_number)
        attribution = LapAttribution(laps=driver_laps, best_lap=select_best_lap(driver_laps))
        results.append(score_driver(driver, attribution, stints_by_driver.get(driver.driver_number, ())))

    ranked = rank_stage(results)
    stage = StageResult(
        name=window.name,
        start_time=window.start_time,
        end_time=window.end_time,
        drivers=tuple(ranked),
    )
    accumulator = StageAccumulator().with_stage(1, ranked)
    return QualifyingResult(stages=(stage,), final_grid=assemble_final_grid([stage], accumulator))


def reconstruct(
    windows: Sequence[StageWindow],
    roster: Sequence[DriverRef],
    laps: Sequence[LapRecord],
    stints_by_driver: Mapping[int, Sequence[StintRecord]],
    *,
    rules: QualifyingRules = DEFAULT_RULES,
) -> QualifyingResult:
    """Score, rank and knock out drivers stage by stage, then build the grid."""
    stages: list[StageResult] = []
    accumulator = StageAccumulator()
    knocked_out: frozenset[int] = frozenset()

    for index, window in enumerate(windows, start=1):
        is_final = index == len(windows)
        stage_roster = [d for d in roster if d.driver_number not in knocked_out]
        ranked = rank_stage(
            score_stage(window, stage_roster, laps, stints_by_driver),
            eliminations=0 if is_final else rules.eliminations_per_stage,
        )
        knocked_out = knocked_out | eliminated_drivers(ranked)
        accumulator = accumulator.with_stage(index, ranked)
        stages.append(StageResult(
            name=window.name,
            start_time=window.start_time,
            end_time=window.end_time,
            drivers=tuple(ranked),
        ))

    return QualifyingResult(
        stages=tuple(stages),
        final_grid=assemble_final_grid(stages, accumulator),
    )


def build_qualifying_result(
    events: Iterable[object],
    laps: Iterable[object],
    stints: Iterable[object],
    drivers: Iterable[object],
    session: object,
    *,
    rules: QualifyingRules = DEFAULT_RULES,
    now: datetime | None = None,
) -> QualifyingResult:
    """Reconstruct a qualifying session from raw source records.

    Records may be mappings or pydantic models. *session* may be a
    ``SessionMetadata``, a session model or a session mapping. Missing
    session, driver or lap data yields an empty result.
    """
    now = now if now is not None else utc_now()

    metadata = ingest_session(session, rules=rules)
    if metadata is None:
        logger.info("No session metadata; returning empty qualifying result")
        return QualifyingResult.empty()

    roster = ingest_drivers(drivers)
    lap_records = ingest_laps(laps, now=now)
    if not roster or not lap_records:
        logger.info(
            "Nothing to classify (%d drivers, %d laps); returning empty result",
            len(roster), len(lap_records),
        )
        return QualifyingResult.empty()

    event_records = ingest_events(events, now=now)
    stints_by_driver = ingest_stints(stints)

    signal_count = count_stage_signals(event_records, rules)
    windows = segment_stages(event_records, is_sprint=metadata.is_sprint, rules=rules, now=now)
    if signal_count < MIN_STAGE_SIGNALS or len(windows) < MIN_STAGE_WINDOWS:
        logger.info(
            "Insufficient race control signal (%d signals, %d stages); using single-stage fallback",
            signal_count, len(windows),
        )
        return build_fallback_result(
            roster, lap_records, stints_by_driver, metadata, rules=rules, now=now,
        )

    return reconstruct(windows, roster, lap_records, stints_by_driver, rules=rules)

"""Qualifying stage segmentation from race control flag events."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from .records import RaceControlEvent
from .rules import DEFAULT_RULES, FLAG_CHEQUERED, FLAG_GREEN, FLAG_RED, QualifyingRules
from .timestamps import utc_now


class SignalKind(enum.Enum):
    START = "start"
    END = "end"
    RESTART = "restart"


@dataclass(frozen=True)
class StageSignal:
    kind: SignalKind
    timestamp: datetime


@dataclass(frozen=True)
class StageWindow:
    name: str
    start_time: datetime
    end_time: datetime

    def contains(self, instant: datetime) -> bool:
        """Inclusive on both bounds."""
        return self.start_time <= instant <= self.end_time


def _norm(text: str | None) -> str:
    return (text or "").strip().upper()


def classify_event(event: RaceControlEvent, rules: QualifyingRules = DEFAULT_RULES) -> SignalKind | None:
    """Return the stage signal carried by *event*, or None for any other message."""
    flag = _norm(event.flag)
    message = _norm(event.message)
    if flag == FLAG_GREEN and message == _norm(rules.stage_start_message):
        return SignalKind.START
    if flag == FLAG_CHEQUERED and message == _norm(rules.stage_end_message):
        return SignalKind.END
    if flag == FLAG_RED and _norm(rules.restart_message) in message:
        return SignalKind.RESTART
    return None


def extract_signals(
    events: Iterable[RaceControlEvent],
    rules: QualifyingRules = DEFAULT_RULES,
) -> list[StageSignal]:
    """Stage-defining signals in chronological order; ties keep input order."""
    signals = []
    for event in events:
        kind = classify_event(event, rules)
        if kind is not None:
            signals.append(StageSignal(kind, event.timestamp))
    signals.sort(key=lambda s: s.timestamp)
    return signals


def count_stage_signals(
    events: Iterable[RaceControlEvent],
    rules: QualifyingRules = DEFAULT_RULES,
) -> int:
    return len(extract_signals(events, rules))


def segment_stages(
    events: Iterable[RaceControlEvent],
    *,
    is_sprint: bool = False,
    rules: QualifyingRules = DEFAULT_RULES,
    now: datetime | None = None,
) -> list[StageWindow]:
    """Partition a session into at most ``rules.max_stages`` stage windows.

    A pit-exit-open signal opens a stage when none is open; further pit-exit
    or red-flag signals while a stage is open are absorbed into it, so a red
    flag restart never splits a stage. The chequered flag closes the open
    stage. A stage still open after the last signal runs until *now*.
    Closing or restart signals seen while no stage is open are ignored.
    """
    bounds: list[tuple[datetime, datetime]] = []
    open_start: datetime | None = None

    for signal in extract_signals(events, rules):
        if signal.kind is SignalKind.START:
            if open_start is None:
                open_start = signal.timestamp
        elif signal.kind is SignalKind.END:
            if open_start is not None:
                bounds.append((open_start, signal.timestamp))
                open_start = None
        # RESTART: absorbed by the open stage, ignored otherwise

    if open_start is not None:
        end = now if now is not None else utc_now()
        bounds.append((open_start, max(end, open_start)))

    prefix = rules.stage_prefix(is_sprint)
    return [
        StageWindow(name=f"{prefix}{index}", start_time=start, end_time=end)
        for index, (start, end) in enumerate(bounds[: rules.max_stages], start=1)
    ]

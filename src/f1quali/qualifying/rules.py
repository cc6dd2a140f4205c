"""Knockout qualifying rules and race-control message constants."""

from __future__ import annotations

from dataclasses import dataclass

STAGE_START_MESSAGE = "GREEN LIGHT - PIT EXIT OPEN"
STAGE_END_MESSAGE = "CHEQUERED FLAG"
RESTART_MESSAGE = "RED FLAG"

FLAG_GREEN = "GREEN"
FLAG_RED = "RED"
FLAG_CHEQUERED = "CHEQUERED"


@dataclass(frozen=True)
class QualifyingRules:
    """Tunable parameters of the stage reconstruction.

    The elimination count applies to every non-final stage regardless of
    grid size.
    """

    eliminations_per_stage: int = 5
    max_stages: int = 3
    stage_start_message: str = STAGE_START_MESSAGE
    stage_end_message: str = STAGE_END_MESSAGE
    restart_message: str = RESTART_MESSAGE
    sprint_marker: str = "Sprint"

    def stage_prefix(self, is_sprint: bool) -> str:
        return "SQ" if is_sprint else "Q"

    def is_sprint_session(self, session_name: str | None) -> bool:
        return self.sprint_marker in (session_name or "")


DEFAULT_RULES = QualifyingRules()

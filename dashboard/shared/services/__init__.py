"""Service layer: business logic for the qualifying dashboard."""

from .qualifying import GapPoint, QualifyingService, normalize_team_color

__all__ = [
    "GapPoint",
    "QualifyingService",
    "normalize_team_color",
]

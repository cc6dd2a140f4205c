"""Shared dashboard utilities."""

# --- Constants & formatting ---
from .constants import F1_RED, PLOTLY_LAYOUT_DEFAULTS
from .formatters import format_compound, format_gap, format_lap_time

# --- Data layer ---
from .data import DataSource, F1DataError, get_active_source, get_repository

# --- Service layer ---
from .services import GapPoint, QualifyingService, normalize_team_color

# --- UI components ---
from .sidebar import SessionSelection, render_session_sidebar, render_source_selector

__all__ = [
    "DataSource",
    "F1DataError",
    "F1_RED",
    "GapPoint",
    "PLOTLY_LAYOUT_DEFAULTS",
    "QualifyingService",
    "SessionSelection",
    "format_compound",
    "format_gap",
    "format_lap_time",
    "get_active_source",
    "get_repository",
    "normalize_team_color",
    "render_session_sidebar",
    "render_source_selector",
]

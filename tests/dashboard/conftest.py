"""Shared fixtures for dashboard tests."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from tests.conftest import SAMPLE_MEETING, SAMPLE_SESSION, full_field_session, three_stage_events

# ── Mock streamlit before any dashboard imports ──────────────────────────────

_mock_st = MagicMock()
_mock_st.cache_data = lambda **kw: (lambda fn: fn)  # passthrough decorator
_mock_st.cache_resource = lambda **kw: (lambda fn: fn)  # passthrough decorator
_mock_st.session_state = {"data_source": "OpenF1"}
sys.modules.setdefault("streamlit", _mock_st)

# Add dashboard to path so `shared` is importable
_dashboard_dir = str(Path(__file__).resolve().parent.parent.parent / "dashboard")
if _dashboard_dir not in sys.path:
    sys.path.insert(0, _dashboard_dir)


# ── Document export fixtures ─────────────────────────────────────────────────


def _wrap_dates(doc: dict, *keys: str) -> dict:
    """Mimic a document-store export: dates as {"$date": ...} wrappers."""
    return {**doc, **{k: {"$date": doc[k]} for k in keys if doc.get(k) is not None}}


def _with_keys(doc: dict, session_key: int = 9468, meeting_key: int = 1229) -> dict:
    return {**doc, "session_key": session_key, "meeting_key": meeting_key}


@pytest.fixture
def documents_dir(tmp_path: Path) -> Path:
    """A directory of exported collections for one 20-driver qualifying session.

    Laps are written as JSON lines, everything else as JSON arrays. A second
    session (key 9999) contributes one stray lap that must be filtered out.
    """
    drivers, laps = full_field_session(20)
    practice = {**SAMPLE_SESSION, "session_key": 9467, "session_name": "Practice 3",
                "session_type": "Practice", "date_start": "2024-03-01T12:30:00+00:00"}

    collections = {
        "meetings": [
            _wrap_dates(SAMPLE_MEETING, "date_start"),
            {**SAMPLE_MEETING, "meeting_key": 1230, "meeting_name": "Saudi Arabian Grand Prix",
             "date_start": {"$date": "2024-03-07T13:30:00Z"}},
            {**SAMPLE_MEETING, "meeting_key": 1200, "year": 2023},
        ],
        "sessions": [
            _wrap_dates(SAMPLE_SESSION, "date_start", "date_end"),
            _wrap_dates(practice, "date_start", "date_end"),
        ],
        "drivers": [_with_keys(d) for d in reversed(drivers)],
        "stints": [_with_keys({"driver_number": 1, "stint_number": 1, "lap_start": 1,
                               "lap_end": 10, "compound": "SOFT", "tyre_age_at_start": 0})],
        "race_control": [_wrap_dates(_with_keys(e), "date") for e in three_stage_events()],
    }
    for name, docs in collections.items():
        (tmp_path / f"{name}.json").write_text(json.dumps(docs), encoding="utf-8")

    lap_docs = [_wrap_dates(_with_keys(lap), "date_start") for lap in laps]
    lap_docs.append(_with_keys({"driver_number": 1, "lap_number": 99, "lap_duration": 60.0}, session_key=9999))
    (tmp_path / "laps.json").write_text(
        "\n".join(json.dumps(doc) for doc in lap_docs) + "\n", encoding="utf-8",
    )
    return tmp_path

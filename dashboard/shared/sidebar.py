"""Shared sidebar rendering for qualifying session selection."""

from __future__ import annotations

import datetime
from dataclasses import dataclass

import streamlit as st

from f1quali.models.session import is_qualifying_session

from .data import DataSource, F1DataError, F1DataRepository
from .data.source import default_source


@dataclass(frozen=True)
class SessionSelection:
    """Result of the session sidebar cascade."""

    session_key: int
    meeting_name: str
    session_name: str


def render_source_selector() -> None:
    """Radio for the data backend, stored in ``st.session_state['data_source']``."""
    sources = [s.value for s in DataSource]
    st.sidebar.radio(
        "Data source",
        sources,
        index=sources.index(default_source().value),
        key="data_source",
    )


def render_session_sidebar(repo: F1DataRepository) -> SessionSelection | None:
    """Render year/meeting/qualifying-session cascade in the sidebar.

    Returns a SessionSelection on success, or None (with st.stop()) on failure.
    """
    current_year = datetime.date.today().year
    years = list(range(current_year, 2022, -1))
    selected_year = st.sidebar.selectbox("Year", years)

    try:
        meetings = repo.get_meetings(selected_year)
    except F1DataError as exc:
        st.sidebar.error(f"Failed to load meetings: {exc}")
        st.stop()
        return None

    meeting_options = {
        m["meeting_name"]: m["meeting_key"]
        for m in meetings
        if m.get("meeting_name") and m.get("meeting_key")
    }
    if not meeting_options:
        st.sidebar.warning("No meetings found for this year.")
        st.stop()
        return None
    selected_meeting_name = st.sidebar.selectbox("Meeting", list(meeting_options.keys()))

    try:
        sessions = repo.get_sessions(meeting_options[selected_meeting_name])
    except F1DataError as exc:
        st.sidebar.error(f"Failed to load sessions: {exc}")
        st.stop()
        return None

    session_options = {
        s["session_name"]: s["session_key"]
        for s in sessions
        if s.get("session_key") and is_qualifying_session(s.get("session_name"), s.get("session_type"))
    }
    if not session_options:
        st.sidebar.warning("No qualifying sessions found for this meeting.")
        st.stop()
        return None
    selected_session_name = st.sidebar.selectbox("Session", list(session_options.keys()))

    return SessionSelection(
        session_key=session_options[selected_session_name],
        meeting_name=selected_meeting_name,
        session_name=selected_session_name,
    )

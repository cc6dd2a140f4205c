"""F1 Qualifying Dashboard: Streamlit + Plotly over OpenF1 or document exports."""

from __future__ import annotations

import plotly.graph_objects as go
import streamlit as st

from f1quali.qualifying import ErrorKind

from shared import (
    F1_RED,
    PLOTLY_LAYOUT_DEFAULTS,
    QualifyingService,
    get_repository,
    normalize_team_color,
    render_session_sidebar,
    render_source_selector,
)

# ── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="F1 Qualifying",
    page_icon="\U0001f3c1",
    layout="wide",
)


# ── Sidebar: cascading selection ────────────────────────────────────────────

st.sidebar.title("F1 Qualifying Dashboard")
render_source_selector()

repo = get_repository()
selection = render_session_sidebar(repo)
if selection is None:
    st.stop()

service = QualifyingService(repo)


# ── Reconstruct ──────────────────────────────────────────────────────────────

with st.spinner("Reconstructing qualifying..."):
    outcome = service.load(selection.session_key)

st.markdown(f"# {selection.meeting_name} — {selection.session_name}")
st.markdown(
    f'<div style="height:4px;background:{F1_RED};border-radius:2px;'
    f'margin-bottom:1rem"></div>',
    unsafe_allow_html=True,
)

if not outcome.ok:
    if outcome.error in (ErrorKind.STORAGE, ErrorKind.INVALID_DATA):
        st.error(f"Could not load session data: {outcome.detail}")
    else:
        st.warning(f"No qualifying classification available: {outcome.detail}")
    st.stop()

result = outcome.result
if len(result.stages) == 1:
    st.info(
        "Race control did not mark the stage boundaries for this session; "
        "drivers are ranked on their best lap of the whole session.",
    )


# ── Tabs ─────────────────────────────────────────────────────────────────────

tabs = st.tabs(service.stage_tab_names(outcome))

with tabs[0]:
    st.subheader("Final Grid")
    st.dataframe(service.final_grid_rows(outcome), hide_index=True, use_container_width=True)

for tab, stage in zip(tabs[1:], result.stages):
    with tab:
        st.caption(
            f"{stage.start_time:%H:%M:%S} – {stage.end_time:%H:%M:%S} UTC"
            f" | {len(stage.drivers)} drivers",
        )
        st.dataframe(service.stage_rows(stage), hide_index=True, use_container_width=True)

        points = service.gap_to_pole(stage)
        if not points:
            st.warning("No timed laps in this stage.")
            continue

        fig_gap = go.Figure(go.Bar(
            x=[p.gap for p in points],
            y=[p.name_acronym for p in points],
            orientation="h",
            marker_color=[normalize_team_color(p.team_colour, F1_RED) for p in points],
            hovertemplate="%{y}: +%{x:.3f}s<extra></extra>",
        ))
        fig_gap.update_layout(
            **PLOTLY_LAYOUT_DEFAULTS,
            xaxis_title="Gap to fastest (s)",
            yaxis=dict(autorange="reversed"),
            height=max(300, 24 * len(points)),
            showlegend=False,
        )
        st.subheader("Gap to Fastest")
        st.plotly_chart(fig_gap, use_container_width=True)

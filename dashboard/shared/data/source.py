"""Data source selection for the F1 dashboard."""

from __future__ import annotations

import os
from enum import Enum

import streamlit as st

SOURCE_ENV_VAR = "F1_DATA_SOURCE"


class DataSource(str, Enum):
    """Supported data source backends."""

    OPENF1 = "OpenF1"
    DOCUMENTS = "Documents"


def default_source() -> DataSource:
    """Source named by the F1_DATA_SOURCE environment variable, else OpenF1."""
    try:
        return DataSource(os.environ.get(SOURCE_ENV_VAR, DataSource.OPENF1.value))
    except ValueError:
        return DataSource.OPENF1


def get_active_source() -> DataSource:
    """Return the currently selected data source from session state."""
    value = st.session_state.get("data_source", default_source().value)
    try:
        return DataSource(value)
    except ValueError:
        return DataSource.OPENF1

"""Source-agnostic data fetch error."""

from __future__ import annotations

from f1quali.exceptions import DataSourceError


class F1DataError(DataSourceError):
    """Source-agnostic data fetch error. UI catches only this."""

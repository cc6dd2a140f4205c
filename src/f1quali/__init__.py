"""f1quali: qualifying reconstruction over OpenF1-shaped timing data."""

from f1quali.client import AsyncOpenF1Client, OpenF1Client
from f1quali.exceptions import (
    DataSourceError,
    OpenF1APIError,
    OpenF1ConnectionError,
    OpenF1Error,
    OpenF1TimeoutError,
    OpenF1ValidationError,
)
from f1quali.qualifying import (
    QualifyingOutcome,
    QualifyingResult,
    QualifyingRules,
    QualifyingSource,
    build_qualifying_result,
    compute_qualifying_result,
    compute_qualifying_result_async,
)

__all__ = [
    "AsyncOpenF1Client",
    "DataSourceError",
    "OpenF1APIError",
    "OpenF1Client",
    "OpenF1ConnectionError",
    "OpenF1Error",
    "OpenF1TimeoutError",
    "OpenF1ValidationError",
    "QualifyingOutcome",
    "QualifyingResult",
    "QualifyingRules",
    "QualifyingSource",
    "build_qualifying_result",
    "compute_qualifying_result",
    "compute_qualifying_result_async",
]

__version__ = "0.1.0"

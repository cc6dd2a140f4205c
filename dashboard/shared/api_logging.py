"""Call logging for the qualifying dashboard's data and service layers.

Everything goes to ``logs/api_calls.log`` next to the dashboard. The same
handler is attached to the ``f1quali`` library logger so that pipeline
warnings (skipped records, fallback timestamps, single-stage fallback) land
in the same file as the calls that triggered them.
"""

from __future__ import annotations

import functools
import logging
import os
import threading
import time
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

_LOG_DIR = os.path.join(os.path.dirname(__file__), "..", "logs")
_LOG_FILE = os.path.join(_LOG_DIR, "api_calls.log")
LIBRARY_LOGGER = "f1quali"

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def _get_logger() -> logging.Logger:
    """Return the file logger, creating log dir and handler on first use."""
    global _logger
    if _logger is not None:
        return _logger

    with _logger_lock:
        if _logger is not None:
            return _logger

        os.makedirs(_LOG_DIR, exist_ok=True)

        logger = logging.getLogger("f1_dashboard.api")
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        if not logger.handlers:
            handler = logging.FileHandler(_LOG_FILE, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"),
            )
            logger.addHandler(handler)

            library = logging.getLogger(LIBRARY_LOGGER)
            library.setLevel(logging.INFO)
            library.addHandler(handler)

        _logger = logger

    return _logger


def _arg_summary(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    # args[0] is self
    parts = [repr(a) for a in args[1:]]
    parts += [f"{k}={v!r}" for k, v in kwargs.items()]
    return ", ".join(parts)


def _result_size(result: Any) -> int:
    if result is None:
        return 0
    return len(result) if isinstance(result, list) else 1


def log_api_call(fn: F) -> F:
    """Decorator that logs data-layer method calls to the API log file."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = _get_logger()
        arg_str = _arg_summary(args, kwargs)
        logger.info("CALL: %s(%s)", fn.__qualname__, arg_str)

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.error(
                "FAIL: %s(%s) -> %s: %s (%.3fs)",
                fn.__qualname__, arg_str, type(exc).__name__, exc, elapsed,
            )
            raise

        elapsed = time.monotonic() - start
        logger.info(
            "OK: %s(%s) -> %d items (%.3fs)",
            fn.__qualname__, arg_str, _result_size(result), elapsed,
        )
        return result

    return wrapper  # type: ignore[return-value]


def log_service_call(fn: F) -> F:
    """Decorator that logs service-layer method calls to the API log file.

    Results exposing ``ok = False`` (a degraded ``QualifyingOutcome``) are
    logged at WARNING with their error kind and detail.
    """

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = _get_logger()
        arg_str = _arg_summary(args, kwargs)
        logger.info("SERVICE CALL: %s(%s)", fn.__qualname__, arg_str)

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.error(
                "SERVICE FAIL: %s -> %s: %s (%.3fs)",
                fn.__qualname__, type(exc).__name__, exc, elapsed,
            )
            raise

        elapsed = time.monotonic() - start
        if getattr(result, "ok", True) is False:
            logger.warning(
                "SERVICE DEGRADED: %s -> %s: %s (%.3fs)",
                fn.__qualname__, getattr(result, "error", None),
                getattr(result, "detail", None), elapsed,
            )
        else:
            logger.info("SERVICE OK: %s -> %.3fs", fn.__qualname__, elapsed)
        return result

    return wrapper  # type: ignore[return-value]

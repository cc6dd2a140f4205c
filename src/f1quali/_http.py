"""HTTP transport for the OpenF1 collections the qualifying pipeline reads.

Every call is a GET of one collection (``/sessions``, ``/laps``, ...)
filtered by equality on keys such as ``session_key``. The transports turn
those filters into query parameters, retry throttled or briefly unavailable
responses with exponential backoff (honouring ``Retry-After``), and decode
the body into a list of records. OpenF1 answers an empty query with
``404 {"detail": "No results found."}``; that is an empty list here, not an
error.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from f1quali.exceptions import (
    OpenF1APIError,
    OpenF1ConnectionError,
    OpenF1TimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openf1.org/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF = 0.5

RETRY_STATUSES = frozenset({429, 502, 503, 504})
NO_RESULTS_DETAIL = "No results found."

Records = list[dict[str, Any]]


def build_query_params(**filters: Any) -> list[tuple[str, str]]:
    """Turn keyword filters into (key, value) pairs, dropping None values."""
    return [(key, str(value)) for key, value in filters.items() if value is not None]


def _is_no_results(response: httpx.Response) -> bool:
    if response.status_code != 404:
        return False
    try:
        body = response.json()
    except ValueError:
        return False
    return isinstance(body, dict) and body.get("detail") == NO_RESULTS_DETAIL


def decode_records(response: httpx.Response) -> Records:
    """Return the JSON array in *response*, or raise ``OpenF1APIError``."""
    if _is_no_results(response):
        return []
    if response.status_code >= 400:
        raise OpenF1APIError(status_code=response.status_code, message=response.text)
    try:
        body = response.json()
    except ValueError as exc:
        raise OpenF1APIError(response.status_code, f"Invalid JSON body: {exc}") from exc
    if not isinstance(body, list):
        raise OpenF1APIError(
            response.status_code, f"Expected a JSON array, got {type(body).__name__}",
        )
    return body


def retry_delay(response: httpx.Response, attempt: int, backoff: float) -> float:
    """Seconds to wait before retry number *attempt* (0-based)."""
    retry_after = response.headers.get("Retry-After")
    if retry_after is not None:
        try:
            return max(float(retry_after), 0.0)
        except ValueError:
            pass
    return backoff * 2 ** attempt


def _should_retry(response: httpx.Response, attempt: int, max_retries: int) -> bool:
    return response.status_code in RETRY_STATUSES and attempt < max_retries


def _log_retry(endpoint: str, response: httpx.Response, delay: float, attempt: int, max_retries: int) -> None:
    logger.warning(
        "%s returned HTTP %d; retry %d/%d in %.2fs",
        endpoint, response.status_code, attempt + 1, max_retries, delay,
    )


class SyncTransport:
    """Synchronous transport using httpx.Client."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff: float = DEFAULT_BACKOFF,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        self._max_retries = max_retries
        self._backoff = backoff

    def _send(self, endpoint: str, params: list[tuple[str, str]]) -> httpx.Response:
        try:
            return self._client.get(endpoint, params=params)
        except httpx.ConnectError as exc:
            raise OpenF1ConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise OpenF1TimeoutError(str(exc)) from exc

    def get(self, endpoint: str, **filters: Any) -> Records:
        """Fetch the records of *endpoint* matching *filters*."""
        params = build_query_params(**filters)
        response = self._send(endpoint, params)
        attempt = 0
        while _should_retry(response, attempt, self._max_retries):
            delay = retry_delay(response, attempt, self._backoff)
            _log_retry(endpoint, response, delay, attempt, self._max_retries)
            time.sleep(delay)
            attempt += 1
            response = self._send(endpoint, params)
        return decode_records(response)

    def close(self) -> None:
        self._client.close()


class AsyncTransport:
    """Asynchronous transport using httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff: float = DEFAULT_BACKOFF,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        self._max_retries = max_retries
        self._backoff = backoff

    async def _send(self, endpoint: str, params: list[tuple[str, str]]) -> httpx.Response:
        try:
            return await self._client.get(endpoint, params=params)
        except httpx.ConnectError as exc:
            raise OpenF1ConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise OpenF1TimeoutError(str(exc)) from exc

    async def get(self, endpoint: str, **filters: Any) -> Records:
        """Fetch the records of *endpoint* matching *filters*."""
        params = build_query_params(**filters)
        response = await self._send(endpoint, params)
        attempt = 0
        while _should_retry(response, attempt, self._max_retries):
            delay = retry_delay(response, attempt, self._backoff)
            _log_retry(endpoint, response, delay, attempt, self._max_retries)
            await asyncio.sleep(delay)
            attempt += 1
            response = await self._send(endpoint, params)
        return decode_records(response)

    async def close(self) -> None:
        await self._client.aclose()

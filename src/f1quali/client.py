"""Public client classes for the OpenF1 API endpoints used by the dashboard."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import TypeAdapter

from f1quali._http import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    AsyncTransport,
    SyncTransport,
)
from f1quali.exceptions import OpenF1ValidationError
from f1quali.models.driver import Driver
from f1quali.models.lap import Lap
from f1quali.models.meeting import Meeting
from f1quali.models.race_control import RaceControl
from f1quali.models.session import Session
from f1quali.models.stint import Stint

T = TypeVar("T")


def _validate_list(model_type: type[T], data: list[dict[str, Any]]) -> list[T]:
    """Validate a list of dicts against a Pydantic model."""
    try:
        adapter = TypeAdapter(list[model_type])
        return adapter.validate_python(data)
    except Exception as exc:
        raise OpenF1ValidationError(
            f"Failed to validate {model_type.__name__} response: {exc}"
        ) from exc


class OpenF1Client:
    """Synchronous client for the OpenF1 API.

    Usage:
        with OpenF1Client() as f1:
            events = f1.race_control(session_key=9662)
            laps = f1.laps(session_key=9662)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self._transport = SyncTransport(base_url=base_url, timeout=timeout, max_retries=max_retries)

    def __enter__(self) -> OpenF1Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection."""
        self._transport.close()

    def _get(self, endpoint: str, model: type[T], **kwargs: Any) -> list[T]:
        data = self._transport.get(endpoint, **kwargs)
        return _validate_list(model, data)

    # ── Endpoints ──────────────────────────────────────────────

    def drivers(self, **kwargs: Any) -> list[Driver]:
        """Get the driver entries of a session."""
        return self._get("/drivers", Driver, **kwargs)

    def laps(self, **kwargs: Any) -> list[Lap]:
        """Get lap start times, durations and sector times."""
        return self._get("/laps", Lap, **kwargs)

    def meetings(self, **kwargs: Any) -> list[Meeting]:
        """Get Grand Prix weekends."""
        return self._get("/meetings", Meeting, **kwargs)

    def race_control(self, **kwargs: Any) -> list[RaceControl]:
        """Get race control messages (flags, pit exit, incidents)."""
        return self._get("/race_control", RaceControl, **kwargs)

    def sessions(self, **kwargs: Any) -> list[Session]:
        """Get sessions (practice, qualifying, sprint, race)."""
        return self._get("/sessions", Session, **kwargs)

    def stints(self, **kwargs: Any) -> list[Stint]:
        """Get tyre stints."""
        return self._get("/stints", Stint, **kwargs)


class AsyncOpenF1Client:
    """Asynchronous client for the OpenF1 API.

    Usage:
        async with AsyncOpenF1Client() as f1:
            events, laps = await asyncio.gather(
                f1.race_control(session_key=9662),
                f1.laps(session_key=9662),
            )
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self._transport = AsyncTransport(base_url=base_url, timeout=timeout, max_retries=max_retries)

    async def __aenter__(self) -> AsyncOpenF1Client:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP connection."""
        await self._transport.close()

    async def _get(self, endpoint: str, model: type[T], **kwargs: Any) -> list[T]:
        data = await self._transport.get(endpoint, **kwargs)
        return _validate_list(model, data)

    # ── Endpoints ──────────────────────────────────────────────

    async def drivers(self, **kwargs: Any) -> list[Driver]:
        """Get the driver entries of a session."""
        return await self._get("/drivers", Driver, **kwargs)

    async def laps(self, **kwargs: Any) -> list[Lap]:
        """Get lap start times, durations and sector times."""
        return await self._get("/laps", Lap, **kwargs)

    async def meetings(self, **kwargs: Any) -> list[Meeting]:
        """Get Grand Prix weekends."""
        return await self._get("/meetings", Meeting, **kwargs)

    async def race_control(self, **kwargs: Any) -> list[RaceControl]:
        """Get race control messages (flags, pit exit, incidents)."""
        return await self._get("/race_control", RaceControl, **kwargs)

    async def sessions(self, **kwargs: Any) -> list[Session]:
        """Get sessions (practice, qualifying, sprint, race)."""
        return await self._get("/sessions", Session, **kwargs)

    async def stints(self, **kwargs: Any) -> list[Stint]:
        """Get tyre stints."""
        return await self._get("/stints", Stint, **kwargs)

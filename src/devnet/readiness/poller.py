"""
Bounded readiness polling.

Polls are strictly sequential: one request, then either return (ready) or
sleep ``interval_seconds`` before the next. ``max_attempts`` requests are the
hard ceiling; there is no trailing sleep after the final attempt.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from ..exceptions import EndpointUnavailable, ReadinessTimeout, ShutdownRequested
from .types import ReadinessQuery

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class ReadinessPoller:
    """Polls a JSON endpoint until a predicate holds or the budget runs out."""

    def __init__(self, client: Any, sleep: SleepFunc = asyncio.sleep, stop_event: Optional[asyncio.Event] = None):
        """
        Args:
            client: Object exposing ``async get_json(url)`` (JsonHttpClient)
            sleep: Suspension used between attempts
            stop_event: Once set, no further request is made
        """
        self.client = client
        self._sleep = sleep
        self._stop_event = stop_event

    async def poll_until_ready(self, query: ReadinessQuery) -> Any:
        """
        Return the first payload for which ``query.predicate`` holds.

        Raises:
            ReadinessTimeout: After ``query.max_attempts`` unsuccessful polls
            ShutdownRequested: If ``stop_event`` is set before a request
        """
        started = time.monotonic()
        last_error = "no ready response"
        for attempt in range(1, query.max_attempts + 1):
            if self._stop_event is not None and self._stop_event.is_set():
                raise ShutdownRequested(f"Stopped waiting for {query.name} after {attempt - 1} attempt(s)")
            try:
                payload = await self.client.get_json(query.url)
            except EndpointUnavailable as exc:
                last_error = str(exc)
                logger.debug("%s not reachable yet: %s", query.name, exc)
            else:
                if query.predicate(payload):
                    logger.info("✅ %s ready after %s attempt(s)", query.name, attempt)
                    return payload
                last_error = "response not ready"

            logger.info("Waiting for %s... (attempt %s/%s)", query.name, attempt, query.max_attempts)
            if attempt < query.max_attempts:
                await self._sleep(query.interval_seconds)

        elapsed = time.monotonic() - started
        raise ReadinessTimeout(
            f"{query.name} not ready after {query.max_attempts} attempts ({elapsed:.1f}s): {last_error}",
            url=query.url,
            attempts=query.max_attempts,
        )


__all__ = ["ReadinessPoller", "SleepFunc"]

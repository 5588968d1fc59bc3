"""Bounded waiting for a remote resource to reach a terminal state."""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class ReadinessPoller:
    """Repeatedly probes a status until it is terminal or attempts run out."""

    def __init__(
        self,
        interval: float,
        max_attempts: int,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the poller.

        Args:
            interval: Seconds to wait between probes
            max_attempts: Maximum number of probes
            sleep: Awaitable sleep function (injectable for tests)
        """
        self.interval = interval
        self.max_attempts = max_attempts
        self.sleep = sleep

    async def wait(
        self,
        probe: Callable[[], Awaitable[str]],
        is_terminal: Callable[[str], bool],
    ) -> Optional[str]:
        """Probe until a terminal status is seen.

        Args:
            probe: Coroutine function returning the current status
            is_terminal: Predicate deciding whether a status ends the wait

        Returns:
            The terminal status, or None if every attempt saw a non-terminal one
        """
        for attempt in range(1, self.max_attempts + 1):
            status = await probe()
            logger.debug("index_poll", attempt=attempt, status=status)
            if is_terminal(status):
                return status
            if attempt < self.max_attempts:
                await self.sleep(self.interval)

        return None

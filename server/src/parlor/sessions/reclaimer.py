"""Background removal of stale sessions."""

import asyncio
import logging
import time
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from parlor.clock import now_seconds
from parlor.config import settings
from parlor.sessions.store import SessionStore

logger = logging.getLogger(__name__)


class SessionReclaimer:
    """
    Deletes sessions inactive for longer than a timeout, once per period.

    - Runs as a single asyncio task next to the request handlers
    - Each sweep opens its own database session from the shared pool
    - A failed sweep is logged and retried on the next period
    - The period is measured from the start of a sweep, so a slow sweep
      shortens the following sleep
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        timeout_seconds: float = settings.session_timeout_secs,
        period_seconds: float = settings.session_sweep_period_secs,
        clock: Callable[[], int] = now_seconds,
    ):
        if timeout_seconds <= 0:
            raise ValueError("The session timeout must be positive.")
        if period_seconds <= 0:
            raise ValueError("The sweep period must be positive.")
        if period_seconds > timeout_seconds:
            logger.warning(
                "Sweep period (%ss) exceeds session timeout (%ss); "
                "stale sessions may outlive the timeout",
                period_seconds,
                timeout_seconds,
            )

        self.session_factory = session_factory
        self.timeout = timeout_seconds
        self.period = period_seconds
        self._clock = clock
        self._task: asyncio.Task | None = None

    async def sweep(self, now: int | None = None) -> int:
        """Delete sessions last active before now - timeout. Returns count removed."""
        if now is None:
            now = self._clock()
        cutoff = now - self.timeout
        async with self.session_factory() as db:
            return await SessionStore(db).delete_inactive_since(cutoff)

    def remaining_sleep(self, elapsed: float) -> float:
        return max(0.0, self.period - elapsed)

    async def run(self) -> None:
        """Sweep forever. Only cancellation stops the loop."""
        while True:
            started = time.monotonic()
            try:
                deleted = await self.sweep()
                logger.debug("Session sweep removed %d sessions", deleted)
            except Exception:
                logger.exception("Error while cleaning old sessions")
            await asyncio.sleep(self.remaining_sleep(time.monotonic() - started))

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="session-reclaimer")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

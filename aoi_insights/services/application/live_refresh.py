"""
Application service: debounced "live updates" refresh.

A burst of map moves collapses into one trailing fetch: every trigger
cancels the pending call and schedules a new one after the delay.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from aoi_insights.domain.exceptions import AOIInsightsError

logger = logging.getLogger(__name__)


class LiveRefresher:
    """Delay-and-replace timer around an async refresh callback."""

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        delay_seconds: float,
        enabled: bool = False,
    ):
        self._callback = callback
        self.delay_seconds = delay_seconds
        self.enabled = enabled
        self._pending: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def trigger(self) -> bool:
        """
        Schedule a trailing refresh, replacing any pending one.

        Returns:
            True if a refresh was scheduled
        """
        if not self.enabled:
            return False
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Live refresh skipped: no running event loop")
            return False
        self.cancel()
        self._pending = loop.create_task(self._run_later())
        return True

    def cancel(self) -> None:
        """Drop the pending refresh, if any."""
        if self.pending:
            self._pending.cancel()
        self._pending = None

    async def aclose(self) -> None:
        """Cancel and wait for the pending refresh to unwind."""
        task = self._pending
        self.cancel()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _run_later(self) -> None:
        await asyncio.sleep(self.delay_seconds)
        try:
            await self._callback()
        except AOIInsightsError as e:
            logger.warning(f"Live refresh failed: {e.code} - {e.message}")
        except Exception:
            logger.exception("Live refresh failed unexpectedly")

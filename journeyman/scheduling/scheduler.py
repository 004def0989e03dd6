import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from loguru import logger

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


class RequestScheduler:
    """Runs outbound requests one at a time with a fixed pause after each.

    The pause follows every completed request, successful or not, so the
    aggregate request rate never exceeds one per ``delay_seconds`` plus
    latency. Every fetcher shares a single scheduler.
    """

    def __init__(
        self,
        delay_seconds: float,
        progress_interval: int = 20,
        sleep: SleepFunc = asyncio.sleep,
    ):
        if delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")
        if progress_interval < 1:
            raise ValueError("progress_interval must be at least 1")
        self.delay_seconds = delay_seconds
        self.progress_interval = progress_interval
        self.completed = 0
        self.failed = 0
        self.expected_total: Optional[int] = None
        self._sleep = sleep
        self._lock = asyncio.Lock()

    async def submit(self, request: Callable[[], Awaitable[T]]) -> T:
        """Awaits ``request()`` once no other request is in flight."""
        async with self._lock:
            try:
                return await request()
            except Exception:
                self.failed += 1
                raise
            finally:
                self.completed += 1
                if self.completed % self.progress_interval == 0:
                    self._report_progress()
                await self._sleep(self.delay_seconds)

    def _report_progress(self) -> None:
        if self.expected_total:
            percent = min(100.0, self.completed / self.expected_total * 100)
            logger.info(
                f"Progress: {self.completed}/{self.expected_total} requests completed ({percent:.1f}%)"
            )
        else:
            logger.info(f"Progress: {self.completed} requests completed")

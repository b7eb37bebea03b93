"""
Debounce scheduler built on APScheduler's asyncio scheduler.
"""

import asyncio
from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)

# An earlier run for the same key may still be awaiting a remote call
MAX_OVERLAPPING_RUNS = 10


class DebounceScheduler:
    """
    Trailing edge debounce keyed by an identity string.

    Scheduling a key that already has an unfired call replaces that call, so
    only the most recent one runs, delay_ms after the last schedule().
    """

    def __init__(self):
        self.scheduler: Optional[AsyncIOScheduler] = None

    def start(self) -> None:
        """Start the scheduler on the running event loop."""
        if self.scheduler is None:
            self.scheduler = AsyncIOScheduler(
                event_loop=asyncio.get_running_loop(),
                timezone=timezone.utc
            )
        if not self.scheduler.running:
            self.scheduler.start()
            logger.debug("Debounce scheduler started")

    def schedule(self, key: str, delay_ms: int, func: Callable[..., Any], *args: Any) -> None:
        """
        Run func(*args) once delay_ms has passed without another schedule() for key.

        Args:
            key: Identity of the thing being debounced
            delay_ms: Quiet period in milliseconds
            func: Plain or async callable
        """
        self.start()
        run_date = datetime.now(timezone.utc) + timedelta(milliseconds=delay_ms)
        self.scheduler.add_job(
            func=func,
            trigger=DateTrigger(run_date=run_date),
            args=list(args),
            id=key,
            name=f"debounce:{key}",
            replace_existing=True,
            misfire_grace_time=None,
            max_instances=MAX_OVERLAPPING_RUNS
        )
        logger.debug(f"Debounced '{key}' for {delay_ms}ms")

    def cancel(self, key: str) -> bool:
        """Drop the unfired call for key. Returns False if there was none."""
        if self.scheduler is None:
            return False
        try:
            self.scheduler.remove_job(key)
        except JobLookupError:
            return False
        logger.debug(f"Cancelled debounced '{key}'")
        return True

    def is_pending(self, key: str) -> bool:
        return self.scheduler is not None and self.scheduler.get_job(key) is not None

    def shutdown(self) -> None:
        """Stop the scheduler. Unfired calls are dropped."""
        if self.scheduler is not None and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.debug("Debounce scheduler stopped")

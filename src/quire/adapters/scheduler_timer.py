"""APScheduler-backed debounce timer."""

import itertools
import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)


class SchedulerDebounceTimer:
    """
    Debounce timer backed by a one-shot scheduler job.

    Implements DebounceTimer protocol. Every schedule adds a job with a
    fresh id under the timer's prefix and keeps it as the handle cancel()
    removes. A save still running from an earlier job never blocks the
    next one. With an AsyncIOScheduler the callback coroutine runs on the
    event loop.
    """

    def __init__(self, scheduler: BaseScheduler, job_id: str):
        self.scheduler = scheduler
        self.job_id = job_id
        self._counter = itertools.count(1)
        self._job: Job | None = None

    def schedule(self, delay: float, callback: Callable[[], Awaitable[None]]) -> None:
        self.cancel()
        run_date = datetime.now(timezone.utc) + timedelta(seconds=delay)
        self._job = self.scheduler.add_job(
            callback,
            DateTrigger(run_date=run_date),
            id=f"{self.job_id}-{next(self._counter)}",
            misfire_grace_time=None,
            coalesce=True,
        )
        logger.debug(f"Scheduled {self._job.id} in {delay}s")

    def cancel(self) -> None:
        job, self._job = self._job, None
        if job is None:
            return
        try:
            self.scheduler.remove_job(job.id)
        except JobLookupError:
            return
        logger.debug(f"Cancelled {job.id}")

    @property
    def pending(self) -> bool:
        if self._job is None:
            return False
        return self.scheduler.get_job(self._job.id) is not None

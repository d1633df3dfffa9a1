from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.date import DateTrigger
from loguru import logger

from matcha_watch.scheduler.jobs import CheckerJob
from matcha_watch.scheduler.policy import AbortPolicy, FailurePolicy

JOB_NAME = "Matcha Product Check"


class JobScheduler:
    """Runs the check job, then sleeps a full interval, forever.

    Each run schedules the next one with a one-shot DateTrigger at
    ``now + interval`` once the iteration has finished, so the wait is
    measured from the start of the sleep and long iterations push later runs
    back. When an iteration fails the policy decides between sleeping as
    usual and stopping; on stop the error is re-raised from ``start()``.
    """

    def __init__(
        self,
        job: CheckerJob,
        interval_minutes: int,
        policy: Optional[FailurePolicy] = None,
        scheduler: Optional[BaseScheduler] = None,
    ):
        self.job = job
        self.interval_minutes = interval_minutes
        self.policy = policy or AbortPolicy()
        self.scheduler = scheduler or BlockingScheduler()
        self.consecutive_failures = 0
        self.error: Optional[Exception] = None

    def _schedule(self, run_date: datetime) -> None:
        self.scheduler.add_job(
            self.run_once,
            DateTrigger(run_date=run_date),
            name=JOB_NAME,
            misfire_grace_time=None,
        )

    def _sleep(self) -> None:
        logger.info(f"Sleeping for {self.interval_minutes} minutes...")
        self._schedule(datetime.now() + timedelta(minutes=self.interval_minutes))

    def run_once(self) -> None:
        logger.info("Running job iteration...")
        try:
            self.job.run_iteration()
        except Exception as e:
            self.consecutive_failures += 1
            if not self.policy.should_continue(e, self.consecutive_failures):
                logger.error(f"Job iteration failed, stopping: {e}")
                self.error = e
                self.scheduler.shutdown(wait=False)
                return
            logger.error(
                f"Job iteration failed ({self.consecutive_failures} in a row), "
                f"retrying at the next run: {e}"
            )
        else:
            self.consecutive_failures = 0

        self._sleep()

    def start(self) -> None:
        """Block until the policy stops the loop, then raise its error."""
        self._schedule(datetime.now())
        logger.info(f"Scheduler started, checking every {self.interval_minutes} minutes")
        self.scheduler.start()

        if self.error is not None:
            raise self.error

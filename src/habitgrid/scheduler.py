"""Background timer that drives the day-rollover check."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from .devtools import dev_log
from .logging_config import get_logger

if TYPE_CHECKING:
    from .context import AppContext

logger = get_logger(__name__)

# Fire just after midnight so the clock has definitely moved to the new day.
MIDNIGHT_SECOND = 1


class RolloverScheduler:
    """Runs :meth:`AppContext.check_rollover` on a recurring timer.

    ``interval`` mode polls every ``ROLLOVER_INTERVAL_SECONDS``. ``midnight``
    mode uses a cron trigger that fires once just after each local midnight.
    """

    def __init__(self, ctx: AppContext):
        """Initialize the scheduler with app context.

        Args:
            ctx: Application context owning the habit store and config
        """
        self.ctx = ctx
        self.scheduler: Optional[BackgroundScheduler] = None

    @property
    def job_id(self) -> str:
        return self.ctx.config.ROLLOVER_JOB_ID

    @property
    def mode(self) -> str:
        return self.ctx.config.ROLLOVER_MODE

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    def start(self) -> None:
        """Start the background scheduler with the rollover job."""
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        self.scheduler = BackgroundScheduler()
        if self.mode == "midnight":
            self.scheduler.add_job(
                func=self._tick,
                trigger=CronTrigger(hour=0, minute=0, second=MIDNIGHT_SECOND),
                id=self.job_id,
                name="Day rollover at midnight",
                replace_existing=True,
            )
            logger.info("Scheduled rollover check at midnight")
        else:
            seconds = self.ctx.config.ROLLOVER_INTERVAL_SECONDS
            self.scheduler.add_job(
                func=self._tick,
                trigger=IntervalTrigger(seconds=seconds),
                id=self.job_id,
                name="Day rollover check",
                replace_existing=True,
            )
            logger.info("Scheduled rollover check", extra={"interval_seconds": seconds})

        self.scheduler.start()
        logger.info("Rollover scheduler started", extra={"mode": self.mode})

    def stop(self) -> None:
        """Cancel the rollover job and shut the scheduler down."""
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
            logger.info("Rollover scheduler stopped")

    def next_run_time(self) -> Optional[datetime]:
        """When the rollover job fires next, or None when not scheduled."""
        if self.scheduler is None:
            return None
        job = self.scheduler.get_job(self.job_id)
        return getattr(job, "next_run_time", None) if job is not None else None

    def _tick(self) -> None:
        try:
            self.ctx.check_rollover()
        except Exception as exc:
            logger.error(f"Rollover check failed: {exc}", exc_info=True)
            dev_log(
                self.ctx.config,
                "Rollover check failed",
                exc=exc,
                context={"job_id": self.job_id},
            )


def create_scheduler(ctx: AppContext, *, auto_start: bool = False) -> RolloverScheduler:
    """Create and optionally start a rollover scheduler.

    Args:
        ctx: Application context
        auto_start: Whether to start the scheduler immediately

    Returns:
        RolloverScheduler instance
    """
    scheduler = RolloverScheduler(ctx)
    if auto_start:
        scheduler.start()
    return scheduler

"""Background re-evaluation of spending limits."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .logging_config import get_logger
from .services import spending_limits

if TYPE_CHECKING:
    from apscheduler.schedulers.background import BackgroundScheduler

    from .context import AppContext

logger = get_logger(__name__)

JOB_ID = "evaluate_spending_limits"


class LimitScheduler:
    """Runs ``evaluate_all`` on an interval so period rollovers are picked up without writes."""

    def __init__(self, ctx: AppContext, *, minutes: Optional[int] = None):
        self.ctx = ctx
        self.minutes = minutes or ctx.config.LIMIT_EVALUATION_MINUTES
        self.scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def start(self) -> None:
        from apscheduler.schedulers.background import BackgroundScheduler
        from apscheduler.triggers.interval import IntervalTrigger

        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        self.scheduler = BackgroundScheduler(daemon=True)
        self.scheduler.add_job(
            func=self.run_once,
            trigger=IntervalTrigger(minutes=self.minutes),
            id=JOB_ID,
            name="Spending limit evaluation",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self.scheduler.start()
        logger.info("Limit scheduler started", extra={"interval_minutes": self.minutes})

    def stop(self) -> None:
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
            logger.info("Limit scheduler stopped")

    def run_once(self) -> int:
        """One evaluation pass; failures are logged so the job keeps its schedule."""

        try:
            emitted = spending_limits.evaluate_all(self.ctx)
        except Exception:
            logger.exception("Scheduled limit evaluation failed")
            return 0
        logger.info("Scheduled limit evaluation finished", extra={"notifications": emitted})
        return emitted

from __future__ import annotations

import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..observability import SWEEP_RUNS
from .flash_sale_manager import FlashSaleManager

logger = logging.getLogger(__name__)

JOB_ID = "flash_sale_sweep"


class FlashSaleSweeper:
    """Hourly background job: purge expired sales, then rebuild the banner.

    Owned by the composition root, which calls start() and stop(). Nothing
    runs at import time.
    """

    def __init__(self, manager: FlashSaleManager, interval_seconds: int = 3600):
        self.manager = manager
        self.interval_seconds = interval_seconds
        self.scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    def run_once(self) -> bool:
        """One tick. The rebuild runs even when nothing expired."""
        try:
            removed = self.manager.clean_expired_flash_sales()
            self.manager.generate_banniere_flash_sale()
        except Exception:
            SWEEP_RUNS.labels(outcome="error").inc()
            logger.exception("Flash sale sweep failed")
            return False
        SWEEP_RUNS.labels(outcome="ok").inc()
        logger.info("Flash sale sweep done removed_expired=%s", removed)
        return True

    def start(self) -> BackgroundScheduler:
        if self.running:
            return self.scheduler
        scheduler = BackgroundScheduler()
        scheduler.add_job(self.run_once, trigger=IntervalTrigger(seconds=self.interval_seconds), id=JOB_ID)
        scheduler.start()
        self.scheduler = scheduler
        logger.info("Flash sale sweeper started interval=%ss", self.interval_seconds)
        return scheduler

    def stop(self) -> None:
        if self.scheduler is None:
            return
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.scheduler = None
        logger.info("Flash sale sweeper stopped")

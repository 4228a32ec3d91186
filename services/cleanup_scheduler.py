#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Cleanup Scheduler
Nightly removal of schedules that ended longer ago than the retention period
"""

import logging
from datetime import datetime, timezone
from typing import Dict

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from dateutil.relativedelta import relativedelta

from repositories import GroupScheduleRepository, PersonalScheduleRepository

logger = logging.getLogger(__name__)

JOB_ID = 'stale_schedule_cleanup'


class CleanupScheduler:
    """Background scheduler for stale schedule cleanup"""

    def __init__(self, db_session, retention_months: int = 6):
        """
        Initialize Cleanup Scheduler

        Args:
            db_session: DatabaseSession instance
            retention_months: Schedules older than this are deleted
        """
        self.db = db_session
        self.retention_months = retention_months
        self.scheduler = None
        self.is_running = False

    def start(self):
        """Start the background scheduler"""
        if self.scheduler and self.is_running:
            logger.warning("Cleanup scheduler is already running")
            return

        self.scheduler = BackgroundScheduler(timezone=timezone.utc)
        self.scheduler.add_job(
            func=self._cleanup_job,
            trigger=CronTrigger(hour=0, minute=0, timezone=timezone.utc),
            id=JOB_ID,
            name='Stale Schedule Cleanup',
            replace_existing=True,
            max_instances=1
        )
        self.scheduler.start()
        self.is_running = True
        logger.info(f"Cleanup scheduler started - retention {self.retention_months} month(s)")

    def stop(self):
        """Stop the background scheduler"""
        if not self.scheduler or not self.is_running:
            logger.warning("Cleanup scheduler is not running")
            return

        self.scheduler.shutdown(wait=True)
        self.is_running = False
        logger.info("Cleanup scheduler stopped")

    def run_cleanup(self, now: datetime = None) -> Dict[str, int]:
        """
        Delete stale personal and group schedules.

        Single schedules are stale when they started before the cutoff,
        repeating ones when their until is before it.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            Deleted row counts per table
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - relativedelta(months=self.retention_months)

        with self.db.session_scope() as session:
            personal = PersonalScheduleRepository(session).delete_stale(cutoff)
            group = GroupScheduleRepository(session).delete_stale(cutoff)

        logger.info(f"Cleanup before {cutoff.isoformat()}: {personal} personal, {group} group schedule(s) deleted")
        return {'personal': personal, 'group': group}

    def _cleanup_job(self):
        """Called by the scheduler every night"""
        try:
            self.run_cleanup()
        except Exception as e:
            logger.error(f"Error in cleanup job: {e}", exc_info=True)

    def get_next_run_time(self):
        """Get the next scheduled run time"""
        if not self.scheduler or not self.is_running:
            return None
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None

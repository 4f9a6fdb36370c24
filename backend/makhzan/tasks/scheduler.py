"""
Scheduler for periodic alert checks and automatic backups.

Jobs are coroutines on the application's event loop, so they never run at the
same time as a request handler mutating the store.
"""
import logging
from datetime import datetime, timezone
from pathlib import Path
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from makhzan.schemas.settings import StoreSettings
from makhzan.services.alerts import AlertEvaluator
from makhzan.services.backup import BACKUP_INTERVAL_DAYS, write_backup
from makhzan.services.inventory_store import InventoryStore

logger = logging.getLogger(__name__)

ALERT_JOB_ID = "periodic_alert_check"
BACKUP_JOB_ID = "auto_backup"


class InventoryScheduler:
    def __init__(
        self,
        store: InventoryStore,
        evaluator: AlertEvaluator,
        alert_interval_minutes: int = 30,
        alert_check_enabled: bool = True,
        backup_dir: str | Path = "./backups",
    ):
        self.store = store
        self.evaluator = evaluator
        self.alert_interval_minutes = alert_interval_minutes
        self.alert_check_enabled = alert_check_enabled
        self.backup_dir = Path(backup_dir)
        self.scheduler = AsyncIOScheduler(timezone="UTC")

        # Store last run results
        self.last_alert_check = {"timestamp": None}
        self.last_backup = {"timestamp": None, "path": None}

        store.settings_changed.connect(self._on_settings_changed)

    async def run_alert_check(self):
        """Job function for the periodic alert check."""
        start_time = datetime.now(timezone.utc)
        try:
            self.evaluator.check_alerts()
            self.last_alert_check = {
                "timestamp": start_time.isoformat(),
                "duration_seconds": (datetime.now(timezone.utc) - start_time).total_seconds(),
            }
        except Exception as e:
            logger.error(f"Error in periodic alert check: {e}")
            self.last_alert_check = {
                "timestamp": start_time.isoformat(),
                "error": str(e),
            }

    async def run_backup(self):
        """Job function to write an automatic backup."""
        start_time = datetime.now(timezone.utc)
        try:
            path = write_backup(self.store, self.backup_dir, now=start_time)
            self.last_backup = {"timestamp": start_time.isoformat(), "path": str(path)}
        except OSError as e:
            logger.error(f"Error writing automatic backup: {e}")
            self.last_backup = {"timestamp": start_time.isoformat(), "path": None, "error": str(e)}

    def schedule_backup(self, settings: StoreSettings):
        """Add, move or drop the backup job to match the backup settings."""
        if settings.backup.auto_backup:
            days = BACKUP_INTERVAL_DAYS[settings.backup.backup_interval]
            self.scheduler.add_job(
                self.run_backup,
                IntervalTrigger(days=days),
                id=BACKUP_JOB_ID,
                name=f"Automatic Backup ({settings.backup.backup_interval})",
                replace_existing=True
            )
        elif self.scheduler.get_job(BACKUP_JOB_ID):
            self.scheduler.remove_job(BACKUP_JOB_ID)
            logger.info("Automatic backup disabled")

    def _on_settings_changed(self, settings: StoreSettings):
        self.schedule_backup(settings)

    def start(self):
        """Start the scheduler. Must be called with the event loop running."""
        if self.scheduler.running:
            logger.info("Scheduler already running")
            return

        if self.alert_check_enabled:
            self.scheduler.add_job(
                self.run_alert_check,
                IntervalTrigger(minutes=self.alert_interval_minutes),
                id=ALERT_JOB_ID,
                name="Periodic Alert Check",
                replace_existing=True
            )
        self.schedule_backup(self.store.settings)

        self.scheduler.start()
        logger.info("Scheduler started with jobs:")
        for job in self.scheduler.get_jobs():
            logger.info(f"  - {job.name}: {job.trigger}")

    def stop(self):
        """Stop the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")

    def status(self) -> dict:
        """Get current scheduler status."""
        jobs = []
        if self.scheduler.running:
            for job in self.scheduler.get_jobs():
                jobs.append({
                    "id": job.id,
                    "name": job.name,
                    "trigger": str(job.trigger),
                    "next_run": job.next_run_time.isoformat() if job.next_run_time else None
                })

        return {
            "running": self.scheduler.running,
            "jobs": jobs,
            "last_alert_check": self.last_alert_check,
            "last_backup": self.last_backup,
        }

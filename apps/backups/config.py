"""
Runtime configuration for the backup subsystem.
"""

from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True)
class BackupConfig:
    """
    Settings snapshot handed to the orchestrator.

    Built once at request or task entry; nothing in the subsystem reads the
    scheduler secret from module state.
    """

    storage_backend: str = "local"
    cron_secret: str = ""
    max_automatic: int = 30
    delete_grace_days: int = 7
    automatic_activity_limit: int = 1000
    parallel_reads: bool = True
    schedule_description: str = "Daily at 2:00 AM UTC"
    lock_timeout: int = 3600

    @classmethod
    def from_settings(cls):
        return cls(
            storage_backend=settings.BACKUP_STORAGE_BACKEND,
            cron_secret=settings.BACKUP_CRON_SECRET or "",
            max_automatic=int(settings.BACKUP_MAX_AUTOMATIC),
            delete_grace_days=int(settings.BACKUP_DELETE_GRACE_DAYS),
            automatic_activity_limit=int(settings.BACKUP_AUTOMATIC_ACTIVITY_LIMIT),
            parallel_reads=bool(settings.BACKUP_PARALLEL_READS),
            schedule_description=settings.BACKUP_SCHEDULE_DESCRIPTION,
            lock_timeout=int(settings.BACKUP_LOCK_TIMEOUT),
        )

    @property
    def is_scheduler_configured(self) -> bool:
        return bool(self.cron_secret)

"""
Celery tasks for the backup system.

The beat schedule in config/celery.py runs automatic_backup daily. The task
goes through the same BackupService path as the HTTP scheduler endpoint,
presenting the configured secret.
"""

import logging

from celery import shared_task

from .config import BackupConfig
from .exceptions import BackendUnavailable, BackupInProgress, SourceReadFailed, Unauthenticated
from .services import BackupService

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    name="apps.backups.tasks.automatic_backup",
    max_retries=3,
    default_retry_delay=300,  # 5 minutes
)
def automatic_backup(self):
    """
    Perform the scheduled automatic backup.

    This task:
    1. Reads every tracked kind (newest activities only)
    2. Stores the snapshot as backup_automatic_<date>_<time>.json
    3. Prunes automatic backups beyond the retention limit
    4. Records the outcome in the activity log

    Storage and read failures are retried; a running backup or restore and a
    missing scheduler secret are not.

    Returns:
        Filename of the stored backup, or None if the run was skipped
    """
    config = BackupConfig.from_settings()

    logger.info("=" * 80)
    logger.info("Starting automatic backup")
    logger.info("=" * 80)

    try:
        result = BackupService(config=config).run_automatic(config.cron_secret)
    except BackupInProgress:
        logger.warning(f"Automatic backup {self.request.id} skipped: another operation is running")
        return None
    except Unauthenticated:
        logger.error("Automatic backup skipped: BACKUP_CRON_SECRET is not configured")
        return None
    except (BackendUnavailable, SourceReadFailed) as e:
        logger.error(f"Automatic backup failed: {e.detail}", exc_info=True)
        raise self.retry(exc=e)

    logger.info(
        f"Automatic backup completed: {result.artifact.filename} "
        f"({result.artifact.size} bytes, {result.duration_ms}ms, "
        f"pruned {len(result.pruned)})"
    )
    logger.info("=" * 80)
    return result.artifact.filename

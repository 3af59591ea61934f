"""
Celery configuration for the Estommy back office.
"""

import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("estommy")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Celery Beat Schedule for periodic tasks
app.conf.beat_schedule = {
    # Daily automatic snapshot at 2:00 AM UTC (keep BACKUP_SCHEDULE_DESCRIPTION in sync)
    "daily-automatic-backup": {
        "task": "apps.backups.tasks.automatic_backup",
        "schedule": crontab(hour=2, minute=0),
        "options": {"queue": "backups", "priority": 10},
    },
}

# Task routing configuration
app.conf.task_routes = {
    "apps.backups.tasks.*": {"queue": "backups", "priority": 10},
}

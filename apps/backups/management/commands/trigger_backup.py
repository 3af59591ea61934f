"""
Management command to trigger a backup.

Used for:
- Manual backups from the server shell
- Running the automatic backup from system cron instead of Celery beat
"""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from apps.backups.config import BackupConfig
from apps.backups.exceptions import BackupError
from apps.backups.services import BackupService


class Command(BaseCommand):
    help = "Create a backup of all business data"

    def add_arguments(self, parser):
        parser.add_argument(
            "--origin",
            type=str,
            choices=["manual", "automatic"],
            default="manual",
            help="Backup origin (manual requires --user)",
        )
        parser.add_argument(
            "--user",
            type=str,
            help="Username of the administrator performing a manual backup",
        )

    def handle(self, *args, **options):
        origin = options["origin"]
        config = BackupConfig.from_settings()
        service = BackupService(config=config)

        self.stdout.write(f"Triggering {origin} backup...")

        try:
            if origin == "manual":
                username = options.get("user")
                if not username:
                    raise CommandError("--user is required for manual backups")
                try:
                    actor = get_user_model().objects.get(username=username)
                except get_user_model().DoesNotExist:
                    raise CommandError(f"User not found: {username}")
                result = service.create_manual(actor)
            else:
                result = service.run_automatic(config.cron_secret)
        except BackupError as e:
            raise CommandError(f"Backup failed: {e.detail}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Backup completed: {result.artifact.filename} ({result.artifact.size} bytes)"
            )
        )
        for key, count in result.counts.items():
            self.stdout.write(f"  {key}: {count}")
        if result.pruned:
            self.stdout.write(f"Pruned {len(result.pruned)} old automatic backups")

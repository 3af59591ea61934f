"""
Service layer for backup operations.

BackupService is the single entry point used by the API views, the Celery
task and the management command:
- Manual backups by administrators
- Automatic backups by the scheduler (shared secret)
- Restores from an uploaded document or a stored artifact
- Listing, download, export, explicit delete and scheduler status
"""

import hmac
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from django.utils import timezone

from apps.core.audit import log_activity
from apps.core.models import Activity
from apps.core.permissions import BACKUP_RESTORE, has_capability

from .config import BackupConfig
from .exceptions import BackupError, Forbidden, InvalidFormat, NotFound, Unauthenticated
from .locks import subsystem_lock
from .reader import read_all
from .restore import restore_snapshot
from .retention import ensure_deletable, prune
from .snapshot import AUTOMATIC, MANUAL, Snapshot, decode, encode, from_document
from .storage import ArtifactMeta, StorageBackend, build_filename, get_storage_backend

logger = logging.getLogger(__name__)

UPLOADED_SOURCE = "uploaded"


@dataclass
class BackupResult:
    """Outcome of a successful backup."""

    artifact: ArtifactMeta
    counts: Dict[str, int]
    duration_ms: int
    pruned: List[str] = field(default_factory=list)


def _error_message(error: Exception) -> str:
    if isinstance(error, BackupError):
        return str(error.detail)
    return str(error) or error.__class__.__name__


class BackupService:
    """Orchestrates reading, encoding, storing, pruning and restoring snapshots."""

    def __init__(
        self,
        config: Optional[BackupConfig] = None,
        backend: Optional[StorageBackend] = None,
    ):
        self.config = config or BackupConfig.from_settings()
        self.backend = backend or get_storage_backend(self.config.storage_backend)

    # Authorization

    @staticmethod
    def require_admin(actor) -> None:
        """
        Raises:
            Unauthenticated: No authenticated actor
            Forbidden: The actor's role lacks the backup capability
        """
        if actor is None or not getattr(actor, "is_authenticated", False):
            raise Unauthenticated()
        if not has_capability(actor, BACKUP_RESTORE):
            logger.warning(f"Backup access denied for user {actor.pk} (role {actor.role})")
            raise Forbidden()

    def check_scheduler_secret(self, caller_secret: Optional[str]) -> None:
        """
        Compare the caller's secret with the configured one in constant time.

        An unconfigured secret rejects every caller.

        Raises:
            Unauthenticated: On any mismatch
        """
        expected = self.config.cron_secret
        if not expected:
            logger.warning("Rejected scheduler backup attempt: BACKUP_CRON_SECRET is not set")
            raise Unauthenticated()
        if not caller_secret or not hmac.compare_digest(
            str(caller_secret).encode("utf-8"), expected.encode("utf-8")
        ):
            logger.warning("Rejected scheduler backup attempt: invalid secret")
            raise Unauthenticated()

    # Backups

    def create_manual(self, actor) -> BackupResult:
        """Create and store a backup on behalf of an administrator."""
        self.require_admin(actor)
        with subsystem_lock(self.config.lock_timeout, "manual backup"):
            return self._create(MANUAL, actor=actor)

    def run_automatic(self, caller_secret: Optional[str]) -> BackupResult:
        """Create and store a scheduler backup, then apply retention."""
        self.check_scheduler_secret(caller_secret)
        with subsystem_lock(self.config.lock_timeout, "automatic backup"):
            return self._create(AUTOMATIC)

    def _create(self, origin: str, actor=None) -> BackupResult:
        started = time.monotonic()
        logger.info(f"Starting {origin} backup")

        try:
            snapshot = read_all(
                activity_limit=(
                    self.config.automatic_activity_limit if origin == AUTOMATIC else None
                ),
                parallel=self.config.parallel_reads,
            )
            snapshot.origin = origin
            snapshot.created_at = timezone.now()
            artifact = self.backend.write(
                build_filename(origin, snapshot.created_at), encode(snapshot)
            )
        except Exception as e:
            logger.error(f"{origin.capitalize()} backup failed: {_error_message(e)}")
            self._audit(
                Activity.BACKUP,
                f"{origin.capitalize()} backup failed",
                user=actor,
                metadata={"origin": origin, "error": _error_message(e)},
            )
            raise

        pruned = []
        if origin == AUTOMATIC:
            try:
                pruned = prune(self.backend, self.config.max_automatic)
            except BackupError as e:
                # The backup itself is stored; a failed cleanup does not fail it
                logger.error(f"Retention cleanup after {artifact.filename} failed: {e.detail}")

        duration_ms = int((time.monotonic() - started) * 1000)
        counts = snapshot.counts
        metadata = {
            "origin": origin,
            "filename": artifact.filename,
            "size": artifact.size,
            "counts": counts,
        }
        if origin == AUTOMATIC:
            metadata["durationMs"] = duration_ms
            description = f"Automatic daily backup completed: {artifact.filename}"
        else:
            description = f"Manual backup created: {artifact.filename}"
        self._audit(Activity.BACKUP, description, user=actor, metadata=metadata)

        logger.info(
            f"{origin.capitalize()} backup completed in {duration_ms}ms: "
            f"{artifact.filename} ({artifact.size} bytes)"
        )
        return BackupResult(
            artifact=artifact, counts=counts, duration_ms=duration_ms, pruned=pruned
        )

    # Restore

    def restore_from(self, actor, data=None, filename: Optional[str] = None) -> Dict[str, int]:
        """
        Replace the business data with a snapshot.

        Args:
            actor: Administrator performing the restore
            data: Inline document (full envelope or bare entity map)
            filename: Name of a stored artifact, used when given

        Returns:
            Mapping of kind key to restored row count
        """
        self.require_admin(actor)
        if data is None and not filename:
            raise InvalidFormat("Provide backup data or a stored filename")

        source = filename or UPLOADED_SOURCE
        with subsystem_lock(self.config.lock_timeout, "restore"):
            try:
                snapshot = self._load_snapshot(data, filename)
                restored = restore_snapshot(snapshot)
            except Exception as e:
                self._audit(
                    Activity.RESTORE,
                    f"Restore from {source} failed",
                    user=actor,
                    metadata={"source": source, "error": _error_message(e)},
                )
                raise

        self._audit(
            Activity.RESTORE,
            f"System restored from {source}",
            user=actor,
            metadata={
                "source": source,
                "version": snapshot.format_version,
                "counts": restored,
            },
        )
        return restored

    def _load_snapshot(self, data, filename: Optional[str]) -> Snapshot:
        if filename:
            return decode(self.backend.read(filename))
        if isinstance(data, (str, bytes)):
            return decode(data)
        return from_document(data)

    # Artifacts

    def list_artifacts(self, actor) -> List[ArtifactMeta]:
        self.require_admin(actor)
        return self.backend.list()

    def download(self, actor, filename: str) -> bytes:
        self.require_admin(actor)
        return self.backend.read(filename)

    def export(self, actor) -> bytes:
        """Encode a fresh snapshot of the store without storing it."""
        self.require_admin(actor)
        snapshot = read_all(parallel=self.config.parallel_reads)
        snapshot.created_at = timezone.now()
        logger.info(f"Exported backup for user {actor.pk}: {snapshot.counts}")
        return encode(snapshot)

    def delete(self, actor, filename: str) -> ArtifactMeta:
        """
        Explicitly delete a stored artifact.

        Raises:
            NotFound: No artifact with that name
            ProtectedArtifact: Automatic artifact inside the grace window
        """
        self.require_admin(actor)
        meta = next((m for m in self.backend.list() if m.filename == filename), None)
        if meta is None:
            raise NotFound()
        ensure_deletable(meta, self.config.delete_grace_days)

        self.backend.delete(filename)
        self._audit(
            Activity.DELETE,
            f"Backup deleted: {filename}",
            user=actor,
            metadata={"filename": filename, "origin": meta.origin, "size": meta.size},
        )
        return meta

    def status(self) -> dict:
        """Summary of automatic backups for the scheduler."""
        automatic = [meta for meta in self.backend.list() if meta.is_automatic]
        last = automatic[0] if automatic else None
        return {
            "configured": self.config.is_scheduler_configured,
            "total_backups": len(automatic),
            "total_size": sum(meta.size for meta in automatic),
            "last_backup": (
                {
                    "filename": last.filename,
                    "size": last.size,
                    "created_at": last.created_at.isoformat(),
                    "age_seconds": int(last.age().total_seconds()),
                }
                if last
                else None
            ),
            "next_scheduled": self.config.schedule_description,
            "retention": f"Newest {self.config.max_automatic} automatic backups",
        }

    # Audit

    @staticmethod
    def _audit(action: str, description: str, user=None, metadata=None) -> None:
        """Write an audit record; a failure here is logged and never raised."""
        try:
            log_activity(
                action,
                Activity.SYSTEM,
                description=description,
                user=user,
                metadata=metadata,
            )
        except Exception as e:
            logger.error(f"Failed to write audit record '{description}': {e}")

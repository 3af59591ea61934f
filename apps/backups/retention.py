"""
Retention rules for stored artifacts.

prune() keeps the newest automatic artifacts up to a count ceiling.
ensure_deletable() guards explicit deletes of recent automatic artifacts.
Manual artifacts are only ever removed by an explicit delete.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from django.utils import timezone

from .exceptions import BackupError, ProtectedArtifact
from .storage import ArtifactMeta, StorageBackend, make_meta, sort_newest_first

logger = logging.getLogger(__name__)


def prune(backend: StorageBackend, max_automatic: int) -> List[str]:
    """
    Delete automatic artifacts beyond the newest ``max_automatic``.

    A failed delete is logged and the remaining artifacts are still processed.

    Returns:
        Names of the artifacts that were deleted

    Raises:
        BackendUnavailable: If the backend cannot be listed
    """
    automatic = sort_newest_first([meta for meta in backend.list() if meta.is_automatic])
    expired = automatic[max(max_automatic, 0):]
    if not expired:
        logger.debug(f"Retention: {len(automatic)} automatic backups, nothing to prune")
        return []

    deleted = []
    for meta in expired:
        try:
            backend.delete(meta.filename)
        except BackupError as e:
            logger.error(f"Retention: Failed to delete {meta.filename}: {e.detail}")
            continue
        deleted.append(meta.filename)
        logger.info(f"Retention: Deleted old backup {meta.filename}")

    logger.info(
        f"Retention: Kept {len(automatic) - len(deleted)} automatic backups, "
        f"deleted {len(deleted)} of {len(expired)} beyond the limit of {max_automatic}"
    )
    return deleted


def ensure_deletable(
    artifact,
    grace_days: int,
    now: Optional[datetime] = None,
) -> ArtifactMeta:
    """
    Reject explicit deletion of automatic artifacts younger than the grace window.

    Args:
        artifact: ArtifactMeta or artifact filename
        grace_days: Minimum age in days before an automatic artifact may be deleted
        now: Reference time (defaults to timezone.now())

    Raises:
        ProtectedArtifact: If the artifact is automatic and still inside the window
    """
    meta = artifact if isinstance(artifact, ArtifactMeta) else make_meta(artifact, 0)
    if meta.is_automatic and meta.age(now or timezone.now()) < timedelta(days=grace_days):
        logger.warning(f"Refusing to delete {meta.filename}: inside the {grace_days}-day grace period")
        raise ProtectedArtifact()
    return meta

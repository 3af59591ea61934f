"""
Restore engine: replaces the tracked business data with a snapshot's rows.

The whole replace runs in one transaction. Existing rows are deleted children
first, snapshot rows are inserted parents first, and identifiers and
timestamps are written exactly as the snapshot carries them.
"""

import logging
import time
from datetime import datetime
from typing import Dict, List

from django.db import transaction
from django.utils import timezone

from .exceptions import RestoreTransactionFailed
from .registry import TrackedKind, delete_order, restore_order
from .snapshot import Snapshot

logger = logging.getLogger(__name__)

TIMESTAMP_KEYS = ("createdAt", "updatedAt")
BATCH_SIZE = 500


def build_instances(kind: TrackedKind, rows: List[dict], fallback_timestamp: datetime) -> list:
    """
    Convert document records into unsaved model instances.

    Missing or null values fall back to the kind's legacy defaults, then to
    ``fallback_timestamp`` for createdAt/updatedAt, then to the model field's
    own default.

    Raises:
        django.core.exceptions.ValidationError: If a value cannot be converted
    """
    model = kind.model
    fields_by_attname = {f.attname: f for f in model._meta.concrete_fields}
    pairs = kind.field_map()

    instances = []
    for row in rows:
        values = {}
        for key, attname in pairs:
            model_field = fields_by_attname[attname]
            raw = row.get(key)
            if raw is None:
                if key in kind.defaults:
                    raw = kind.defaults[key]
                elif key in TIMESTAMP_KEYS:
                    raw = fallback_timestamp
                else:
                    raw = model_field.get_default()
            values[attname] = None if raw is None else model_field.to_python(raw)
        instances.append(model(**values))
    return instances


def restore_snapshot(snapshot: Snapshot) -> Dict[str, int]:
    """
    Atomically replace every restorable kind with the snapshot's rows.

    Users are neither deleted nor restored. A kind with an empty array ends up
    empty.

    Returns:
        Mapping of kind key to the number of rows inserted

    Raises:
        RestoreTransactionFailed: Any failure; the store is left unchanged
    """
    fallback_timestamp = snapshot.created_at or timezone.now()
    started = time.monotonic()
    restored: Dict[str, int] = {}
    current = None

    logger.info(
        f"Restore started: version {snapshot.format_version}, "
        f"{sum(snapshot.counts.values())} records"
    )

    try:
        with transaction.atomic():
            for kind in delete_order():
                current = kind.key
                deleted, _ = kind.model.objects.all().delete()
                logger.debug(f"Restore: Deleted {deleted} existing {kind.key}")

            for kind in restore_order():
                current = kind.key
                rows = snapshot.entities.get(kind.key) or []
                if not rows:
                    restored[kind.key] = 0
                    continue
                instances = build_instances(kind, rows, fallback_timestamp)
                kind.model.objects.bulk_create(instances, batch_size=BATCH_SIZE)
                restored[kind.key] = len(instances)
                logger.debug(f"Restore: Inserted {len(instances)} {kind.key}")
            current = None
    except Exception as e:
        where = f" while restoring {current}" if current else " on commit"
        logger.error(f"Restore rolled back{where}: {e}")
        raise RestoreTransactionFailed() from e

    duration_ms = int((time.monotonic() - started) * 1000)
    logger.info(f"Restore completed in {duration_ms}ms: {restored}")
    return restored

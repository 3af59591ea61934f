"""
Entity reader: loads every tracked kind from the store.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from django.db import close_old_connections, connections

from .exceptions import SourceReadFailed
from .registry import TRACKED_KINDS, TrackedKind
from .snapshot import Snapshot

logger = logging.getLogger(__name__)


def read_kind(kind: TrackedKind, limit: Optional[int] = None) -> List[dict]:
    """
    Read all rows of one kind as document records.

    Rows come back oldest first. With a limit, only the newest ``limit`` rows
    are kept (still oldest first).
    """
    pairs = kind.field_map()
    attnames = [attname for _, attname in pairs]
    queryset = kind.model.objects.all()

    order_field = "date_joined" if kind.key == "users" else "created_at"
    if limit is not None:
        newest = queryset.order_by(f"-{order_field}", "-pk").values(*attnames)[:limit]
        values = list(reversed(list(newest)))
    else:
        values = list(queryset.order_by(order_field, "pk").values(*attnames))

    return [{key: row[attname] for key, attname in pairs} for row in values]


def _read_in_worker(kind: TrackedKind, limit: Optional[int]) -> List[dict]:
    # Worker threads get their own connections; close them when done
    try:
        return read_kind(kind, limit)
    finally:
        connections.close_all()


def read_all(activity_limit: Optional[int] = None, parallel: bool = True) -> Snapshot:
    """
    Read every tracked kind into a Snapshot.

    The caller fills in origin and created_at. A failure on any kind aborts the
    whole read.

    Args:
        activity_limit: Keep only the newest N activity rows (None keeps all)
        parallel: Run the reads on a thread pool

    Raises:
        SourceReadFailed: Naming the kind whose read failed
    """
    limits = {kind.key: activity_limit if kind.key == "activities" else None for kind in TRACKED_KINDS}
    entities: Dict[str, List[dict]] = {}

    if parallel:
        close_old_connections()
        with ThreadPoolExecutor(max_workers=len(TRACKED_KINDS)) as executor:
            futures = {
                kind.key: executor.submit(_read_in_worker, kind, limits[kind.key])
                for kind in TRACKED_KINDS
            }
            for key, future in futures.items():
                try:
                    entities[key] = future.result()
                except Exception as e:
                    logger.error(f"Failed to read {key} for backup: {e}")
                    raise SourceReadFailed(f"Failed to read {key} for backup") from e
    else:
        for kind in TRACKED_KINDS:
            try:
                entities[kind.key] = read_kind(kind, limits[kind.key])
            except Exception as e:
                logger.error(f"Failed to read {kind.key} for backup: {e}")
                raise SourceReadFailed(f"Failed to read {kind.key} for backup") from e

    logger.debug(f"Read {sum(len(rows) for rows in entities.values())} rows for backup")
    return Snapshot(entities=entities)

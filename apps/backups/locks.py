"""
Single-slot advisory lock shared by backup creation and restore.
"""

import logging
import uuid
from contextlib import contextmanager

from django.core.cache import cache

from django_redis import get_redis_connection

from .exceptions import BackupInProgress

logger = logging.getLogger(__name__)

LOCK_KEY = "backup-subsystem"

# Delete the key only while it still holds our token
RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


def _redis_connection():
    """Raw Redis client behind the default cache, or None for other cache backends."""
    try:
        return get_redis_connection("default")
    except NotImplementedError:
        return None


def _acquire(redis_conn, key, token, timeout) -> bool:
    if redis_conn is not None:
        return bool(redis_conn.set(key, token, ex=timeout, nx=True))
    return cache.add(LOCK_KEY, token, timeout=timeout)


def _release(redis_conn, key, token) -> bool:
    if redis_conn is not None:
        return bool(redis_conn.eval(RELEASE_SCRIPT, 1, key, token))
    # Non-Redis caches (local memory in tests) have no compare-and-delete;
    # the get/delete pair is not atomic across processes
    if cache.get(LOCK_KEY) == token:
        cache.delete(LOCK_KEY)
        return True
    return False


@contextmanager
def subsystem_lock(timeout: int = 3600, operation: str = "backup"):
    """
    Hold the backup subsystem lock for the duration of the block.

    On django-redis the lock is a SET NX EX on the raw connection and is released
    with a compare-and-delete script, so an expired lock that another worker has
    since taken is never removed. Other cache backends fall back to cache.add.
    The lock expires after ``timeout`` seconds, so a crashed worker cannot hold
    it forever.

    Raises:
        BackupInProgress: If another operation holds the lock
    """
    token = uuid.uuid4().hex
    redis_conn = _redis_connection()
    key = cache.make_key(LOCK_KEY)

    if not _acquire(redis_conn, key, token, timeout):
        logger.warning(f"Cannot start {operation}: another backup or restore is running")
        raise BackupInProgress()

    logger.debug(f"Acquired backup lock for {operation}")
    try:
        yield token
    finally:
        try:
            if _release(redis_conn, key, token):
                logger.debug(f"Released backup lock for {operation}")
            else:
                logger.warning(f"Backup lock for {operation} expired before release")
        except Exception as lock_error:
            logger.warning(f"Failed to release backup lock: {lock_error}")

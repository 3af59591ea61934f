"""
Tests for the backup subsystem lock.
"""

from unittest.mock import Mock, patch

from django.core.cache import cache

import pytest

from apps.backups.exceptions import BackupInProgress
from apps.backups.locks import LOCK_KEY, RELEASE_SCRIPT, subsystem_lock


class TestRedisLock:
    """Lock operations against a django-redis connection."""

    def test_acquire_and_release_use_set_nx_and_compare_and_delete(self):
        redis_conn = Mock()
        redis_conn.set.return_value = True
        redis_conn.eval.return_value = 1
        key = cache.make_key(LOCK_KEY)

        with patch("apps.backups.locks._redis_connection", return_value=redis_conn):
            with subsystem_lock(timeout=120) as token:
                redis_conn.set.assert_called_once_with(key, token, ex=120, nx=True)
                redis_conn.eval.assert_not_called()

        redis_conn.eval.assert_called_once_with(RELEASE_SCRIPT, 1, key, token)

    def test_contended_lock_is_not_released(self):
        redis_conn = Mock()
        redis_conn.set.return_value = None

        with patch("apps.backups.locks._redis_connection", return_value=redis_conn):
            with pytest.raises(BackupInProgress):
                with subsystem_lock():
                    pass

        redis_conn.eval.assert_not_called()

    def test_expired_lock_is_reported(self, caplog):
        redis_conn = Mock()
        redis_conn.set.return_value = True
        redis_conn.eval.return_value = 0

        with patch("apps.backups.locks._redis_connection", return_value=redis_conn):
            with subsystem_lock(operation="restore"):
                pass

        assert "Backup lock for restore expired before release" in caplog.text


class TestCacheLock:
    """Fallback for non-Redis caches (local memory under test settings)."""

    def test_lock_is_held_inside_the_block(self):
        with subsystem_lock() as token:
            assert cache.get(LOCK_KEY) == token
            with pytest.raises(BackupInProgress):
                with subsystem_lock():
                    pass
        assert cache.get(LOCK_KEY) is None

    def test_lock_taken_over_after_expiry_is_kept(self):
        with subsystem_lock():
            # Our lock expired and another worker took the slot
            cache.set(LOCK_KEY, "other-worker", timeout=60)

        assert cache.get(LOCK_KEY) == "other-worker"

    def test_release_errors_are_logged(self, caplog):
        with patch("apps.backups.locks.cache.delete", side_effect=ConnectionError("down")):
            with subsystem_lock():
                pass

        assert "Failed to release backup lock" in caplog.text

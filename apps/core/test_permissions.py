"""
Tests for role capabilities and the backup permission class.
"""

from django.contrib.auth.models import AnonymousUser

import pytest
from rest_framework.test import APIRequestFactory

from apps.core.permissions import (
    BACKUP_RESTORE,
    ROLE_CAPABILITIES,
    CanBackupRestore,
    has_capability,
)


@pytest.mark.django_db
class TestCapabilities:
    def test_admin_holds_backup_capability(self, admin_user):
        assert has_capability(admin_user, BACKUP_RESTORE)

    def test_only_admins_hold_backup_capability(self):
        assert ROLE_CAPABILITIES == {"ADMIN": {BACKUP_RESTORE}, "MANAGER": set(), "USER": set()}

    def test_manager_cannot_restore(self, manager_user):
        assert not has_capability(manager_user, BACKUP_RESTORE)

    def test_user_has_no_capabilities(self, regular_user):
        assert not has_capability(regular_user, BACKUP_RESTORE)

    def test_anonymous_and_missing_users(self):
        assert not has_capability(None, BACKUP_RESTORE)
        assert not has_capability(AnonymousUser(), BACKUP_RESTORE)

    def test_unknown_role(self, regular_user):
        regular_user.role = "AUDITOR"
        assert not has_capability(regular_user, BACKUP_RESTORE)


@pytest.mark.django_db
class TestCanBackupRestore:
    def _request(self, user):
        request = APIRequestFactory().get("/api/backup/")
        request.user = user
        return request

    def test_admin_allowed(self, admin_user):
        assert CanBackupRestore().has_permission(self._request(admin_user), None)

    def test_others_denied(self, manager_user, regular_user):
        for user in (manager_user, regular_user, AnonymousUser()):
            assert not CanBackupRestore().has_permission(self._request(user), None)

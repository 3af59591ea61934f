"""
Role-based capabilities and DRF permission classes.
"""

from rest_framework import permissions

# Capabilities
BACKUP_RESTORE = "BACKUP_RESTORE"

ROLE_CAPABILITIES = {
    "ADMIN": {BACKUP_RESTORE},
    "MANAGER": set(),
    "USER": set(),
}


def has_capability(user, capability):
    """Check whether an authenticated user's role grants a capability."""
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    return capability in ROLE_CAPABILITIES.get(getattr(user, "role", None), set())


class CanBackupRestore(permissions.BasePermission):
    """
    Permission class for the backup/restore administration endpoints.

    Unauthenticated requests are rejected by DRF as 401, authenticated users
    without the capability get 403.
    """

    message = "Forbidden: Admin access required"

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        return has_capability(request.user, BACKUP_RESTORE)

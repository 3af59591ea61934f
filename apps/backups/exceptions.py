"""
Error taxonomy for the backup subsystem.

Every error is a DRF APIException, so views can let them propagate and DRF
renders {"detail": <message>} with the matching status code.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class BackupError(APIException):
    """Base class for backup subsystem errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Backup operation failed"
    default_code = "backup_error"


class Unauthenticated(BackupError):
    """Missing or invalid credentials or scheduler secret."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"
    default_code = "unauthenticated"


class Forbidden(BackupError):
    """Authenticated, but the role lacks the backup capability."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden: Admin access required"
    default_code = "forbidden"


class InvalidFormat(BackupError):
    """Document failed the minimum viability check."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid backup file format"
    default_code = "invalid_format"


class NotFound(BackupError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Backup file not found"
    default_code = "not_found"


class ArtifactExists(BackupError):
    """A stored artifact with the same name already exists."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "A backup with this name already exists"
    default_code = "artifact_exists"


class ProtectedArtifact(BackupError):
    """Explicit delete of an automatic artifact inside the grace window."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Automatic backups cannot be deleted during the grace period"
    default_code = "protected_artifact"


class SourceReadFailed(BackupError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Failed to read data for backup"
    default_code = "source_read_failed"


class BackendUnavailable(BackupError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Backup storage is unavailable"
    default_code = "backend_unavailable"


class RestoreTransactionFailed(BackupError):
    """The atomic replace aborted and the store was rolled back."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Critical system restoration failed"
    default_code = "restore_failed"


class BackupInProgress(BackupError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Another backup or restore is already running"
    default_code = "backup_in_progress"

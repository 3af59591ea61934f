"""
Storage backends for backup artifacts.

Two interchangeable backends implement the same interface:
1. LocalStorage - a directory on the local filesystem
2. CloudStorage - a bucket on an S3-compatible object store

All backends implement list, write, read and delete, name artifacts with the
same convention and report failures as NotFound or BackendUnavailable.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone as dt_timezone
from pathlib import Path
from typing import List, Optional, Tuple

from django.conf import settings
from django.utils import timezone

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import ArtifactExists, BackendUnavailable, NotFound
from .snapshot import AUTOMATIC, MANUAL

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "backup_"
FILENAME_PATTERN = re.compile(
    r"^backup_(?P<origin>manual|automatic|auto)_"
    r"(?P<date>\d{4}-\d{2}-\d{2})_(?P<time>\d{2}-\d{2}-\d{2})\.json$"
)
# Older scheduler artifacts are named backup_auto_...
ORIGIN_ALIASES = {"auto": AUTOMATIC}


@dataclass(frozen=True)
class ArtifactMeta:
    """Listing entry for one stored artifact."""

    filename: str
    size: int
    created_at: datetime
    origin: str

    @property
    def is_automatic(self) -> bool:
        return self.origin == AUTOMATIC

    def age(self, now: Optional[datetime] = None):
        return (now or timezone.now()) - self.created_at


def build_filename(origin: str, when: Optional[datetime] = None) -> str:
    """
    Generate the artifact name for a snapshot.

    Example: backup_manual_2024-05-01_14-03-59.json (UTC)
    """
    if origin not in (MANUAL, AUTOMATIC):
        raise ValueError(f"Unknown backup origin: {origin}")
    when = (when or timezone.now()).astimezone(dt_timezone.utc)
    return f"{FILENAME_PREFIX}{origin}_{when:%Y-%m-%d}_{when:%H-%M-%S}.json"


def parse_filename(filename: str) -> Optional[Tuple[str, datetime]]:
    """
    Recover (origin, UTC creation time) from an artifact name.

    Returns None for names outside the convention.
    """
    match = FILENAME_PATTERN.match(filename)
    if not match:
        return None
    origin = ORIGIN_ALIASES.get(match.group("origin"), match.group("origin"))
    try:
        created = datetime.strptime(
            f"{match.group('date')} {match.group('time')}", "%Y-%m-%d %H-%M-%S"
        )
    except ValueError:
        return None
    return origin, created.replace(tzinfo=dt_timezone.utc)


def is_artifact_name(filename: str) -> bool:
    return parse_filename(filename) is not None


def make_meta(filename: str, size: int, fallback_created: Optional[datetime] = None):
    """
    Build an ArtifactMeta, taking origin and time from the name.

    The backend's own timestamp is only used when the name carries none.
    """
    parsed = parse_filename(filename)
    if parsed is not None:
        origin, created_at = parsed
    else:
        origin, created_at = MANUAL, fallback_created or timezone.now()
    return ArtifactMeta(filename=filename, size=size, created_at=created_at, origin=origin)


def sort_newest_first(artifacts: List[ArtifactMeta]) -> List[ArtifactMeta]:
    return sorted(artifacts, key=lambda meta: (meta.created_at, meta.filename), reverse=True)


class StorageBackend:
    """Base class for storage backends."""

    name = "base"

    def list(self, prefix: str = FILENAME_PREFIX) -> List[ArtifactMeta]:
        """
        List stored artifacts, newest first.

        Args:
            prefix: Only names starting with this prefix are considered

        Raises:
            BackendUnavailable: If the backend cannot be reached
        """
        raise NotImplementedError

    def write(self, filename: str, data: bytes) -> ArtifactMeta:
        """
        Store a new artifact. Existing artifacts are never overwritten.

        Raises:
            ArtifactExists: If the name is already taken
            BackendUnavailable: If the write fails
        """
        raise NotImplementedError

    def read(self, filename: str) -> bytes:
        """
        Return an artifact's bytes.

        Raises:
            NotFound: If no such artifact exists
            BackendUnavailable: If the read fails
        """
        raise NotImplementedError

    def delete(self, filename: str) -> None:
        """
        Delete an artifact.

        Raises:
            NotFound: If no such artifact exists
            BackendUnavailable: If the delete fails
        """
        raise NotImplementedError

    def _check_name(self, filename: str) -> None:
        # Anything outside the naming convention (including paths) cannot exist
        if not filename or not is_artifact_name(filename):
            raise NotFound()


class LocalStorage(StorageBackend):
    """
    Local filesystem storage backend.

    The directory is created on the first write, so listing an unused
    deployment returns an empty list instead of failing.
    """

    name = "local"

    def __init__(self, base_path: Optional[str] = None):
        self.base_path = Path(base_path or settings.BACKUP_LOCAL_PATH)
        logger.debug(f"LocalStorage initialized with base_path: {self.base_path}")

    def _get_full_path(self, filename: str) -> Path:
        return self.base_path / filename

    def list(self, prefix: str = FILENAME_PREFIX) -> List[ArtifactMeta]:
        if not self.base_path.exists():
            return []
        try:
            artifacts = []
            for path in self.base_path.iterdir():
                if not path.is_file() or not path.name.startswith(prefix):
                    continue
                if not is_artifact_name(path.name):
                    continue
                stat = path.stat()
                modified = datetime.fromtimestamp(stat.st_mtime, tz=dt_timezone.utc)
                artifacts.append(make_meta(path.name, stat.st_size, modified))
        except OSError as e:
            logger.error(f"LocalStorage: Failed to list {self.base_path}: {e}")
            raise BackendUnavailable(f"Local backup directory is unavailable: {e}") from e
        return sort_newest_first(artifacts)

    def write(self, filename: str, data: bytes) -> ArtifactMeta:
        if not is_artifact_name(filename):
            raise ValueError(f"Invalid backup filename: {filename}")
        destination = self._get_full_path(filename)
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            with open(destination, "xb") as f:
                f.write(data)
        except FileExistsError as e:
            raise ArtifactExists() from e
        except OSError as e:
            logger.error(f"LocalStorage: Failed to write {destination}: {e}")
            raise BackendUnavailable(f"Failed to write backup to local storage: {e}") from e

        logger.info(f"LocalStorage: Wrote {destination} ({len(data)} bytes)")
        return make_meta(filename, len(data))

    def read(self, filename: str) -> bytes:
        self._check_name(filename)
        path = self._get_full_path(filename)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise NotFound() from e
        except OSError as e:
            logger.error(f"LocalStorage: Failed to read {path}: {e}")
            raise BackendUnavailable(f"Failed to read backup from local storage: {e}") from e

    def delete(self, filename: str) -> None:
        self._check_name(filename)
        path = self._get_full_path(filename)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFound() from e
        except OSError as e:
            logger.error(f"LocalStorage: Failed to delete {path}: {e}")
            raise BackendUnavailable(f"Failed to delete backup from local storage: {e}") from e
        logger.info(f"LocalStorage: Deleted {path}")


class CloudStorage(StorageBackend):
    """
    S3-compatible object storage backend (AWS S3, Cloudflare R2, MinIO).

    The bucket is provisioned on first use: private, with every form of public
    access blocked. Objects larger than max_object_bytes are refused before
    upload.
    """

    name = "cloud"

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        region_name: Optional[str] = None,
        max_object_bytes: Optional[int] = None,
    ):
        """
        Initialize the cloud storage backend.

        Args:
            bucket_name: Bucket name (defaults to settings.BACKUP_CLOUD_BUCKET)
            endpoint_url: S3-compatible endpoint (defaults to settings.BACKUP_CLOUD_ENDPOINT_URL)
            access_key_id: Access key (defaults to settings.BACKUP_CLOUD_ACCESS_KEY_ID)
            secret_access_key: Secret key (defaults to settings.BACKUP_CLOUD_SECRET_ACCESS_KEY)
            region_name: Region (defaults to settings.BACKUP_CLOUD_REGION)
            max_object_bytes: Largest accepted artifact
                (defaults to settings.BACKUP_CLOUD_MAX_OBJECT_BYTES)
        """
        self.bucket_name = bucket_name or settings.BACKUP_CLOUD_BUCKET
        self.endpoint_url = endpoint_url or settings.BACKUP_CLOUD_ENDPOINT_URL or None
        self.region_name = region_name or settings.BACKUP_CLOUD_REGION
        self.max_object_bytes = max_object_bytes or settings.BACKUP_CLOUD_MAX_OBJECT_BYTES
        self._bucket_ready = False

        self.client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=access_key_id or settings.BACKUP_CLOUD_ACCESS_KEY_ID or None,
            aws_secret_access_key=(
                secret_access_key or settings.BACKUP_CLOUD_SECRET_ACCESS_KEY or None
            ),
            region_name=self.region_name,
            config=Config(signature_version="s3v4", retries={"max_attempts": 3}),
        )

        logger.debug(f"CloudStorage initialized with bucket: {self.bucket_name}")

    @staticmethod
    def _error_code(error: ClientError) -> str:
        return str(error.response.get("Error", {}).get("Code", ""))

    def _ensure_bucket(self) -> None:
        """Create the bucket if it does not exist yet."""
        if self._bucket_ready:
            return
        try:
            self.client.head_bucket(Bucket=self.bucket_name)
        except ClientError as e:
            if self._error_code(e) not in ("404", "NoSuchBucket", "NotFound"):
                logger.error(f"CloudStorage: Cannot access bucket {self.bucket_name}: {e}")
                raise BackendUnavailable(f"Cannot access bucket {self.bucket_name}") from e
            self._create_bucket()
        except BotoCoreError as e:
            logger.error(f"CloudStorage: Cannot reach object store: {e}")
            raise BackendUnavailable("Cannot reach the backup object store") from e
        self._bucket_ready = True

    def _create_bucket(self) -> None:
        try:
            self.client.create_bucket(Bucket=self.bucket_name)
            self.client.put_public_access_block(
                Bucket=self.bucket_name,
                PublicAccessBlockConfiguration={
                    "BlockPublicAcls": True,
                    "IgnorePublicAcls": True,
                    "BlockPublicPolicy": True,
                    "RestrictPublicBuckets": True,
                },
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"CloudStorage: Failed to create bucket {self.bucket_name}: {e}")
            raise BackendUnavailable(f"Failed to create bucket {self.bucket_name}") from e
        logger.info(f"CloudStorage: Created private bucket {self.bucket_name}")

    def _exists(self, filename: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket_name, Key=filename)
            return True
        except ClientError as e:
            if self._error_code(e) in ("404", "NoSuchKey", "NotFound"):
                return False
            raise

    def list(self, prefix: str = FILENAME_PREFIX) -> List[ArtifactMeta]:
        self._ensure_bucket()
        artifacts = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
                for obj in page.get("Contents", []):
                    if not is_artifact_name(obj["Key"]):
                        continue
                    artifacts.append(make_meta(obj["Key"], obj["Size"], obj.get("LastModified")))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"CloudStorage: Failed to list {self.bucket_name}: {e}")
            raise BackendUnavailable(f"Failed to list bucket {self.bucket_name}") from e
        return sort_newest_first(artifacts)

    def write(self, filename: str, data: bytes) -> ArtifactMeta:
        if not is_artifact_name(filename):
            raise ValueError(f"Invalid backup filename: {filename}")
        if len(data) > self.max_object_bytes:
            logger.error(
                f"CloudStorage: {filename} is {len(data)} bytes, "
                f"limit is {self.max_object_bytes}"
            )
            raise BackendUnavailable("Backup exceeds the maximum object size")

        self._ensure_bucket()
        try:
            if self._exists(filename):
                raise ArtifactExists()
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=filename,
                Body=data,
                ContentType="application/json",
                Metadata={"uploaded-from": "estommy-backup-system"},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"CloudStorage: Failed to upload {filename}: {e}")
            raise BackendUnavailable(f"Failed to upload {filename}") from e

        logger.info(f"CloudStorage: Uploaded {filename} ({len(data)} bytes)")
        return make_meta(filename, len(data))

    def read(self, filename: str) -> bytes:
        self._check_name(filename)
        self._ensure_bucket()
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=filename)
            return response["Body"].read()
        except ClientError as e:
            if self._error_code(e) in ("404", "NoSuchKey", "NotFound"):
                raise NotFound() from e
            logger.error(f"CloudStorage: Failed to download {filename}: {e}")
            raise BackendUnavailable(f"Failed to download {filename}") from e
        except BotoCoreError as e:
            logger.error(f"CloudStorage: Failed to download {filename}: {e}")
            raise BackendUnavailable(f"Failed to download {filename}") from e

    def delete(self, filename: str) -> None:
        self._check_name(filename)
        self._ensure_bucket()
        try:
            # delete_object succeeds for missing keys, so check first
            if not self._exists(filename):
                raise NotFound()
            self.client.delete_object(Bucket=self.bucket_name, Key=filename)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"CloudStorage: Failed to delete {filename}: {e}")
            raise BackendUnavailable(f"Failed to delete {filename}") from e
        logger.info(f"CloudStorage: Deleted {filename}")


def get_storage_backend(backend_type: Optional[str] = None) -> StorageBackend:
    """
    Factory function to get the configured storage backend.

    Args:
        backend_type: 'local' or 'cloud' (defaults to settings.BACKUP_STORAGE_BACKEND)

    Raises:
        ValueError: If backend_type is not recognized
    """
    backend_type = (backend_type or settings.BACKUP_STORAGE_BACKEND).lower()

    if backend_type == "local":
        return LocalStorage()
    elif backend_type == "cloud":
        return CloudStorage()
    else:
        raise ValueError(f"Unknown storage backend type: {backend_type}")

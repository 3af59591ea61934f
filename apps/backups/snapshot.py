"""
Snapshot document codec.

Wire format (shared with every stored artifact):

    {
        "version": "1.2",
        "timestamp": "2024-05-01T02:00:00.000Z",
        "type": "automatic",          # only for scheduler snapshots
        "stats": {"products": 3, ...},
        "data": {"products": [...], "customers": [...], ...}
    }
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone as dt_timezone
from decimal import Decimal
from typing import Dict, List, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .exceptions import InvalidFormat
from .registry import REQUIRED_KEYS, kind_keys

logger = logging.getLogger(__name__)

CURRENT_VERSION = "1.2"
KNOWN_VERSIONS = ("1.0", "1.1", "1.2")

MANUAL = "manual"
AUTOMATIC = "automatic"
ORIGINS = (MANUAL, AUTOMATIC)


@dataclass
class Snapshot:
    """A full copy of every tracked kind at one point in time."""

    entities: Dict[str, List[dict]]
    created_at: Optional[datetime] = None
    origin: str = MANUAL
    format_version: Optional[str] = CURRENT_VERSION

    @property
    def counts(self) -> Dict[str, int]:
        return {key: len(rows) for key, rows in self.entities.items()}

    @property
    def version_recognized(self) -> bool:
        return self.format_version in KNOWN_VERSIONS


class SnapshotJSONEncoder(DjangoJSONEncoder):
    """
    Keeps numbers numeric and timestamps at full precision.

    DjangoJSONEncoder writes Decimals as strings and truncates datetimes to
    milliseconds; restored rows must keep their exact timestamps.
    """

    def default(self, o):
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, datetime):
            value = o.isoformat()
            if value.endswith("+00:00"):
                value = value[:-6] + "Z"
            return value
        return super().default(o)


def to_document(snapshot: Snapshot) -> dict:
    """Build the wire document for a snapshot."""
    document = {
        "version": snapshot.format_version or CURRENT_VERSION,
        "timestamp": snapshot.created_at or timezone.now(),
    }
    if snapshot.origin == AUTOMATIC:
        document["type"] = AUTOMATIC
    document["stats"] = snapshot.counts
    document["data"] = snapshot.entities
    return document


def encode(snapshot: Snapshot) -> bytes:
    return json.dumps(to_document(snapshot), cls=SnapshotJSONEncoder, indent=2).encode("utf-8")


def decode(raw: bytes) -> Snapshot:
    """
    Parse stored bytes into a validated Snapshot.

    Raises:
        InvalidFormat: Not JSON, not an object, or fails validation
    """
    try:
        document = json.loads(raw)
    except (TypeError, ValueError, UnicodeDecodeError) as e:
        raise InvalidFormat() from e
    return from_document(document)


def from_document(document) -> Snapshot:
    """
    Validate a parsed document.

    Accepts a full envelope or a bare entity map (older clients post only the
    "data" object). Kinds missing from the document are filled with empty
    arrays; unknown versions are accepted and logged.

    Raises:
        InvalidFormat: products or customers missing, or a kind is not an array
    """
    if not isinstance(document, dict):
        raise InvalidFormat()

    if isinstance(document.get("data"), dict):
        data = document["data"]
        version = document.get("version")
        timestamp = _parse_timestamp(document.get("timestamp"))
        origin = AUTOMATIC if document.get("type") == AUTOMATIC else MANUAL
    else:
        data = document
        version = None
        timestamp = None
        origin = MANUAL

    for key in REQUIRED_KEYS:
        if not isinstance(data.get(key), list):
            logger.warning(f"Rejecting backup document: '{key}' is missing or not a list")
            raise InvalidFormat()

    entities = {}
    missing = []
    for key in kind_keys():
        rows = data.get(key)
        if rows is None:
            missing.append(key)
            rows = []
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            logger.warning(f"Rejecting backup document: '{key}' is not a list of records")
            raise InvalidFormat()
        entities[key] = rows

    if missing:
        logger.info(f"Backup document has no data for: {', '.join(missing)}")

    snapshot = Snapshot(
        entities=entities,
        created_at=timestamp,
        origin=origin,
        format_version=version,
    )
    if not snapshot.version_recognized:
        logger.warning(f"Backup document has unrecognized version {version!r}; accepting it")
    return snapshot


def _parse_timestamp(value) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        parsed = parse_datetime(value)
    except ValueError:
        return None
    if parsed is not None and timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed

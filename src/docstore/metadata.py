"""System fields stamped onto documents before every write."""

from __future__ import annotations

import os
import time
import uuid
from datetime import datetime, timezone
from typing import Any

ID = "id"
ENTITY_NAME = "entityName"
CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"

SYSTEM_FIELDS = (ID, ENTITY_NAME, CREATED_AT, UPDATED_AT)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def new_entity_id() -> str:
    """Generate a time-ordered identifier (UUID version 7)."""
    unix_ms = time.time_ns() // 1_000_000
    value = (unix_ms & 0xFFFF_FFFF_FFFF) << 80 | int.from_bytes(os.urandom(10), "big")
    value = (value & ~(0xF << 76)) | (0x7 << 76)
    value = (value & ~(0x3 << 62)) | (0x2 << 62)
    return str(uuid.UUID(int=value))


def stamp_for_create(
    document: dict[str, Any],
    entity_name: str,
    entity_id: str,
    now: datetime,
) -> dict[str, Any]:
    """Return a copy of ``document`` with all four system fields set.

    Caller-supplied system fields are overwritten.
    """
    ts = format_timestamp(now)
    stamped = dict(document)
    stamped[ID] = entity_id
    stamped[CREATED_AT] = ts
    stamped[UPDATED_AT] = ts
    stamped[ENTITY_NAME] = entity_name
    return stamped


def stamp_for_replace(
    document: dict[str, Any],
    entity_name: str,
    entity_id: str,
    now: datetime,
) -> dict[str, Any]:
    """Return a copy of ``document`` re-stamped for a full replace.

    ``createdAt`` is left as the caller sent it; a document that omits it
    loses it.
    """
    stamped = dict(document)
    stamped[ID] = entity_id
    stamped[UPDATED_AT] = format_timestamp(now)
    stamped[ENTITY_NAME] = entity_name
    return stamped

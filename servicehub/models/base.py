"""
Shared column helpers
"""
import uuid
from datetime import datetime, timezone


def generate_uuid():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


def as_utc(value):
    """Return *value* as an aware UTC datetime.

    SQLite hands back naive datetimes; those are treated as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat(value):
    return as_utc(value).isoformat() if value else None

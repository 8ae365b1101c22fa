"""
Small helpers shared by the service modules.
"""
import datetime as dt
import uuid


def utc_now() -> dt.datetime:
    """
    Get current UTC datetime with timezone information.
    """
    return dt.datetime.now(dt.timezone.utc)


def as_utc(value: dt.datetime) -> dt.datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def isoformat_utc(value: dt.datetime | None) -> str | None:
    """ISO-8601 string in UTC with a trailing Z, or None."""
    if value is None:
        return None
    return as_utc(value).isoformat().replace("+00:00", "Z")


def parse_uuid(value) -> uuid.UUID | None:
    """
    Parse an identifier coming from a path or request body.
    Returns None for anything that is not a UUID so callers can report the
    record as missing instead of leaking a database error.
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None

"""UTC time helpers. Promo validity windows and audit entries are UTC only."""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert an aware datetime to UTC.

    Raises ValueError for naive datetimes: a promo window stored without an
    offset cannot be compared safely.
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)


"""Staleness policy for cached shows."""

from datetime import UTC, datetime, timedelta

DEFAULT_MAX_AGE = timedelta(days=7)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as read back from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def needs_refresh(
    last_refreshed_at: datetime | None,
    max_age: timedelta = DEFAULT_MAX_AGE,
    now: datetime | None = None,
) -> bool:
    """Decide whether a cached show must be refreshed from the origin.

    A show that was never refreshed always needs one. Otherwise it needs one
    once it is strictly older than ``max_age``.
    """
    if last_refreshed_at is None:
        return True
    current = as_utc(now) if now is not None else datetime.now(UTC)
    return current - as_utc(last_refreshed_at) > max_age

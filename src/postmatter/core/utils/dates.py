"""Timestamp normalization for front-matter dates"""

from datetime import datetime, timezone


def utc_naive(value: datetime) -> datetime:
    """Naive timestamps are taken as UTC; aware ones are converted and stripped."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

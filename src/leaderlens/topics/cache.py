"""Cached values with generation timestamps."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

StalePredicate = Callable[["CacheEntry", datetime, "timedelta | None"], bool]


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    generated_at: datetime | None


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def is_stale(entry: CacheEntry | None, now: datetime, max_age: timedelta | None) -> bool:
    """True when there is nothing cached or the entry is older than ``max_age``.

    With no ``max_age`` a cached entry never goes stale. An entry without a
    timestamp is stale only when an age limit applies.
    """
    if entry is None:
        return True
    if max_age is None:
        return False
    if entry.generated_at is None:
        return True
    return _aware(now) - _aware(entry.generated_at) > max_age

"""In-memory cache for async queries, valid for one process run."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Hashable

logger = logging.getLogger(__name__)


def normalize_key(kind: str, args: tuple, kwargs: dict[str, Any]) -> tuple:
    """Build a hashable cache key from a query kind and its arguments."""

    def normalize(value: Any) -> Hashable:
        if isinstance(value, (list, tuple)):
            return tuple(normalize(v) for v in value)
        if isinstance(value, (set, frozenset)):
            return frozenset(normalize(v) for v in value)
        if isinstance(value, dict):
            return tuple(sorted((k, normalize(v)) for k, v in value.items()))
        return value

    return (kind, normalize(args), normalize(kwargs))


class QueryCache:
    """Stores the task for each query so concurrent callers share one computation.

    Entries are never evicted; a failed computation stays cached and re-raises
    for every caller.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple, asyncio.Future] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_schedule(self, key: tuple, factory: Callable[[], Awaitable[Any]]) -> asyncio.Future:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss: %s", key)
            entry = asyncio.ensure_future(factory())
            self._entries[key] = entry
        return entry


def cached_query(kind: str):
    """Memoize an async method through the owning instance's ``cache`` attribute."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            key = normalize_key(kind, args, kwargs)
            return await self.cache.get_or_schedule(key, lambda: func(self, *args, **kwargs))

        return wrapper

    return decorator

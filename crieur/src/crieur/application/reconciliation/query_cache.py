"""
Query cache with prefix invalidation.

Holds REST-fetched state keyed by tuples such as ("seller-orders",) or
("order", "42"). Invalidating a prefix marks every matching key stale and
refetches the ones that have a registered fetcher, without blocking the
caller.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from shared.reporter import SystemReporter
from shared.reporter.emojis import Emoji

from crieur.application.reconciliation.policy import QueryKey

Fetcher = Callable[[], Awaitable[Any]]


def matches(key: QueryKey, prefix: QueryKey) -> bool:
    """True if key starts with prefix."""
    return tuple(key[: len(prefix)]) == tuple(prefix)


class QueryCache:
    """
    In-memory cache of fetched queries.

    Refetches of one key are single-flight: invalidations arriving while
    a fetch runs collapse into one follow-up fetch, which also runs when
    that fetch fails.
    """

    def __init__(self, reporter: Optional[SystemReporter] = None):
        self.reporter = reporter

        self._fetchers: Dict[QueryKey, Fetcher] = {}
        self._data: Dict[QueryKey, Any] = {}
        self._stale: Set[QueryKey] = set()
        self._dirty: Set[QueryKey] = set()
        self._inflight: Dict[QueryKey, asyncio.Task] = {}
        self._background: Set[asyncio.Task] = set()

        self.fetch_counts: Dict[QueryKey, int] = {}
        self.invalidations = 0

    # ================================================================
    # REGISTRATION & READS
    # ================================================================

    def register(self, key: QueryKey, fetcher: Fetcher) -> Callable[[], None]:
        """
        Register the fetcher of a query.

        Returns:
            Callable unregistering it
        """
        key = tuple(key)
        self._fetchers[key] = fetcher

        def remove() -> None:
            if self._fetchers.get(key) is fetcher:
                del self._fetchers[key]

        return remove

    def keys(self) -> List[QueryKey]:
        return sorted(set(self._fetchers) | set(self._data), key=repr)

    def get(self, key: QueryKey, default: Any = None) -> Any:
        return self._data.get(tuple(key), default)

    def set(self, key: QueryKey, data: Any) -> None:
        key = tuple(key)
        self._data[key] = data
        self._stale.discard(key)

    def is_stale(self, key: QueryKey) -> bool:
        return tuple(key) in self._stale

    def is_fetching(self, key: QueryKey) -> bool:
        return tuple(key) in self._inflight

    def matching_keys(self, prefix: QueryKey) -> List[QueryKey]:
        """Known keys (registered or cached) starting with prefix."""
        return [k for k in self.keys() if matches(k, prefix)]

    # ================================================================
    # FETCHING
    # ================================================================

    async def fetch(self, key: QueryKey) -> Any:
        """
        Fetch a query now, joining an in-flight fetch of the same key.

        Raises:
            KeyError: If no fetcher is registered for key
            Exception: Whatever the fetcher raises
        """
        key = tuple(key)
        if key not in self._fetchers:
            raise KeyError(f"No fetcher registered for {key}")

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key))
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._clear_inflight(k, t))
        return await asyncio.shield(task)

    async def _run(self, key: QueryKey) -> Any:
        while True:
            self._dirty.discard(key)
            fetcher = self._fetchers.get(key)
            if fetcher is None:
                return self._data.get(key)

            self.fetch_counts[key] = self.fetch_counts.get(key, 0) + 1
            if self.reporter:
                self.reporter.debug(
                    f"{Emoji.SYSTEM.REFETCH} Fetching {key}",
                    context="QueryCache",
                )
            data = await fetcher()
            self._data[key] = data
            if key not in self._dirty:
                self._stale.discard(key)
                return data

    def _clear_inflight(self, key: QueryKey, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if task.cancelled() or key not in self._dirty:
            return
        if task.exception() is not None:
            # Invalidated while the failing fetch ran
            self._dirty.discard(key)
            self._schedule_refetch(key)

    def _schedule_refetch(self, key: QueryKey) -> None:
        task = asyncio.ensure_future(self._refetch(key))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _refetch(self, key: QueryKey) -> None:
        try:
            await self.fetch(key)
        except Exception as e:
            # Cached data is kept; the key stays stale
            if self.reporter:
                self.reporter.error(
                    f"{Emoji.ERROR.FALLBACK} Refetch of {key} failed: {e}",
                    context="QueryCache",
                )

    def invalidate(self, prefix: QueryKey, refetch: bool = True) -> List[QueryKey]:
        """
        Mark every key under prefix stale and refetch registered ones.

        Returns immediately; refetches run as background tasks.

        Args:
            prefix: Key prefix (e.g. ("order",) matches every order detail)
            refetch: Schedule refetches (default True)

        Returns:
            Keys that were invalidated
        """
        prefix = tuple(prefix)
        keys = self.matching_keys(prefix)
        self.invalidations += 1

        for key in keys:
            self._stale.add(key)
            if not refetch or key not in self._fetchers:
                continue
            if key in self._inflight:
                self._dirty.add(key)
                continue
            self._schedule_refetch(key)

        if self.reporter and keys:
            self.reporter.debug(
                f"{Emoji.SYSTEM.INVALIDATE} {prefix} -> {len(keys)} key(s)",
                context="QueryCache",
            )
        return keys

    async def drain(self) -> None:
        """Wait until no refetch is pending."""
        while self._background or self._inflight:
            pending = list(self._background) + list(self._inflight.values())
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self) -> None:
        """Cancel pending refetches."""
        for task in list(self._background) + list(self._inflight.values()):
            if not task.done():
                task.cancel()

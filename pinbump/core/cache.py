"""Run-scoped resolution cache with single-flight deduplication.

Each key maps to a ``concurrent.futures.Future``.  The first caller for a key
becomes the leader and performs the lookup; concurrent callers for the same
key block on the leader's future instead of issuing their own request.  The
lock is only held while the mapping is read or updated, never across the
network call.

Successful results are kept for the lifetime of the cache.  Failed lookups
are evicted so a later occurrence of the same key may retry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable
from concurrent.futures import Future
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResolutionCache:
    """Deduplicates ref-to-SHA and latest-release lookups within one run.

    Never persisted; create a fresh instance per invocation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._shas: dict[tuple[str, str, str], Future[Any]] = {}
        self._latest: dict[tuple[str, str], Future[Any]] = {}
        self.hits = 0
        self.misses = 0

    def get_or_resolve_sha(
        self,
        owner: str,
        repo: str,
        ref: str,
        resolve_fn: Callable[[str, str, str], str],
    ) -> str:
        """Return the cached SHA for ``owner/repo@ref``, resolving it on a miss."""
        return self._single_flight(
            self._shas, (owner, repo, ref), lambda: resolve_fn(owner, repo, ref)
        )

    def get_or_resolve_latest_tag(
        self,
        owner: str,
        repo: str,
        resolve_fn: Callable[[str, str], T],
    ) -> T:
        """Return the cached latest-release lookup for ``owner/repo``."""
        return self._single_flight(
            self._latest, (owner, repo), lambda: resolve_fn(owner, repo)
        )

    def _single_flight(
        self,
        table: dict[Any, Future[Any]],
        key: Hashable,
        call: Callable[[], T],
    ) -> T:
        with self._lock:
            future = table.get(key)
            leader = future is None
            if leader:
                # Used as a plain result slot, not tied to an executor: only
                # the leader completes it, followers block on result().
                future = Future()
                table[key] = future
                self.misses += 1
            else:
                self.hits += 1

        if not leader:
            logger.debug("cache hit for %s", key)
            return future.result()

        try:
            value = call()
        except BaseException as exc:
            with self._lock:
                table.pop(key, None)
            future.set_exception(exc)
            raise
        future.set_result(value)
        return value

    def __len__(self) -> int:
        with self._lock:
            return sum(
                1
                for table in (self._shas, self._latest)
                for f in table.values()
                if f.done() and f.exception() is None
            )

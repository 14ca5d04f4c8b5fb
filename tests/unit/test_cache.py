"""Tests for ResolutionCache — hits, failure eviction, single-flight."""

from __future__ import annotations

import threading
import time

import pytest

from pinbump.core.cache import ResolutionCache
from pinbump.core.errors import TransportFailure

SHA = "a" * 40


def _wait_for(predicate, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached in time")
        time.sleep(0.005)


class TestResolutionCache:
    def test_miss_then_hit(self):
        cache = ResolutionCache()
        calls = []

        def resolve(owner, repo, ref):
            calls.append((owner, repo, ref))
            return SHA

        assert cache.get_or_resolve_sha("actions", "checkout", "v4", resolve) == SHA
        assert cache.get_or_resolve_sha("actions", "checkout", "v4", resolve) == SHA
        assert calls == [("actions", "checkout", "v4")]
        assert (cache.misses, cache.hits) == (1, 1)
        assert len(cache) == 1

    def test_distinct_keys(self):
        cache = ResolutionCache()
        calls = []

        def resolve(owner, repo, ref):
            calls.append(ref)
            return SHA

        cache.get_or_resolve_sha("actions", "checkout", "v4", resolve)
        cache.get_or_resolve_sha("actions", "checkout", "v5", resolve)
        assert calls == ["v4", "v5"]

    def test_latest_tag_cached_separately(self):
        cache = ResolutionCache()
        calls = []

        def latest(owner, repo):
            calls.append((owner, repo))
            return "v5"

        assert cache.get_or_resolve_latest_tag("actions", "checkout", latest) == "v5"
        assert cache.get_or_resolve_latest_tag("actions", "checkout", latest) == "v5"
        assert calls == [("actions", "checkout")]

    def test_none_result_is_cached(self):
        cache = ResolutionCache()
        calls = []

        def latest(owner, repo):
            calls.append(repo)
            return None

        assert cache.get_or_resolve_latest_tag("o", "r", latest) is None
        assert cache.get_or_resolve_latest_tag("o", "r", latest) is None
        assert calls == ["r"]

    def test_failures_are_not_cached(self):
        cache = ResolutionCache()
        attempts = []

        def flaky(owner, repo, ref):
            attempts.append(ref)
            if len(attempts) == 1:
                raise TransportFailure("boom")
            return SHA

        with pytest.raises(TransportFailure):
            cache.get_or_resolve_sha("o", "r", "v1", flaky)
        assert cache.get_or_resolve_sha("o", "r", "v1", flaky) == SHA
        assert len(attempts) == 2


class TestSingleFlight:
    def test_concurrent_misses_share_one_call(self):
        cache = ResolutionCache()
        release = threading.Event()
        calls = []
        results = []

        def slow(owner, repo, ref):
            calls.append(ref)
            release.wait(5)
            return SHA

        threads = [
            threading.Thread(
                target=lambda: results.append(cache.get_or_resolve_sha("o", "r", "v1", slow))
            )
            for _ in range(5)
        ]
        for t in threads:
            t.start()
        _wait_for(lambda: cache.hits == 4)
        release.set()
        for t in threads:
            t.join(5)

        assert calls == ["v1"]
        assert results == [SHA] * 5

    def test_waiters_see_leader_failure(self):
        cache = ResolutionCache()
        release = threading.Event()
        errors = []

        def failing(owner, repo, ref):
            release.wait(5)
            raise TransportFailure("down")

        def worker():
            try:
                cache.get_or_resolve_sha("o", "r", "v1", failing)
            except TransportFailure as exc:
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(3)]
        for t in threads:
            t.start()
        _wait_for(lambda: cache.hits == 2)
        release.set()
        for t in threads:
            t.join(5)

        assert len(errors) == 3
        assert len(cache) == 0

    def test_different_keys_resolve_in_parallel(self):
        cache = ResolutionCache()
        # Both lookups must be in flight at once to pass the barrier.
        barrier = threading.Barrier(2, timeout=5)
        results = {}

        def resolve(owner, repo, ref):
            barrier.wait()
            return SHA

        def worker(ref):
            results[ref] = cache.get_or_resolve_sha("o", "r", ref, resolve)

        threads = [threading.Thread(target=worker, args=(ref,)) for ref in ("v1", "v2")]
        for t in threads:
            t.start()
        for t in threads:
            t.join(10)

        assert results == {"v1": SHA, "v2": SHA}

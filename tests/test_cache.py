import threading
import time

from press_import.core.cache import ResolutionCache


def test_resolve_computes_once_and_memoizes():
    cache = ResolutionCache()
    calls = []

    def compute():
        calls.append(1)
        return "entity"

    assert cache.resolve("post/page:about", compute) == "entity"
    assert cache.resolve("post/page:about", compute) == "entity"
    assert len(calls) == 1
    assert cache.stats == {"hits": 1, "misses": 1}


def test_misses_are_memoized():
    cache = ResolutionCache()
    calls = []

    def compute():
        calls.append(1)
        return None

    assert cache.resolve("post/page:missing", compute) is None
    assert cache.resolve("post/page:missing", compute) is None
    assert len(calls) == 1
    assert cache.has("post/page:missing")


def test_has_distinguishes_not_found_from_never_looked_up():
    cache = ResolutionCache()
    cache.put("found-nothing", None)

    assert cache.has("found-nothing")
    assert not cache.has("never-asked")
    assert cache.get("never-asked", "default") == "default"


def test_put_overwrites_and_clear_empties():
    cache = ResolutionCache()
    cache.put("key", None)
    cache.put("key", "created")

    assert cache.resolve("key", lambda: "recomputed") == "created"

    cache.clear()
    assert len(cache) == 0
    assert not cache.has("key")


def test_concurrent_resolve_runs_compute_once():
    cache = ResolutionCache()
    calls = []
    start = threading.Barrier(8)
    results = []

    def compute():
        calls.append(1)
        time.sleep(0.05)
        return "entity"

    def worker():
        start.wait()
        results.append(cache.resolve("term/category:news", compute))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert results == ["entity"] * 8


def test_distinct_keys_resolve_independently():
    cache = ResolutionCache()

    assert cache.resolve("a", lambda: 1) == 1
    assert cache.resolve("b", lambda: 2) == 2
    assert len(cache) == 2

from afritrade.core.cache import TTLCache


def test_get_before_population_is_a_miss(clock):
    cache = TTLCache(expiry_seconds=60, clock=clock)
    assert cache.get("trade_566_288_2022_TOTAL") is None
    assert not cache.is_valid("trade_566_288_2022_TOTAL")
    assert "trade_566_288_2022_TOTAL" not in cache


def test_put_then_get_within_window(clock):
    cache = TTLCache(expiry_seconds=60, clock=clock)
    cache.put("k", [{"a": 1}])
    clock.advance(59)
    assert cache.is_valid("k")
    assert cache.get("k") == [{"a": 1}]


def test_entry_older_than_window_is_absent(clock):
    cache = TTLCache(expiry_seconds=60, clock=clock)
    cache.put("k", "payload")
    clock.advance(60)
    assert not cache.is_valid("k")
    assert cache.get("k") is None
    # expired entries are not pruned
    assert len(cache) == 1


def test_put_overwrites_and_refreshes_timestamp(clock):
    cache = TTLCache(expiry_seconds=60, clock=clock)
    cache.put("k", "old")
    clock.advance(50)
    cache.put("k", "new")
    clock.advance(50)
    assert cache.get("k") == "new"


def test_clear_removes_everything(clock):
    cache = TTLCache(expiry_seconds=60, clock=clock)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.clear()
    assert len(cache) == 0
    assert cache.get("a") is None


def test_falsy_payloads_are_still_hits(clock):
    cache = TTLCache(expiry_seconds=60, clock=clock)
    cache.put("empty", [])
    assert cache.get("empty") == []
    assert cache.is_valid("empty")

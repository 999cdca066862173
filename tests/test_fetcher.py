import asyncio

import httpx
import pytest

from afritrade.core.cache import TTLCache
from afritrade.core.errors import FetchError, ParseError
from afritrade.services.fetcher import (
    SOURCE_CACHE,
    SOURCE_LIVE,
    SOURCE_SYNTHETIC,
    TradeFlowFetcher,
    trade_cache_key,
)
from afritrade.services.sources import ComtradeSource, SyntheticTradeSource, TradeDataSource


class RecordingSource(TradeDataSource):
    name = "recording"

    def __init__(self, payload=None, error=None):
        self.payload = payload if payload is not None else [{"primaryValue": 1}]
        self.error = error
        self.calls = []

    async def fetch_trade_flows(self, reporter_code, partner_code, year, commodity_code="TOTAL"):
        self.calls.append((reporter_code, partner_code, year, commodity_code))
        if self.error:
            raise self.error
        return self.payload


def _fetch(fetcher, *args):
    return asyncio.run(fetcher.fetch_trade_flows(*args))


def test_cache_key_includes_all_parameters():
    assert trade_cache_key("566", "288,404", 2022, "TOTAL") == "trade_566_288,404_2022_TOTAL"


def test_second_call_within_window_hits_cache(clock):
    source = RecordingSource()
    fetcher = TradeFlowFetcher(source, TTLCache(expiry_seconds=3600, clock=clock))

    first = _fetch(fetcher, "566", "288", 2022)
    second = _fetch(fetcher, "566", "288", 2022)

    assert len(source.calls) == 1
    assert first.source == SOURCE_LIVE and not first.degraded
    assert second.source == SOURCE_CACHE and not second.degraded
    assert second.records is first.records


def test_expired_entry_triggers_refetch(clock):
    source = RecordingSource()
    fetcher = TradeFlowFetcher(source, TTLCache(expiry_seconds=3600, clock=clock))

    _fetch(fetcher, "566", "288", 2022)
    clock.advance(3600)
    result = _fetch(fetcher, "566", "288", 2022)

    assert len(source.calls) == 2
    assert result.source == SOURCE_LIVE


def test_different_commodities_are_cached_separately(clock):
    source = RecordingSource()
    fetcher = TradeFlowFetcher(source, TTLCache(clock=clock))
    _fetch(fetcher, "566", "288", 2022, "TOTAL")
    _fetch(fetcher, "566", "288", 2022, "27")
    assert len(source.calls) == 2


@pytest.mark.parametrize("error", [
    FetchError(500, "Internal Server Error"),
    FetchError(None, "connection refused"),
    ParseError("not json"),
    httpx.ReadTimeout("slow"),
])
def test_failures_degrade_to_synthetic(clock, error):
    source = RecordingSource(error=error)
    cache = TTLCache(clock=clock)
    fetcher = TradeFlowFetcher(source, cache, fallback=SyntheticTradeSource(seed=3))

    result = _fetch(fetcher, "566", "288,404", 2022)

    assert result.degraded
    assert result.source == SOURCE_SYNTHETIC
    assert result.error
    assert len(result.records) == 4
    # synthetic data is never cached
    assert len(cache) == 0


def test_unexpected_errors_propagate(clock):
    fetcher = TradeFlowFetcher(RecordingSource(error=KeyError("boom")), TTLCache(clock=clock))
    with pytest.raises(KeyError):
        _fetch(fetcher, "566", "288", 2022)


def test_synthetic_primary_is_flagged_degraded(clock):
    fetcher = TradeFlowFetcher(SyntheticTradeSource(seed=1), TTLCache(clock=clock))
    result = _fetch(fetcher, "566", "288", 2022)
    assert result.degraded
    assert result.source == SOURCE_SYNTHETIC


def test_live_http_round_trip_issues_one_request(clock, test_settings):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=[{"reporterCode": "566", "primaryValue": 12}])

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            fetcher = TradeFlowFetcher(ComtradeSource(test_settings, client=client), TTLCache(clock=clock))
            first = await fetcher.fetch_trade_flows("566", "288", 2022)
            second = await fetcher.fetch_trade_flows("566", "288", 2022)
            return first, second

    first, second = asyncio.run(go())
    assert len(requests) == 1
    assert first.records == second.records == [{"reporterCode": "566", "primaryValue": 12}]


def test_live_http_error_status_degrades(clock, test_settings):
    def handler(request):
        return httpx.Response(429)

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            fetcher = TradeFlowFetcher(ComtradeSource(test_settings, client=client), TTLCache(clock=clock))
            return await fetcher.fetch_trade_flows("566", "288", 2022)

    result = asyncio.run(go())
    assert result.degraded
    assert "429" in result.error

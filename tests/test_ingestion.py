import asyncio

import httpx

from afritrade.core.cache import TTLCache
from afritrade.ingestion.natural_earth import fetch_african_boundaries, filter_african_features
from afritrade.ingestion.unctad import fetch_unctad_trade
from afritrade.ingestion.worldbank import INDICATORS, fetch_economic_indicators, process_world_bank_data


def _with_client(handler, make_coro):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await make_coro(client)
    return asyncio.run(go())


# ─── World Bank ───

def _wb_payload(indicator, value):
    return [
        {"page": 1, "pages": 1, "per_page": 1, "total": 1},
        [{
            "indicator": {"id": indicator},
            "country": {"id": "NG", "value": "Nigeria"},
            "date": "2022",
            "value": value,
        }],
    ]


def test_economic_indicators_fetched_and_cached(test_settings):
    requests = []

    def handler(request):
        requests.append(request)
        indicator = request.url.path.rsplit("/", 1)[-1]
        if indicator == "TG.VAL.TOTL.GD.ZS":
            return httpx.Response(200, json=[{"page": 1}, None])
        return httpx.Response(200, json=_wb_payload(indicator, 1.5e11))

    cache = TTLCache()

    def call(client):
        return fetch_economic_indicators("NGA", 2022, cache, client=client, base_url=test_settings.world_bank_base_url)

    result = _with_client(handler, call)
    assert set(result) == {"NY.GDP.MKTP.CD", "NE.EXP.GNFS.CD", "NE.IMP.GNFS.CD"}
    assert result["NY.GDP.MKTP.CD"].value == 1.5e11
    assert result["NY.GDP.MKTP.CD"].date == "2022"
    assert len(requests) == len(INDICATORS)
    assert requests[0].url.params["date"] == "2022"
    assert requests[0].url.params["format"] == "json"

    again = _with_client(handler, call)
    assert again is result
    assert len(requests) == len(INDICATORS)


def test_economic_indicators_none_on_failure(test_settings):
    def handler(request):
        return httpx.Response(500)

    result = _with_client(
        handler,
        lambda client: fetch_economic_indicators("NGA", 2022, TTLCache(), client=client,
                                                 base_url=test_settings.world_bank_base_url),
    )
    assert result is None


def test_process_world_bank_data_skips_empty_datasets():
    processed = process_world_bank_data(
        [_wb_payload("A", "12.5"), [{"page": 1}], None],
        ["A", "B", "C"],
    )
    assert list(processed) == ["A"]
    assert processed["A"].value == 12.5


# ─── UNCTAD ───

def test_unctad_trade_passthrough_and_cache(test_settings):
    calls = []

    def handler(request):
        calls.append(request)
        assert request.url.path.endswith("/BulkDownload/MerchandiseTrade")
        assert request.url.params["countries"] == "africa"
        return httpx.Response(200, json={"rows": [1, 2, 3]})

    cache = TTLCache()
    call = lambda client: fetch_unctad_trade(2022, cache, client=client, base_url=test_settings.unctad_base_url)
    assert _with_client(handler, call) == {"rows": [1, 2, 3]}
    assert _with_client(handler, call) == {"rows": [1, 2, 3]}
    assert len(calls) == 1


def test_unctad_none_on_bad_json(test_settings):
    def handler(request):
        return httpx.Response(200, content=b"not json")

    result = _with_client(
        handler,
        lambda client: fetch_unctad_trade(2022, TTLCache(), client=client, base_url=test_settings.unctad_base_url),
    )
    assert result is None


# ─── Boundaries ───

WORLD = {
    "type": "FeatureCollection",
    "features": [
        {"type": "Feature", "properties": {"ISO_A3": "NGA"}, "geometry": None},
        {"type": "Feature", "properties": {"ISO_A3": "FRA"}, "geometry": None},
        {"type": "Feature", "properties": {"ISO_A3": "ZAF"}, "geometry": None},
        {"type": "Feature", "properties": {}, "geometry": None},
    ],
}


def test_filter_african_features():
    collection = filter_african_features(WORLD)
    assert collection.type == "FeatureCollection"
    assert [f["properties"]["ISO_A3"] for f in collection.features] == ["NGA", "ZAF"]


def test_fetch_african_boundaries(test_settings):
    def handler(request):
        return httpx.Response(200, json=WORLD)

    cache = TTLCache()
    result = _with_client(
        handler, lambda client: fetch_african_boundaries(cache, client=client, url=test_settings.boundaries_url)
    )
    assert len(result.features) == 2
    assert cache.get("african_boundaries") is result


def test_fetch_african_boundaries_none_on_error(test_settings):
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    result = _with_client(
        handler, lambda client: fetch_african_boundaries(TTLCache(), client=client, url=test_settings.boundaries_url)
    )
    assert result is None

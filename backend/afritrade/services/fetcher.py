"""
Cached trade-flow fetcher with explicit degradation.

fetch_trade_flows() never raises for upstream trouble: on any fetch or parse
failure it returns synthetic records with `degraded=True`, so callers can tell
real data from demonstration data without guessing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from afritrade.core.cache import TTLCache
from afritrade.core.errors import TradeDataError
from afritrade.services.sources import SyntheticTradeSource, TradeDataSource

logger = logging.getLogger("afritrade.fetcher")

SOURCE_LIVE = "live"
SOURCE_CACHE = "cache"
SOURCE_SYNTHETIC = "synthetic"


@dataclass
class FetchResult:
    records: List[Dict[str, Any]] = field(default_factory=list)
    degraded: bool = False
    source: str = SOURCE_LIVE
    error: Optional[str] = None


def trade_cache_key(reporter_code: str, partner_code: str, year: int, commodity_code: str) -> str:
    return f"trade_{reporter_code}_{partner_code}_{year}_{commodity_code}"


class TradeFlowFetcher:
    def __init__(
        self,
        source: TradeDataSource,
        cache: TTLCache,
        fallback: Optional[TradeDataSource] = None,
    ):
        self.source = source
        self.cache = cache
        self.fallback = fallback or SyntheticTradeSource()

    @property
    def is_synthetic_primary(self) -> bool:
        return isinstance(self.source, SyntheticTradeSource)

    async def fetch_trade_flows(
        self,
        reporter_code: str,
        partner_code: str,
        year: int,
        commodity_code: str = "TOTAL",
    ) -> FetchResult:
        cache_key = trade_cache_key(reporter_code, partner_code, year, commodity_code)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit: {cache_key}")
            return FetchResult(records=cached, source=SOURCE_CACHE)

        if self.is_synthetic_primary:
            # Configured for demonstration data; nothing to degrade from
            records = await self.source.fetch_trade_flows(reporter_code, partner_code, year, commodity_code)
            return FetchResult(records=records, degraded=True, source=SOURCE_SYNTHETIC)

        try:
            records = await self.source.fetch_trade_flows(reporter_code, partner_code, year, commodity_code)
        except (TradeDataError, httpx.HTTPError) as e:
            logger.error(f"Error fetching trade flows {reporter_code} -> {partner_code} ({year}): {e}")
            logger.warning("Falling back to synthetic data due to API access issues")
            records = await self.fallback.fetch_trade_flows(reporter_code, partner_code, year, commodity_code)
            return FetchResult(records=records, degraded=True, source=SOURCE_SYNTHETIC, error=str(e))

        self.cache.put(cache_key, records)
        return FetchResult(records=records, source=SOURCE_LIVE)

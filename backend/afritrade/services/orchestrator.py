"""
Batched intra-regional trade retrieval.

The twelve reporters are processed in fixed-size batches. Within a batch every
reporter is fetched concurrently against all *other* countries of the set
(one comma-joined partner list per request); a member that raises contributes
nothing and the rest of the batch still counts. A fixed pause follows each
batch to stay under upstream rate limits. There is no adaptive backoff.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence

from afritrade.core import countries
from afritrade.core.countries import CountryRef
from afritrade.schemas.schemas import TradeFlowRecord
from afritrade.services.fetcher import FetchResult, TradeFlowFetcher
from afritrade.services.transformer import normalize

logger = logging.getLogger("afritrade.orchestrator")


@dataclass
class RegionalTradeResult:
    year: int
    records: List[TradeFlowRecord] = field(default_factory=list)
    degraded_reporters: List[str] = field(default_factory=list)
    failed_reporters: List[str] = field(default_factory=list)

    @property
    def using_fallback(self) -> bool:
        return bool(self.degraded_reporters or self.failed_reporters or not self.records)


def partition(items: Sequence, size: int) -> List[list]:
    if size <= 0:
        raise ValueError("batch size must be positive")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class BatchOrchestrator:
    def __init__(
        self,
        fetcher: TradeFlowFetcher,
        batch_size: int = 5,
        batch_delay_seconds: float = 1.0,
        country_set: Optional[Sequence[CountryRef]] = None,
        sleep: Callable[[float], Awaitable] = asyncio.sleep,
    ):
        self.fetcher = fetcher
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds
        self.country_set = tuple(country_set or countries.AFRICAN_COUNTRIES)
        self._sleep = sleep

    def partner_codes_for(self, reporter: CountryRef) -> str:
        return ",".join(c.numeric_code for c in self.country_set if c.iso_alpha3 != reporter.iso_alpha3)

    async def _fetch_reporter(self, reporter: CountryRef, year: int) -> FetchResult:
        return await self.fetcher.fetch_trade_flows(
            reporter.numeric_code, self.partner_codes_for(reporter), year
        )

    async def fetch_intra_regional_trade(self, year: int) -> RegionalTradeResult:
        result = RegionalTradeResult(year=year)
        raw_flows: list = []
        batches = partition(self.country_set, self.batch_size)

        for i, batch in enumerate(batches):
            logger.info(
                f"[{i + 1}/{len(batches)}] Fetching batch: {', '.join(c.iso_alpha3 for c in batch)} ({year})"
            )
            outcomes = await asyncio.gather(
                *(self._fetch_reporter(reporter, year) for reporter in batch),
                return_exceptions=True,
            )

            for reporter, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error(f"Batch member {reporter.iso_alpha3} failed: {outcome!r}")
                    result.failed_reporters.append(reporter.iso_alpha3)
                    continue
                if outcome.degraded:
                    result.degraded_reporters.append(reporter.iso_alpha3)
                raw_flows.extend(outcome.records or [])

            # Rate limiting delay
            await self._sleep(self.batch_delay_seconds)

        result.records = normalize(raw_flows)
        logger.info(
            f"Intra-regional fetch complete for {year}: {len(result.records)} flows "
            f"({len(result.degraded_reporters)} synthetic, {len(result.failed_reporters)} failed)"
        )
        return result

    def fetch_intra_regional_trade_sync(self, year: int) -> RegionalTradeResult:
        return asyncio.run(self.fetch_intra_regional_trade(year))

"""
Dashboard data manager
──────────────────────
Single entry point for presentation consumers. Owns one data-service
instance (cache, sources, fetcher, orchestrator), runs a full load cycle per
year and hands back a DashboardSnapshot: trade flows, aggregate stats and an
explicit `using_fallback` flag.

Also exposes the side data used by the map layer (World Bank indicators,
UNCTAD trade, African boundaries) through the same cache.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import httpx

from afritrade.core import scheduler as refresh_scheduler
from afritrade.core.cache import TTLCache
from afritrade.core.config import Settings, settings as default_settings
from afritrade.ingestion.natural_earth import fetch_african_boundaries
from afritrade.ingestion.unctad import fetch_unctad_trade
from afritrade.ingestion.worldbank import fetch_economic_indicators
from afritrade.schemas.schemas import BoundaryCollection, DashboardSnapshot, EconomicIndicator
from afritrade.services.aggregator import compute_stats
from afritrade.services.fetcher import TradeFlowFetcher
from afritrade.services.orchestrator import BatchOrchestrator
from afritrade.services.sources import SyntheticTradeSource, TradeDataSource, build_source

logger = logging.getLogger("afritrade.data_manager")

MIN_YEAR = 2010


def is_valid_year(year: int, today: Optional[datetime] = None) -> bool:
    current_year = (today or datetime.now(timezone.utc)).year
    return MIN_YEAR <= year <= current_year


class DashboardDataManager:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[TTLCache] = None,
        source: Optional[TradeDataSource] = None,
        fallback: Optional[TradeDataSource] = None,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.settings = settings or default_settings
        self.cache = cache or TTLCache(expiry_seconds=self.settings.cache_expiry_seconds)
        self.client = client
        self._clock = clock

        self.source = source or build_source(self.settings, client=client)
        self.fallback = fallback or SyntheticTradeSource(seed=self.settings.synthetic_seed)
        self.fetcher = TradeFlowFetcher(self.source, self.cache, self.fallback)
        self.orchestrator = BatchOrchestrator(
            self.fetcher,
            batch_size=self.settings.batch_size,
            batch_delay_seconds=self.settings.batch_delay_seconds,
        )

        self.is_loading = False
        self._load_lock = threading.Lock()
        self.last_snapshot: Optional[DashboardSnapshot] = None

    # ── Trade flows + stats ───────────────────────────────────────

    async def load_year_data(self, year: int, limit: Optional[int] = None) -> Optional[DashboardSnapshot]:
        """
        Run one fetch → transform → aggregate cycle. While a load is already in
        flight the previous snapshot is returned instead of starting another.
        """
        if not is_valid_year(year, self._clock()):
            raise ValueError(f"Year {year} outside supported range {MIN_YEAR}-{self._clock().year}")

        # refresh runs on a scheduler thread
        with self._load_lock:
            if self.is_loading:
                logger.info(f"Load already in progress, skipping year {year}")
                return self.last_snapshot
            self.is_loading = True

        try:
            result = await self.orchestrator.fetch_intra_regional_trade(year)
            stats = compute_stats(result.records, limit if limit is not None else self.settings.top_routes_limit)
        except Exception:
            logger.error(f"Error loading trade data for {year}", exc_info=True)
            raise
        finally:
            self.is_loading = False

        snapshot = DashboardSnapshot(
            year=year,
            trade_flows=result.records,
            stats=stats,
            using_fallback=result.using_fallback,
            degraded_reporters=result.degraded_reporters,
            failed_reporters=result.failed_reporters,
            loaded_at=self._clock(),
        )
        if snapshot.using_fallback:
            logger.warning(f"Live trade data unavailable for {year}; snapshot contains demonstration data")
        self.last_snapshot = snapshot
        return snapshot

    def current_data_year(self) -> int:
        # Previous calendar year is the latest with complete annual data
        return self._clock().year - 1

    async def load_current_year_data(self, limit: Optional[int] = None) -> Optional[DashboardSnapshot]:
        return await self.load_year_data(self.current_data_year(), limit)

    def load_year_data_sync(self, year: int, limit: Optional[int] = None) -> Optional[DashboardSnapshot]:
        return asyncio.run(self.load_year_data(year, limit))

    def refresh(self) -> Optional[DashboardSnapshot]:
        """Scheduler job body: reload the current data year."""
        logger.info("=== SCHEDULED JOB: trade data refresh started ===")
        try:
            return asyncio.run(self.load_current_year_data())
        except Exception as e:
            logger.error(f"Trade data refresh failed: {e}", exc_info=True)
            return None

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Cache cleared")

    # ── Periodic updates ──────────────────────────────────────────

    def start_periodic_updates(self) -> None:
        refresh_scheduler.start_scheduler(self.refresh, self.settings.refresh_interval_hours)

    def stop_periodic_updates(self) -> None:
        refresh_scheduler.stop_scheduler()

    # ── Side data ─────────────────────────────────────────────────

    async def fetch_economic_indicators(self, country_code: str, year: int) -> Optional[Dict[str, EconomicIndicator]]:
        return await fetch_economic_indicators(
            country_code, year, self.cache, client=self.client, base_url=self.settings.world_bank_base_url
        )

    async def fetch_unctad_trade(self, year: int) -> Optional[Any]:
        return await fetch_unctad_trade(
            year, self.cache, client=self.client, base_url=self.settings.unctad_base_url
        )

    async def fetch_african_boundaries(self) -> Optional[BoundaryCollection]:
        return await fetch_african_boundaries(self.cache, client=self.client, url=self.settings.boundaries_url)

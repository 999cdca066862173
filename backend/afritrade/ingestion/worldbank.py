"""
World Bank API: economic indicators per country.
Free API, no key required.
"""
import asyncio
import logging
from typing import Dict, List, Optional

import httpx

from afritrade.core.cache import TTLCache
from afritrade.core.config import settings
from afritrade.schemas.schemas import EconomicIndicator

logger = logging.getLogger("afritrade.ingestion.worldbank")

# World Bank indicator codes
INDICATORS: List[str] = [
    "NY.GDP.MKTP.CD",     # GDP (current US$)
    "TG.VAL.TOTL.GD.ZS",  # Merchandise trade (% of GDP)
    "NE.EXP.GNFS.CD",     # Exports of goods and services (current US$)
    "NE.IMP.GNFS.CD",     # Imports of goods and services (current US$)
]


def indicator_url(base_url: str, country_code: str, indicator_code: str) -> str:
    return f"{base_url.rstrip('/')}/country/{country_code}/indicator/{indicator_code}"


def process_world_bank_data(datasets: List, indicators: List[str]) -> Dict[str, EconomicIndicator]:
    """
    Each dataset is the raw `[paging, [observation, ...]]` pair; only the first
    observation is kept. Indicators without data are left out.
    """
    result: Dict[str, EconomicIndicator] = {}
    for indicator_code, dataset in zip(indicators, datasets):
        if not isinstance(dataset, list) or len(dataset) < 2 or not isinstance(dataset[1], list) or not dataset[1]:
            continue
        observation = dataset[1][0]
        if not isinstance(observation, dict):
            continue
        value = observation.get("value")
        try:
            value = float(value) if value is not None else None
        except (TypeError, ValueError):
            value = None
        result[indicator_code] = EconomicIndicator(
            value=value,
            date=observation.get("date"),
            country=observation.get("country"),
        )
    return result


async def fetch_economic_indicators(
    country_code: str,
    year: int,
    cache: TTLCache,
    client: Optional[httpx.AsyncClient] = None,
    base_url: Optional[str] = None,
) -> Optional[Dict[str, EconomicIndicator]]:
    """Fetch all INDICATORS for one country/year concurrently. None on failure."""
    cache_key = f"wb_indicators_{country_code}_{year}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    base_url = base_url or settings.world_bank_base_url
    params = {"date": str(year), "format": "json", "per_page": 1}

    async def _fetch_all(http: httpx.AsyncClient) -> List:
        responses = await asyncio.gather(
            *(http.get(indicator_url(base_url, country_code, code), params=params) for code in INDICATORS)
        )
        datasets = []
        for response in responses:
            response.raise_for_status()
            datasets.append(response.json())
        return datasets

    try:
        if client is not None:
            datasets = await _fetch_all(client)
        else:
            async with httpx.AsyncClient(timeout=settings.request_timeout) as http:
                datasets = await _fetch_all(http)
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Error fetching World Bank data for {country_code}/{year}: {e}")
        return None

    processed = process_world_bank_data(datasets, INDICATORS)
    cache.put(cache_key, processed)
    logger.info(f"Fetched {len(processed)} World Bank indicators for {country_code}/{year}")
    return processed

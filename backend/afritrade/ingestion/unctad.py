"""
UNCTADstat merchandise trade bulk download for Africa.
"""
import logging
from typing import Any, Optional

import httpx

from afritrade.core.cache import TTLCache
from afritrade.core.config import settings

logger = logging.getLogger("afritrade.ingestion.unctad")


async def fetch_unctad_trade(
    year: int,
    cache: TTLCache,
    client: Optional[httpx.AsyncClient] = None,
    base_url: Optional[str] = None,
) -> Optional[Any]:
    """Raw UNCTAD payload for `year`, passed through untouched. None on failure."""
    cache_key = f"unctad_trade_{year}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    url = f"{(base_url or settings.unctad_base_url).rstrip('/')}/BulkDownload/MerchandiseTrade"
    params = {"year": str(year), "format": "json", "countries": "africa"}

    try:
        if client is not None:
            response = await client.get(url, params=params)
        else:
            async with httpx.AsyncClient(timeout=settings.request_timeout) as http:
                response = await http.get(url, params=params)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Error fetching UNCTAD data for {year}: {e}")
        return None

    cache.put(cache_key, data)
    return data

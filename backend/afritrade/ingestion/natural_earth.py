"""
Country boundaries for the map layer.

Downloads a world GeoJSON (Natural Earth derived) and keeps only the
features whose ISO_A3 belongs to the reference country set.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from afritrade.core import countries
from afritrade.core.cache import TTLCache
from afritrade.core.config import settings
from afritrade.schemas.schemas import BoundaryCollection

logger = logging.getLogger("afritrade.ingestion.natural_earth")

CACHE_KEY = "african_boundaries"


def filter_african_features(geo_data: Dict[str, Any]) -> BoundaryCollection:
    features = []
    for feature in geo_data.get("features") or []:
        iso_code = (feature.get("properties") or {}).get("ISO_A3", "")
        if iso_code and countries.lookup(iso_code) is not None:
            features.append(feature)
    return BoundaryCollection(features=features)


async def fetch_african_boundaries(
    cache: TTLCache,
    client: Optional[httpx.AsyncClient] = None,
    url: Optional[str] = None,
) -> Optional[BoundaryCollection]:
    cached = cache.get(CACHE_KEY)
    if cached is not None:
        return cached

    url = url or settings.boundaries_url
    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with httpx.AsyncClient(timeout=settings.request_timeout, follow_redirects=True) as http:
                response = await http.get(url)
        response.raise_for_status()
        geo_data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Error fetching geographic data: {e}")
        return None

    if not isinstance(geo_data, dict):
        logger.error("Boundary payload is not a GeoJSON object")
        return None

    collection = filter_african_features(geo_data)
    cache.put(CACHE_KEY, collection)
    logger.info(f"Loaded {len(collection.features)} African boundary features")
    return collection

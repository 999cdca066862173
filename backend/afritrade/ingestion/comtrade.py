"""
UN Comtrade request helpers.

Builds the annual HS trade query, optionally routes it through a CORS relay,
and flattens the response envelope into a list of raw flow dicts.

  GET {base}/C/A/HS?freq=A&px=HS&ps=2023&r=566&p=288,404&cc=TOTAL&fmt=json
"""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlencode

import httpx

from afritrade.core.errors import FetchError, ParseError

logger = logging.getLogger("afritrade.ingestion.comtrade")


def build_trade_flows_url(
    base_url: str,
    reporter_code: str,
    partner_code: str,
    year: int,
    commodity_code: str = "TOTAL",
) -> str:
    params = {
        "freq": "A",
        "px": "HS",
        "ps": str(year),
        "r": reporter_code,
        "p": partner_code,
        "cc": commodity_code,
        "fmt": "json",
    }
    # keep commas in the partner list readable
    return f"{base_url.rstrip('/')}/C/A/HS?" + urlencode(params, safe=",")


def wrap_with_cors_proxy(url: str, proxy_url: str) -> str:
    """allorigins-style relay: {proxy}?url=<encoded upstream url>"""
    return f"{proxy_url}?url={quote(url, safe='')}"


def request_headers(
    use_cors_proxy: bool,
    user_agent: str,
    api_key: Optional[str] = None,
) -> Dict[str, str]:
    headers = {"Accept": "application/json"}
    if not use_cors_proxy:
        headers["User-Agent"] = user_agent
    if api_key:
        headers["Ocp-Apim-Subscription-Key"] = api_key
    return headers


def normalize_envelope(data: Any) -> List[Dict[str, Any]]:
    """
    Comtrade answers with {"data": [...]}, but relays and older endpoints may
    hand back a bare list or a single record object.
    """
    if isinstance(data, dict):
        if "data" in data:
            records = data["data"]
            if records is None:
                return []
            if not isinstance(records, list):
                raise ParseError(f"'data' field is {type(records).__name__}, expected list")
            return records
        return [data]
    if isinstance(data, list):
        return data
    raise ParseError(f"Unexpected Comtrade payload type: {type(data).__name__}")


def parse_response(response: httpx.Response) -> List[Dict[str, Any]]:
    """Raise FetchError on non-2xx, ParseError on a malformed body."""
    if not response.is_success:
        raise FetchError(response.status_code, response.reason_phrase)
    try:
        data = response.json()
    except ValueError as e:
        raise ParseError(f"Invalid JSON from Comtrade: {e}") from e
    return normalize_envelope(data)

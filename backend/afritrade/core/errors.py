"""Error taxonomy for the trade data pipeline."""
from typing import Optional


class TradeDataError(Exception):
    """Base class for recoverable upstream data failures."""


class FetchError(TradeDataError):
    """Non-2xx HTTP response or network failure talking to an upstream API."""

    def __init__(self, status_code: Optional[int], message: str = ""):
        self.status_code = status_code
        self.message = message
        detail = f"HTTP {status_code}" if status_code is not None else "network error"
        super().__init__(f"{detail}: {message}" if message else detail)


class ParseError(TradeDataError):
    """Response body was not JSON or had no usable envelope."""

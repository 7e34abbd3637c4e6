"""Yahoo Finance client for quotes, one-day charts and company profiles"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from ..config import HTTPConfig
from ..exceptions import UpstreamError
from .base import JSONProviderClient


class YahooFinanceClient(JSONProviderClient):
    """Raw access to the Yahoo Finance JSON endpoints used for equity pricing"""

    provider_name = "Yahoo Finance"

    def __init__(self, base_url: str = "https://query1.finance.yahoo.com",
                 http_config: Optional[HTTPConfig] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(base_url, http_config, logger or logging.getLogger(__name__))

    async def get_quote(self, ticker: str) -> Optional[Dict[str, Any]]:
        """Fetch the real-time quote for ticker, or None if Yahoo has no quote row"""
        data = await self._get_json("/v7/finance/quote", params={'symbols': ticker})
        if not isinstance(data, dict):
            raise UpstreamError("Invalid quote response from Yahoo Finance")
        results = (data.get('quoteResponse') or {}).get('result') or []
        return results[0] if results else None

    async def get_chart(self, ticker: str) -> Dict[str, Any]:
        """Fetch the one-day chart payload for ticker.

        Yahoo reports unknown symbols with a non-200 status and a chart.error
        body; that body is returned as-is so the caller can read the message.
        """
        status, data = await self._request_json(
            f"/v8/finance/chart/{quote(ticker, safe='')}",
            params={'interval': '1d', 'range': '1d'}
        )

        if isinstance(data, dict) and isinstance(data.get('chart'), dict):
            if status == 200 or data['chart'].get('error'):
                return data

        if status != 200:
            raise UpstreamError(f"Yahoo Finance API error: {status}")
        raise UpstreamError("Invalid chart response from Yahoo Finance")

    async def get_profile(self, ticker: str) -> Dict[str, Any]:
        """Fetch the assetProfile and quoteType modules for ticker"""
        data = await self._get_json(
            f"/v10/finance/quoteSummary/{quote(ticker, safe='')}",
            params={'modules': 'assetProfile,quoteType'}
        )
        if not isinstance(data, dict):
            raise UpstreamError("Invalid quoteSummary response from Yahoo Finance")
        results = (data.get('quoteSummary') or {}).get('result') or []
        return results[0] if results else {}

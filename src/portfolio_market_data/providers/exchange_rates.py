"""exchangerate-api.com client for full exchange rate tables"""

import logging
from typing import Dict, Optional
from urllib.parse import quote

from ..config import HTTPConfig
from ..exceptions import UpstreamError
from .base import JSONProviderClient


class ExchangeRateClient(JSONProviderClient):
    """Fetches every rate quoted against one base currency"""

    provider_name = "Exchange rate API"

    def __init__(self, base_url: str = "https://api.exchangerate-api.com",
                 http_config: Optional[HTTPConfig] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(base_url, http_config, logger or logging.getLogger(__name__))

    async def get_rates(self, base_currency: str) -> Dict[str, float]:
        """Return units of each currency per one unit of base_currency"""
        try:
            data = await self._get_json(f"/v4/latest/{quote(base_currency, safe='')}")
        except UpstreamError as e:
            raise UpstreamError(f"Exchange rate API error: {e}") from e

        rates = data.get('rates') if isinstance(data, dict) else None
        if not isinstance(rates, dict) or not rates:
            raise UpstreamError("Invalid response from exchange rate API")

        parsed: Dict[str, float] = {}
        for code, value in rates.items():
            try:
                parsed[str(code).upper()] = float(value)
            except (TypeError, ValueError):
                self.logger.debug(f"Skipping non-numeric rate for {code}: {value!r}")
        return parsed

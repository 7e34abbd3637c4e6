"""Finnhub client for bond reference prices"""

import logging
from typing import Any, Optional

from ..config import HTTPConfig
from .base import JSONProviderClient

# Tried in this order when looking up a bond price
BOND_ENDPOINTS = ("profile", "price")


class FinnhubBondClient(JSONProviderClient):
    """Raw access to Finnhub's bond endpoints, keyed by ISIN"""

    provider_name = "Finnhub"

    def __init__(self, base_url: str = "https://finnhub.io/api/v1",
                 http_config: Optional[HTTPConfig] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(base_url, http_config, logger or logging.getLogger(__name__))

    async def get_bond_data(self, endpoint: str, isin: str, api_key: str) -> Any:
        """Fetch the raw JSON body of bond/<endpoint> for isin"""
        if endpoint not in BOND_ENDPOINTS:
            raise ValueError(f"Unknown Finnhub bond endpoint: {endpoint}")

        return await self._get_json(f"/bond/{endpoint}", params={'isin': isin, 'token': api_key})

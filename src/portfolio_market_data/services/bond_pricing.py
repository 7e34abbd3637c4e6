"""Bond pricing service backed by Finnhub"""

import logging
import math
import os
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ..cache import TimedCache
from ..config import BondPricingConfig
from ..context import lookup_context
from ..exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    NoPriceAvailableError,
    UpstreamError,
)
from ..models import BondPriceRecord, BondPriceSource, CacheStats
from ..providers import FinnhubBondClient, BOND_ENDPOINTS

# Environment variables consulted when no key is configured, in order
API_KEY_ENV_VARS = ('FINNHUB_API_KEY', 'NEXT_PUBLIC_FINNHUB_API_KEY')


def _candidate_prices(data: Any) -> list:
    if not isinstance(data, dict):
        return []
    nested = data.get('data')
    return [
        data.get('lastPrice'),
        data.get('last_price'),
        data.get('marketPrice'),
        data.get('price'),
        data.get('midPrice'),
        data.get('mid_price'),
        data.get('close'),
        nested.get('price') if isinstance(nested, dict) else None,
    ]


def _positive_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) and number > 0 else None


class BondPricingService:
    """Looks up bond prices (percent of par) by ISIN with a TTL cache and no circuit breaker"""

    def __init__(
        self,
        client: FinnhubBondClient,
        config: Optional[BondPricingConfig] = None,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None
    ):
        self.client = client
        self.config = config or BondPricingConfig()
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock
        self.price_cache: TimedCache[str, BondPriceRecord] = TimedCache(self.config.price_cache_ttl_seconds, clock)

    def _api_key(self) -> str:
        """Resolve the Finnhub key at call time: config first, then environment"""
        if self.config.finnhub_api_key:
            return self.config.finnhub_api_key
        for name in API_KEY_ENV_VARS:
            value = os.getenv(name)
            if value:
                return value
        raise ConfigurationError("FINNHUB_API_KEY not configured")

    async def get_bond_price(self, isin: str) -> BondPriceRecord:
        """Get the latest price for a bond.

        Raises:
            InvalidArgumentError: isin is shorter than the configured minimum
            ConfigurationError: no Finnhub API key is available
            NoPriceAvailableError: no endpoint returned a usable price
        """
        upper_isin = (isin or '').strip().upper()
        if len(upper_isin) < self.config.min_isin_length:
            raise InvalidArgumentError('Invalid ISIN')

        with lookup_context(f"bond:{upper_isin}"):
            cached = self.price_cache.get(upper_isin)
            if cached is not None:
                self.logger.debug(f"Cache hit for bond {upper_isin}")
                return cached.model_copy(update={'source': BondPriceSource.CACHE})

            api_key = self._api_key()

            price_pct: Optional[float] = None
            currency: Optional[str] = None
            last_error: Optional[str] = None

            for endpoint in BOND_ENDPOINTS:
                try:
                    data = await self.client.get_bond_data(endpoint, upper_isin, api_key)
                except UpstreamError as e:
                    last_error = str(e)
                    self.logger.debug(f"Finnhub bond/{endpoint} failed for {upper_isin}: {e}")
                    continue

                price_pct = next(
                    (p for p in map(_positive_number, _candidate_prices(data)) if p is not None),
                    None
                )
                if price_pct is not None:
                    currency = data.get('currency') or data.get('baseCurrency')
                    break

            if price_pct is None:
                self.logger.warning(f"No bond price available for {upper_isin}: {last_error}")
                raise NoPriceAvailableError(last_error or 'No bond price available')

            record = BondPriceRecord(
                isin=upper_isin,
                price_pct=price_pct,
                currency=currency or 'USD',
                source=BondPriceSource.LIVE,
                timestamp=datetime.fromtimestamp(self._clock(), tz=timezone.utc)
            )
            self.price_cache.set(upper_isin, record)
            self.logger.info(f"Got bond price for {upper_isin}: {price_pct}% of par")
            return record

    def clear_cache(self) -> None:
        self.price_cache.clear()
        self.logger.info("Bond price cache cleared")

    def get_cache_stats(self) -> CacheStats:
        counts = self.price_cache.stats()
        return CacheStats(
            total_entries=counts.total,
            valid_entries=counts.valid,
            expired_entries=counts.expired,
            cache_ttl_seconds=self.config.price_cache_ttl_seconds
        )

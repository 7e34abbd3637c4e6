"""Currency conversion service backed by exchangerate-api.com"""

import logging
import re
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ..cache import TimedCache
from ..circuit_breaker import CircuitBreaker
from ..config import CurrencyConfig
from ..context import lookup_context
from ..exceptions import InvalidArgumentError, MarketDataError, NoRateFoundError
from ..models import (
    CacheStats,
    CurrencyConversion,
    ExchangeRateTable,
    RateSource,
    UsdConversion,
)
from ..providers import ExchangeRateClient
from .fallback_rates import FALLBACK_USD_RATES, build_fallback_rates

_CURRENCY_PATTERN = re.compile(r'^[A-Z]{3}$')


class CurrencyConversionService:
    """
    Converts amounts between currencies using cached live rate tables.

    Provider outages never surface as errors: when the breaker is open or a
    fetch fails, rates come from the static fallback table instead.
    """

    def __init__(
        self,
        client: ExchangeRateClient,
        config: Optional[CurrencyConfig] = None,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None
    ):
        self.client = client
        self.config = config or CurrencyConfig()
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock

        self.rate_cache: TimedCache[str, ExchangeRateTable] = TimedCache(self.config.rate_cache_ttl_seconds, clock)
        self.circuit_breaker = CircuitBreaker(
            name="currency",
            failure_threshold=self.config.circuit_breaker_threshold,
            reset_timeout_seconds=self.config.circuit_breaker_reset_seconds,
            clock=clock,
            logger=self.logger
        )

    @staticmethod
    def normalize_currency(code: str) -> str:
        normalized = (code or '').strip().upper()
        if not _CURRENCY_PATTERN.match(normalized):
            raise InvalidArgumentError(f"Invalid currency code: {code!r}")
        return normalized

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc)

    def _fallback_table(self, base: str) -> ExchangeRateTable:
        return ExchangeRateTable(
            base=base,
            rates=build_fallback_rates(base),
            source=RateSource.FALLBACK,
            timestamp=self._now()
        )

    def is_circuit_open(self) -> bool:
        return self.circuit_breaker.is_open()

    def record_failure(self) -> None:
        self.circuit_breaker.record_failure()

    def record_success(self) -> None:
        self.circuit_breaker.record_success()

    async def get_rate_table(self, base_currency: str = 'USD') -> ExchangeRateTable:
        """Get every rate for base_currency, tagged with where it came from"""
        base = self.normalize_currency(base_currency)

        with lookup_context(f"fx:{base}"):
            cached = self.rate_cache.get(base)
            if cached is not None:
                self.logger.debug(f"Cache hit for {base} rates")
                return cached.model_copy(update={'source': RateSource.CACHE})

            if self.circuit_breaker.is_open():
                self.logger.warning(f"Currency API circuit breaker open, using fallback rates for {base}")
                return self._fallback_table(base)

            try:
                self.logger.info(f"Fetching exchange rates for {base}")
                rates = await self.client.get_rates(base)
            except Exception as e:
                self.circuit_breaker.record_failure()
                self.logger.error(f"Error fetching exchange rates for {base}: {e}")
                self.logger.warning(f"Using fallback rates for {base}")
                return self._fallback_table(base)

            table = ExchangeRateTable(base=base, rates=rates, source=RateSource.LIVE, timestamp=self._now())
            self.rate_cache.set(base, table)
            self.circuit_breaker.record_success()

            self.logger.info(f"Got {len(rates)} exchange rates for {base}")
            return table

    async def fetch_rates(self, base_currency: str = 'USD') -> Dict[str, float]:
        table = await self.get_rate_table(base_currency)
        return table.rates

    async def convert(self, amount: float, from_currency: str, to_currency: str) -> CurrencyConversion:
        """Convert amount between any two currencies, rounded to 2 decimal places"""
        upper_from = self.normalize_currency(from_currency)
        upper_to = self.normalize_currency(to_currency)

        if upper_from == upper_to:
            return CurrencyConversion(
                original_amount=amount,
                original_currency=upper_from,
                converted_amount=amount,
                target_currency=upper_to,
                exchange_rate=1.0,
                timestamp=self._now()
            )

        try:
            table = await self.get_rate_table(upper_from)
            target_rate = table.rates.get(upper_to)

            if not target_rate:
                raise NoRateFoundError(f"No exchange rate found for {upper_from} to {upper_to}")

            return CurrencyConversion(
                original_amount=amount,
                original_currency=upper_from,
                converted_amount=round(amount * target_rate, 2),
                target_currency=upper_to,
                exchange_rate=target_rate,
                fallback=table.source == RateSource.FALLBACK,
                timestamp=self._now()
            )

        except Exception as e:
            self.logger.error(f"Error converting {upper_from} to {upper_to}: {e}")
            raise

    async def convert_to_usd(self, amount: float, from_currency: str) -> UsdConversion:
        """Convert amount into USD, falling back to the static table when no live rate exists"""
        upper_from = self.normalize_currency(from_currency)

        if upper_from == 'USD':
            return UsdConversion(
                original_amount=amount,
                original_currency='USD',
                usd_amount=amount,
                exchange_rate=1.0,
                timestamp=self._now()
            )

        try:
            table = await self.get_rate_table(upper_from)
            usd_rate = table.rates.get('USD')
            fallback = table.source == RateSource.FALLBACK

            if not usd_rate:
                # Reverse lookup through the USD table
                usd_table = await self.get_rate_table('USD')
                from_rate = usd_table.rates.get(upper_from)
                if not from_rate:
                    raise NoRateFoundError(f"No exchange rate found for {upper_from}")
                usd_rate = 1 / from_rate
                fallback = usd_table.source == RateSource.FALLBACK

            return UsdConversion(
                original_amount=amount,
                original_currency=upper_from,
                usd_amount=round(amount * usd_rate, 2),
                exchange_rate=usd_rate,
                fallback=fallback,
                timestamp=self._now()
            )

        except MarketDataError as e:
            fallback_rate = FALLBACK_USD_RATES.get(upper_from)
            if not fallback_rate:
                raise

            self.logger.warning(f"Using fallback rate {fallback_rate} for {upper_from}: {e}")
            return UsdConversion(
                original_amount=amount,
                original_currency=upper_from,
                usd_amount=round(amount * fallback_rate, 2),
                exchange_rate=fallback_rate,
                fallback=True,
                timestamp=self._now()
            )

    async def get_supported_currencies(self) -> List[str]:
        try:
            table = await self.get_rate_table('USD')
            return sorted(table.rates)
        except MarketDataError as e:
            self.logger.warning(f"Could not load USD rates, listing fallback currencies: {e}")
            return sorted(FALLBACK_USD_RATES)

    def clear_cache(self) -> None:
        self.rate_cache.clear()
        self.logger.info("Currency rate cache cleared")

    def get_cache_stats(self) -> CacheStats:
        counts = self.rate_cache.stats()
        # Status first: the check may heal the breaker and reset the count
        status = self.circuit_breaker.status()
        return CacheStats(
            total_entries=counts.total,
            valid_entries=counts.valid,
            expired_entries=counts.expired,
            cache_ttl_seconds=self.config.rate_cache_ttl_seconds,
            circuit_breaker_status=status,
            failure_count=self.circuit_breaker.failure_count
        )

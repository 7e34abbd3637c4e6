"""Stock pricing service backed by Yahoo Finance"""

import asyncio
import logging
import math
import re
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..cache import TimedCache
from ..circuit_breaker import CircuitBreaker
from ..config import StockPricingConfig
from ..context import lookup_context
from ..exceptions import (
    InvalidArgumentError,
    ServiceUnavailableError,
    SymbolNotFoundError,
    UpstreamError,
)
from ..models import (
    CacheStats,
    CompanyProfile,
    MultipleStockPricesResult,
    StockPriceRecord,
    TickerValidation,
)
from ..providers import YahooFinanceClient

# Any run of printable non-space characters; Yahoo symbols carry punctuation (BRK.B, ^GSPC, M&M.NS)
_TICKER_PATTERN = re.compile(r"^[^\s\x00-\x1f\x7f]+$")


def _to_number(value: Any) -> Optional[float]:
    """Coerce a provider value to a finite float, or None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _first(*values: Any) -> Any:
    """Return the first value that is not None"""
    for value in values:
        if value is not None:
            return value
    return None


def _first_point(series: Optional[List[Any]]) -> Optional[float]:
    if not series:
        return None
    return _to_number(series[0])


class StockPricingService:
    """Serves equity prices through a price cache, a profile cache and a circuit breaker.

    Concurrent misses for the same ticker each go to Yahoo; there is no
    request coalescing.
    """

    def __init__(
        self,
        client: YahooFinanceClient,
        config: Optional[StockPricingConfig] = None,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None
    ):
        self.client = client
        self.config = config or StockPricingConfig()
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock

        self.price_cache: TimedCache[str, StockPriceRecord] = TimedCache(self.config.price_cache_ttl_seconds, clock)
        self.profile_cache: TimedCache[str, CompanyProfile] = TimedCache(self.config.profile_cache_ttl_seconds, clock)
        self.circuit_breaker = CircuitBreaker(
            name="stock-pricing",
            failure_threshold=self.config.circuit_breaker_threshold,
            reset_timeout_seconds=self.config.circuit_breaker_reset_seconds,
            clock=clock,
            logger=self.logger
        )

    @staticmethod
    def normalize_ticker(ticker: str) -> str:
        normalized = (ticker or '').strip().upper()
        if not normalized or not _TICKER_PATTERN.match(normalized):
            raise InvalidArgumentError(f"Invalid ticker symbol: {ticker!r}")
        return normalized

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc)

    # Cache and breaker access

    def get_cached_price(self, ticker: str) -> Optional[StockPriceRecord]:
        return self.price_cache.get(ticker.strip().upper())

    def set_cached_price(self, ticker: str, record: StockPriceRecord) -> None:
        self.price_cache.set(ticker.strip().upper(), record)

    def is_circuit_open(self) -> bool:
        return self.circuit_breaker.is_open()

    def record_failure(self) -> None:
        self.circuit_breaker.record_failure()

    def record_success(self) -> None:
        self.circuit_breaker.record_success()

    # Lookups

    async def get_price(self, ticker: str) -> StockPriceRecord:
        """Get the current price for ticker.

        Raises:
            InvalidArgumentError: ticker is empty or malformed
            ServiceUnavailableError: breaker is open and the price is not cached
            SymbolNotFoundError: Yahoo has no data for the symbol
            UpstreamError: the chart request failed or returned an error
        """
        upper_ticker = self.normalize_ticker(ticker)

        with lookup_context(f"stock:{upper_ticker}"):
            cached = self.price_cache.get(upper_ticker)
            if cached is not None:
                self.logger.debug(f"Cache hit for {upper_ticker}")
                return cached.model_copy(update={'cached': True})

            if self.circuit_breaker.is_open():
                self.logger.warning(f"Circuit breaker open for {upper_ticker}")
                raise ServiceUnavailableError("Service temporarily unavailable. Please try again later.")

            try:
                self.logger.info(f"Fetching price for {upper_ticker} from Yahoo Finance")

                quote, chart = await asyncio.gather(
                    self._fetch_quote(upper_ticker),
                    self.client.get_chart(upper_ticker)
                )
                chart_result = self._extract_chart_result(upper_ticker, chart)
                profile = await self._get_profile(upper_ticker)

                record = self._build_record(upper_ticker, quote or {}, chart_result, profile)

                self.price_cache.set(upper_ticker, record)
                self.circuit_breaker.record_success()

                self.logger.info(f"Got price for {upper_ticker}: {record.price} {record.currency}")
                return record

            except Exception as e:
                self.circuit_breaker.record_failure()
                self.logger.error(f"Error fetching price for {upper_ticker}: {e}")
                raise

    async def _fetch_quote(self, ticker: str) -> Optional[Dict[str, Any]]:
        """Quote fields override chart fields; a failed quote yields None"""
        try:
            return await self.client.get_quote(ticker)
        except Exception as e:
            self.logger.warning(f"Quote lookup failed for {ticker}, using chart data only: {e}")
            return None

    def _extract_chart_result(self, ticker: str, chart: Dict[str, Any]) -> Dict[str, Any]:
        chart_body = chart.get('chart') or {}

        error = chart_body.get('error')
        if error:
            if isinstance(error, dict):
                message = error.get('description') or 'Invalid ticker symbol'
                code = str(error.get('code') or '')
            else:
                message, code = str(error), ''
            if code.lower().replace(' ', '') == 'notfound':
                raise SymbolNotFoundError(message)
            raise UpstreamError(message)

        results = chart_body.get('result') or []
        if not results or not isinstance(results[0], dict):
            raise SymbolNotFoundError(f"No data found for ticker: {ticker}")
        return results[0]

    async def _get_profile(self, ticker: str) -> CompanyProfile:
        """Sector/industry enrichment; a failed lookup leaves the fields empty"""
        cached = self.profile_cache.get(ticker)
        if cached is not None:
            return cached

        try:
            summary = await self.client.get_profile(ticker)
        except Exception as e:
            self.logger.warning(f"Could not fetch sector info for {ticker}: {e}")
            return CompanyProfile()

        asset_profile = summary.get('assetProfile') or {}
        quote_type = summary.get('quoteType') or {}
        profile = CompanyProfile(
            sector=asset_profile.get('sector'),
            industry=asset_profile.get('industry'),
            long_name=quote_type.get('longName')
        )
        self.profile_cache.set(ticker, profile)
        return profile

    def _build_record(self, ticker: str, quote: Dict[str, Any], chart_result: Dict[str, Any],
                      profile: CompanyProfile) -> StockPriceRecord:
        meta = chart_result.get('meta') or {}
        chart_quotes = (chart_result.get('indicators') or {}).get('quote') or [{}]
        chart_quote = chart_quotes[0] or {}

        price = _first(
            _to_number(quote.get('regularMarketPrice')),
            _to_number(meta.get('regularMarketPrice')),
            _to_number(meta.get('chartPreviousClose')),
            _to_number(meta.get('previousClose')),
            0.0
        )
        previous_close = _first(
            _to_number(quote.get('regularMarketPreviousClose')),
            _to_number(meta.get('chartPreviousClose')),
            _to_number(meta.get('previousClose')),
            price
        )
        change = _first(
            _to_number(quote.get('regularMarketChange')),
            price - previous_close
        )
        change_percent = _first(
            _to_number(quote.get('regularMarketChangePercent')),
            (change / previous_close) * 100 if previous_close else 0.0
        )

        return StockPriceRecord(
            ticker=ticker,
            price=price,
            currency=_first(quote.get('currency'), meta.get('currency'), 'USD'),
            name=_first(profile.long_name, quote.get('longName'), meta.get('shortName'),
                        meta.get('longName'), ticker),
            short_name=_first(quote.get('shortName'), meta.get('shortName'), ticker),
            sector=profile.sector,
            industry=profile.industry,
            exchange=_first(quote.get('fullExchangeName'), meta.get('exchangeName'), 'Unknown'),
            change=change,
            change_percent=change_percent,
            previous_close=previous_close,
            open=_first(_to_number(quote.get('regularMarketOpen')), _first_point(chart_quote.get('open'))),
            high=_first(_to_number(quote.get('regularMarketDayHigh')), _first_point(chart_quote.get('high'))),
            low=_first(_to_number(quote.get('regularMarketDayLow')), _first_point(chart_quote.get('low'))),
            volume=_first(_to_number(quote.get('regularMarketVolume')), _first_point(chart_quote.get('volume'))),
            market_state=_first(quote.get('marketState'), meta.get('marketState')),
            cached=False,
            timestamp=self._now()
        )

    async def get_multiple_stock_prices(self, tickers: List[str]) -> MultipleStockPricesResult:
        """Fetch every ticker concurrently; one failure never aborts the others"""
        result = MultipleStockPricesResult()

        async def fetch_one(ticker: str) -> None:
            try:
                result.results[ticker] = await self.get_price(ticker)
            except Exception as e:
                result.errors[ticker] = str(e)

        await asyncio.gather(*(fetch_one(ticker) for ticker in tickers))
        return result

    async def validate_ticker(self, ticker: str) -> TickerValidation:
        try:
            record = await self.get_price(ticker)
            return TickerValidation(
                valid=True,
                ticker=record.ticker,
                name=record.name,
                exchange=record.exchange,
                currency=record.currency,
                price=record.price
            )
        except Exception as e:
            return TickerValidation(
                valid=False,
                ticker=(ticker or '').strip().upper(),
                error=str(e)
            )

    # Diagnostics

    def clear_cache(self) -> None:
        self.price_cache.clear()
        self.profile_cache.clear()
        self.logger.info("Price and profile caches cleared")

    def get_cache_stats(self) -> CacheStats:
        price_counts = self.price_cache.stats()
        profile_counts = self.profile_cache.stats()
        # Status first: the check may heal the breaker and reset the count
        status = self.circuit_breaker.status()
        return CacheStats(
            total_entries=price_counts.total + profile_counts.total,
            valid_entries=price_counts.valid + profile_counts.valid,
            expired_entries=price_counts.expired + profile_counts.expired,
            cache_ttl_seconds=self.config.price_cache_ttl_seconds,
            circuit_breaker_status=status,
            failure_count=self.circuit_breaker.failure_count
        )

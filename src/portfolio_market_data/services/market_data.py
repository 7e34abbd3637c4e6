"""Facade combining stock, bond and currency lookups for request handlers"""

import logging
from typing import Dict, List, Optional

from ..models import (
    BondPriceRecord,
    CurrencyConversion,
    ExchangeRateTable,
    MarketDataCacheStats,
    MultipleStockPricesResult,
    StockPriceRecord,
    TickerValidation,
    UsdConversion,
)
from .bond_pricing import BondPricingService
from .currency import CurrencyConversionService
from .stock_pricing import StockPricingService


class MarketDataService:
    """Entry point for callers that want prices expressed in a chosen currency"""

    def __init__(
        self,
        stock_pricing: StockPricingService,
        bond_pricing: BondPricingService,
        currency: CurrencyConversionService,
        logger: Optional[logging.Logger] = None
    ):
        self.stock_pricing = stock_pricing
        self.bond_pricing = bond_pricing
        self.currency = currency
        self.logger = logger or logging.getLogger(__name__)

    async def get_stock_price(self, ticker: str, convert_to: Optional[str] = None) -> StockPriceRecord:
        """Get a stock price, optionally converted; conversion errors propagate"""
        record = await self.stock_pricing.get_price(ticker)

        if convert_to and convert_to.strip().upper() != record.currency:
            conversion = await self.currency.convert(record.price, record.currency, convert_to)
            record = record.model_copy(update={
                'converted_price': conversion.converted_amount,
                'converted_currency': conversion.target_currency,
                'exchange_rate': conversion.exchange_rate,
            })

        return record

    async def get_stock_prices(self, tickers: List[str], convert_to: Optional[str] = None) -> MultipleStockPricesResult:
        """Get prices for many tickers; a failed conversion leaves that record unconverted"""
        batch = await self.stock_pricing.get_multiple_stock_prices(tickers)
        if not convert_to:
            return batch

        target_currency = convert_to.strip().upper()
        # One rate lookup per source currency for this batch
        rate_by_currency: Dict[str, float] = {}

        for ticker, record in batch.results.items():
            from_currency = (record.currency or 'USD').upper()

            if from_currency == target_currency:
                batch.results[ticker] = record.model_copy(update={
                    'converted_price': round(record.price, 2),
                    'converted_currency': target_currency,
                    'exchange_rate': 1.0,
                })
                continue

            try:
                if from_currency not in rate_by_currency:
                    conversion = await self.currency.convert(1, from_currency, target_currency)
                    rate_by_currency[from_currency] = conversion.exchange_rate
                rate = rate_by_currency[from_currency]
            except Exception as e:
                self.logger.warning(f"Currency conversion failed for {ticker} ({from_currency} -> {target_currency}): {e}")
                continue

            batch.results[ticker] = record.model_copy(update={
                'converted_price': round(record.price * rate, 2),
                'converted_currency': target_currency,
                'exchange_rate': rate,
            })

        return batch

    async def validate_ticker(self, ticker: str) -> TickerValidation:
        return await self.stock_pricing.validate_ticker(ticker)

    async def get_bond_price(self, isin: str) -> BondPriceRecord:
        return await self.bond_pricing.get_bond_price(isin)

    async def get_exchange_rates(self, base_currency: str = 'USD') -> ExchangeRateTable:
        return await self.currency.get_rate_table(base_currency)

    async def convert(self, amount: float, from_currency: str, to_currency: str) -> CurrencyConversion:
        return await self.currency.convert(amount, from_currency, to_currency)

    async def convert_to_usd(self, amount: float, from_currency: str) -> UsdConversion:
        return await self.currency.convert_to_usd(amount, from_currency)

    async def get_supported_currencies(self) -> List[str]:
        return await self.currency.get_supported_currencies()

    def get_cache_stats(self) -> MarketDataCacheStats:
        return MarketDataCacheStats(
            stocks=self.stock_pricing.get_cache_stats(),
            bonds=self.bond_pricing.get_cache_stats(),
            currency=self.currency.get_cache_stats()
        )

    def clear_caches(self) -> None:
        self.stock_pricing.clear_cache()
        self.bond_pricing.clear_cache()
        self.currency.clear_cache()

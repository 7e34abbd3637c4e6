from .stock_pricing import StockPricingService
from .bond_pricing import BondPricingService
from .currency import CurrencyConversionService
from .fallback_rates import FALLBACK_USD_RATES, build_fallback_rates
from .market_data import MarketDataService

__all__ = [
    "StockPricingService",
    "BondPricingService",
    "CurrencyConversionService",
    "FALLBACK_USD_RATES",
    "build_fallback_rates",
    "MarketDataService",
]

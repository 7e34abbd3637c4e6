from .cache import TimedCache
from .circuit_breaker import CircuitBreaker
from .models import (
    # Diagnostics models
    CacheStats,
    CircuitStatus,
    MarketDataCacheStats,
    # Stock models
    StockPriceRecord,
    CompanyProfile,
    MultipleStockPricesResult,
    TickerValidation,
    # Bond models
    BondPriceRecord,
    BondPriceSource,
    # Currency models
    ExchangeRateTable,
    RateSource,
    CurrencyConversion,
    UsdConversion,
)
from .exceptions import (
    MarketDataError,
    InvalidArgumentError,
    ServiceUnavailableError,
    UpstreamError,
    SymbolNotFoundError,
    NoRateFoundError,
    NoPriceAvailableError,
    ConfigurationError,
)
from .services import (
    StockPricingService,
    BondPricingService,
    CurrencyConversionService,
    MarketDataService,
)

__version__ = "1.0.0"

__all__ = [
    "TimedCache",
    "CircuitBreaker",
    "CacheStats",
    "CircuitStatus",
    "MarketDataCacheStats",
    "StockPriceRecord",
    "CompanyProfile",
    "MultipleStockPricesResult",
    "TickerValidation",
    "BondPriceRecord",
    "BondPriceSource",
    "ExchangeRateTable",
    "RateSource",
    "CurrencyConversion",
    "UsdConversion",
    "MarketDataError",
    "InvalidArgumentError",
    "ServiceUnavailableError",
    "UpstreamError",
    "SymbolNotFoundError",
    "NoRateFoundError",
    "NoPriceAvailableError",
    "ConfigurationError",
    "StockPricingService",
    "BondPricingService",
    "CurrencyConversionService",
    "MarketDataService",
    "__version__",
]

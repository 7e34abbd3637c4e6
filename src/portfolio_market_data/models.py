from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, Field

# Cache models
class CacheEntry(BaseModel):
    """Cached value with the clock reading taken when it was stored"""
    value: Any
    stored_at: float

class CacheCounts(BaseModel):
    """Point-in-time entry counts for a single cache"""
    total: int = 0
    valid: int = 0
    expired: int = 0

class CircuitStatus(str, Enum):
    """Circuit breaker state as reported to diagnostics"""
    OPEN = "OPEN"
    CLOSED = "CLOSED"

class CacheStats(BaseModel):
    """Cache and breaker diagnostics for one service"""
    total_entries: int
    valid_entries: int
    expired_entries: int
    cache_ttl_seconds: float
    circuit_breaker_status: Optional[CircuitStatus] = None
    failure_count: int = 0

class MarketDataCacheStats(BaseModel):
    """Diagnostics for every market data service"""
    stocks: CacheStats
    bonds: CacheStats
    currency: CacheStats

# Stock models
class CompanyProfile(BaseModel):
    """Slow-changing company metadata used to enrich prices"""
    sector: Optional[str] = None
    industry: Optional[str] = None
    long_name: Optional[str] = None

class StockPriceRecord(BaseModel):
    """Price snapshot for one equity ticker"""
    ticker: str
    price: float
    currency: str
    name: str
    short_name: str
    sector: Optional[str] = None
    industry: Optional[str] = None
    exchange: str
    change: float
    change_percent: float
    previous_close: Optional[float] = None
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    volume: Optional[float] = None
    market_state: Optional[str] = None
    cached: bool = False
    timestamp: datetime
    # Only populated when a caller asks for a price in another currency
    converted_price: Optional[float] = None
    converted_currency: Optional[str] = None
    exchange_rate: Optional[float] = None

class MultipleStockPricesResult(BaseModel):
    """Prices and per-ticker error messages from a batch lookup"""
    results: Dict[str, StockPriceRecord] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)

class TickerValidation(BaseModel):
    """Outcome of a ticker validation lookup"""
    valid: bool
    ticker: str
    name: Optional[str] = None
    exchange: Optional[str] = None
    currency: Optional[str] = None
    price: Optional[float] = None
    error: Optional[str] = None

# Bond models
class BondPriceSource(str, Enum):
    LIVE = "live"
    CACHE = "cache"

class BondPriceRecord(BaseModel):
    """Bond price expressed as a percentage of par"""
    isin: str
    price_pct: float
    currency: str = "USD"
    source: BondPriceSource
    timestamp: datetime

# Currency models
class RateSource(str, Enum):
    LIVE = "live"
    CACHE = "cache"
    FALLBACK = "fallback"

class ExchangeRateTable(BaseModel):
    """Units of each target currency per one unit of the base currency"""
    base: str
    rates: Dict[str, float]
    source: RateSource
    timestamp: datetime

class CurrencyConversion(BaseModel):
    """Result of converting an amount between two currencies"""
    original_amount: float
    original_currency: str
    converted_amount: float
    target_currency: str
    exchange_rate: float
    fallback: bool = False
    timestamp: datetime

class UsdConversion(BaseModel):
    """Result of converting an amount into USD"""
    original_amount: float
    original_currency: str
    usd_amount: float
    exchange_rate: float
    fallback: bool = False
    timestamp: datetime

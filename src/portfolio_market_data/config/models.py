"""Pydantic models for market data configuration with validation."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator


class HTTPConfig(BaseModel):
    """Outbound HTTP settings shared by every provider client."""

    request_timeout_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=60.0,
        description="Total timeout for a single provider request"
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        description="User-Agent header sent to providers that reject bare clients"
    )


class StockPricingConfig(BaseModel):
    """Equity pricing cache and circuit breaker settings."""

    yahoo_base_url: str = Field(
        default="https://query1.finance.yahoo.com",
        description="Base URL for quote, chart and quoteSummary requests"
    )
    price_cache_ttl_seconds: float = Field(
        default=300.0,
        gt=0.0,
        le=3600.0,
        description="How long a stock price is served from cache"
    )
    profile_cache_ttl_seconds: float = Field(
        default=6 * 60 * 60.0,
        gt=0.0,
        le=7 * 24 * 60 * 60.0,
        description="How long sector/industry metadata is served from cache"
    )
    circuit_breaker_threshold: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Consecutive failures before the breaker opens"
    )
    circuit_breaker_reset_seconds: float = Field(
        default=60.0,
        gt=0.0,
        le=3600.0,
        description="Time since the last failure after which the breaker heals"
    )


class BondPricingConfig(BaseModel):
    """Bond pricing settings."""

    finnhub_base_url: str = Field(
        default="https://finnhub.io/api/v1",
        description="Base URL for Finnhub bond endpoints"
    )
    finnhub_api_key: Optional[str] = Field(
        default=None,
        description="Finnhub API key; falls back to FINNHUB_API_KEY at call time"
    )
    price_cache_ttl_seconds: float = Field(
        default=600.0,
        gt=0.0,
        le=24 * 60 * 60.0,
        description="How long a bond price is served from cache"
    )
    min_isin_length: int = Field(
        default=6,
        ge=1,
        le=12,
        description="Shortest identifier accepted as an ISIN"
    )


class CurrencyConfig(BaseModel):
    """Exchange rate cache and circuit breaker settings."""

    exchange_rate_base_url: str = Field(
        default="https://api.exchangerate-api.com",
        description="Base URL for the exchange rate table provider"
    )
    rate_cache_ttl_seconds: float = Field(
        default=600.0,
        gt=0.0,
        le=24 * 60 * 60.0,
        description="How long a rate table is served from cache"
    )
    circuit_breaker_threshold: int = Field(
        default=3,
        ge=1,
        le=100,
        description="Consecutive failures before the breaker opens"
    )
    circuit_breaker_reset_seconds: float = Field(
        default=60.0,
        gt=0.0,
        le=3600.0,
        description="Time since the last failure after which the breaker heals"
    )


class LoggingConfig(BaseModel):
    """Logging output settings."""

    level: str = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Render log records as plain text or JSON lines"
    )
    log_dir: Optional[str] = Field(
        default=None,
        description="Directory for the daily rotated log file; console only when unset"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate the level is one the logging module understands."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )
        return level


class AppConfig(BaseModel):
    """Root market data configuration."""

    http: HTTPConfig = Field(
        default_factory=HTTPConfig,
        description="Outbound HTTP settings"
    )
    stocks: StockPricingConfig = Field(
        default_factory=StockPricingConfig,
        description="Stock pricing settings"
    )
    bonds: BondPricingConfig = Field(
        default_factory=BondPricingConfig,
        description="Bond pricing settings"
    )
    currency: CurrencyConfig = Field(
        default_factory=CurrencyConfig,
        description="Currency conversion settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings"
    )

"""Configuration management for portfolio market data access."""

from .models import (
    AppConfig,
    HTTPConfig,
    StockPricingConfig,
    BondPricingConfig,
    CurrencyConfig,
    LoggingConfig,
)
from .loader import load_config, get_config, reset_config

__all__ = [
    "AppConfig",
    "HTTPConfig",
    "StockPricingConfig",
    "BondPricingConfig",
    "CurrencyConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    "reset_config",
]

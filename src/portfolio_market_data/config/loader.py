"""Configuration loader with validation and singleton access."""

import logging
import yaml
from pathlib import Path
from typing import Optional

from .models import AppConfig

logger = logging.getLogger(__name__)

# Global config singleton
_config: Optional[AppConfig] = None


def load_config(config_path: str | Path) -> AppConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config validation fails
        yaml.YAMLError: If YAML parsing fails
    """
    global _config

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raw_config = {}

    try:
        _config = AppConfig(**raw_config)
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ValueError(f"Invalid configuration: {e}") from e

    # Log loaded configuration for audit trail (never the API key itself)
    logger.info("Configuration loaded successfully:")
    logger.info(f"  HTTP request timeout: {_config.http.request_timeout_seconds}s")
    logger.info(f"  Stock price cache TTL: {_config.stocks.price_cache_ttl_seconds}s")
    logger.info(f"  Company profile cache TTL: {_config.stocks.profile_cache_ttl_seconds}s")
    logger.info(f"  Stock breaker: {_config.stocks.circuit_breaker_threshold} failures / {_config.stocks.circuit_breaker_reset_seconds}s")
    logger.info(f"  Bond price cache TTL: {_config.bonds.price_cache_ttl_seconds}s")
    logger.info(f"  Finnhub API key configured: {bool(_config.bonds.finnhub_api_key)}")
    logger.info(f"  Rate cache TTL: {_config.currency.rate_cache_ttl_seconds}s")
    logger.info(f"  Currency breaker: {_config.currency.circuit_breaker_threshold} failures / {_config.currency.circuit_breaker_reset_seconds}s")

    return _config


def get_config() -> AppConfig:
    """
    Get the current loaded configuration.

    Returns:
        Current AppConfig instance, or defaults when no file has been loaded
    """
    global _config

    if _config is None:
        logger.debug("No configuration file loaded, using defaults")
        _config = AppConfig()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration so the next get_config() starts fresh."""
    global _config
    _config = None

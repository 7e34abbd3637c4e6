"""
Tests for YAML configuration loading and validation.
"""

import pytest

from portfolio_market_data.config import (
    AppConfig,
    LoggingConfig,
    get_config,
    load_config,
    reset_config,
)


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    yield
    reset_config()


def write_config(tmp_path, text):
    path = tmp_path / 'config.yaml'
    path.write_text(text)
    return path


class TestLoadConfig:

    def test_loads_and_overrides_defaults(self, tmp_path):
        path = write_config(tmp_path, """
http:
  request_timeout_seconds: 5
stocks:
  price_cache_ttl_seconds: 120
  circuit_breaker_threshold: 2
bonds:
  finnhub_api_key: abc123
currency:
  rate_cache_ttl_seconds: 900
logging:
  level: debug
  format: json
""")

        config = load_config(path)

        assert config.http.request_timeout_seconds == 5
        assert config.stocks.price_cache_ttl_seconds == 120
        assert config.stocks.circuit_breaker_threshold == 2
        assert config.stocks.profile_cache_ttl_seconds == 21600
        assert config.bonds.finnhub_api_key == 'abc123'
        assert config.currency.rate_cache_ttl_seconds == 900
        assert config.currency.circuit_breaker_threshold == 3
        assert config.logging.level == 'DEBUG'
        assert config.logging.format == 'json'
        assert get_config() is config

    def test_empty_file_gives_defaults(self, tmp_path):
        config = load_config(write_config(tmp_path, ''))

        assert config == AppConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'absent.yaml')

    def test_invalid_values_raise_value_error(self, tmp_path):
        path = write_config(tmp_path, "stocks:\n  circuit_breaker_threshold: 0\n")

        with pytest.raises(ValueError, match='Invalid configuration'):
            load_config(path)

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            LoggingConfig(level='LOUD')


class TestGetConfig:

    def test_defaults_without_file(self):
        config = get_config()

        assert config.stocks.price_cache_ttl_seconds == 300
        assert config.stocks.circuit_breaker_reset_seconds == 60
        assert config.bonds.price_cache_ttl_seconds == 600
        assert config.bonds.finnhub_api_key is None
        assert config.currency.circuit_breaker_threshold == 3
        assert get_config() is config

    def test_reset_forgets_loaded_file(self, tmp_path):
        load_config(write_config(tmp_path, "stocks:\n  price_cache_ttl_seconds: 30\n"))

        reset_config()

        assert get_config().stocks.price_cache_ttl_seconds == 300

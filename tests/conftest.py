import logging

import pytest
from typing import Any, Dict, List, Optional, Tuple

from portfolio_market_data.config import (
    StockPricingConfig,
    BondPricingConfig,
    CurrencyConfig,
)
from portfolio_market_data.exceptions import UpstreamError
from portfolio_market_data.services import (
    StockPricingService,
    BondPricingService,
    CurrencyConversionService,
    MarketDataService,
)


class FakeClock:
    """Controllable replacement for time.time"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_chart(price: Optional[float] = 100.0, previous_close: Optional[float] = 95.0,
               currency: str = 'USD', short_name: str = 'Example Corp',
               exchange: str = 'NMS', market_state: str = 'REGULAR',
               ohlv: Optional[Dict[str, float]] = None) -> Dict[str, Any]:
    meta: Dict[str, Any] = {
        'currency': currency,
        'shortName': short_name,
        'exchangeName': exchange,
        'marketState': market_state,
    }
    if price is not None:
        meta['regularMarketPrice'] = price
    if previous_close is not None:
        meta['chartPreviousClose'] = previous_close
    ohlv = ohlv or {'open': 96.0, 'high': 101.0, 'low': 94.5, 'volume': 1200}
    return {
        'chart': {
            'result': [{
                'meta': meta,
                'indicators': {'quote': [{key: [value] for key, value in ohlv.items()}]},
            }],
            'error': None,
        }
    }


def not_found_chart(ticker: str) -> Dict[str, Any]:
    return {
        'chart': {
            'result': None,
            'error': {'code': 'Not Found', 'description': f'No data found, symbol may be delisted ({ticker})'},
        }
    }


class FakeYahooClient:
    """In-memory stand-in for YahooFinanceClient"""

    def __init__(self):
        self.quotes: Dict[str, Dict[str, Any]] = {}
        self.charts: Dict[str, Dict[str, Any]] = {}
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.quote_error: Optional[Exception] = None
        self.chart_error: Optional[Exception] = None
        self.profile_error: Optional[Exception] = None
        self.calls: List[Tuple[str, str]] = []

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    async def get_quote(self, ticker: str) -> Optional[Dict[str, Any]]:
        self.calls.append(('quote', ticker))
        if self.quote_error:
            raise self.quote_error
        return self.quotes.get(ticker)

    async def get_chart(self, ticker: str) -> Dict[str, Any]:
        self.calls.append(('chart', ticker))
        if self.chart_error:
            raise self.chart_error
        return self.charts.get(ticker) or not_found_chart(ticker)

    async def get_profile(self, ticker: str) -> Dict[str, Any]:
        self.calls.append(('profile', ticker))
        if self.profile_error:
            raise self.profile_error
        return self.profiles.get(ticker, {})


class FakeFinnhubClient:
    """In-memory stand-in for FinnhubBondClient; missing entries answer HTTP 404"""

    def __init__(self):
        self.responses: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Tuple[str, str, str]] = []

    async def get_bond_data(self, endpoint: str, isin: str, api_key: str) -> Any:
        self.calls.append((endpoint, isin, api_key))
        response = self.responses.get((endpoint, isin))
        if response is None:
            raise UpstreamError("HTTP 404")
        if isinstance(response, Exception):
            raise response
        return response


class FakeExchangeRateClient:
    """In-memory stand-in for ExchangeRateClient"""

    def __init__(self):
        self.tables: Dict[str, Dict[str, float]] = {}
        self.error: Optional[Exception] = None
        self.calls: List[str] = []

    async def get_rates(self, base_currency: str) -> Dict[str, float]:
        self.calls.append(base_currency)
        if self.error:
            raise self.error
        if base_currency not in self.tables:
            raise UpstreamError("Exchange rate API error: HTTP 404")
        return dict(self.tables[base_currency])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def yahoo():
    return FakeYahooClient()


@pytest.fixture
def finnhub():
    return FakeFinnhubClient()


@pytest.fixture
def fx_client():
    return FakeExchangeRateClient()


@pytest.fixture
def stock_service(yahoo, clock):
    return StockPricingService(client=yahoo, config=StockPricingConfig(), clock=clock)


@pytest.fixture
def bond_service(finnhub, clock):
    return BondPricingService(
        client=finnhub,
        config=BondPricingConfig(finnhub_api_key='test-key'),
        clock=clock
    )


@pytest.fixture
def currency_service(fx_client, clock):
    return CurrencyConversionService(client=fx_client, config=CurrencyConfig(), clock=clock)


@pytest.fixture
def market_data(stock_service, bond_service, currency_service):
    return MarketDataService(
        stock_pricing=stock_service,
        bond_pricing=bond_service,
        currency=currency_service
    )


@pytest.fixture
def root_logger():
    """Restore root logger handlers and level changed by configure_logging"""
    logger = logging.getLogger()
    handlers, level = logger.handlers[:], logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)

"""
Service container using dependency-injector for market data access
"""
import time

from dependency_injector import containers, providers

from portfolio_market_data.config import get_config
from portfolio_market_data.providers import (
    YahooFinanceClient,
    FinnhubBondClient,
    ExchangeRateClient,
)
from portfolio_market_data.services import (
    StockPricingService,
    BondPricingService,
    CurrencyConversionService,
    MarketDataService,
)


class MarketDataContainer(containers.DeclarativeContainer):
    """DI Container holding the process-wide market data services"""

    # Configuration
    config = providers.Singleton(get_config)

    # Time source for caches and breakers (overridden in tests)
    clock = providers.Object(time.time)

    # Provider clients
    yahoo_client = providers.Singleton(
        YahooFinanceClient,
        base_url=config.provided.stocks.yahoo_base_url,
        http_config=config.provided.http
    )

    finnhub_client = providers.Singleton(
        FinnhubBondClient,
        base_url=config.provided.bonds.finnhub_base_url,
        http_config=config.provided.http
    )

    exchange_rate_client = providers.Singleton(
        ExchangeRateClient,
        base_url=config.provided.currency.exchange_rate_base_url,
        http_config=config.provided.http
    )

    # Services (one cache set and breaker per process)
    stock_pricing_service = providers.Singleton(
        StockPricingService,
        client=yahoo_client,
        config=config.provided.stocks,
        clock=clock
    )

    bond_pricing_service = providers.Singleton(
        BondPricingService,
        client=finnhub_client,
        config=config.provided.bonds,
        clock=clock
    )

    currency_service = providers.Singleton(
        CurrencyConversionService,
        client=exchange_rate_client,
        config=config.provided.currency,
        clock=clock
    )

    market_data_service = providers.Singleton(
        MarketDataService,
        stock_pricing=stock_pricing_service,
        bond_pricing=bond_pricing_service,
        currency=currency_service
    )

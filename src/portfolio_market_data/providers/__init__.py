from .base import JSONProviderClient
from .yahoo import YahooFinanceClient
from .finnhub import FinnhubBondClient, BOND_ENDPOINTS
from .exchange_rates import ExchangeRateClient

__all__ = [
    "JSONProviderClient",
    "YahooFinanceClient",
    "FinnhubBondClient",
    "BOND_ENDPOINTS",
    "ExchangeRateClient",
]

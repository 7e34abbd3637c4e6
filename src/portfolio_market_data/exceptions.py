class MarketDataError(Exception):
    """Base class for market data access failures"""
    pass

class InvalidArgumentError(MarketDataError):
    """Raised when a ticker, ISIN or currency code is malformed"""
    pass

class ServiceUnavailableError(MarketDataError):
    """Raised when the circuit breaker is open and nothing is cached"""
    pass

class UpstreamError(MarketDataError):
    """Raised when a provider call fails or returns an error payload"""
    pass

class SymbolNotFoundError(MarketDataError):
    """Raised when a provider reports that the symbol does not exist"""
    pass

class NoRateFoundError(MarketDataError):
    """Raised when no exchange rate is available for a currency pair"""
    pass

class NoPriceAvailableError(MarketDataError):
    """Raised when a provider answered but had no usable price"""
    pass

class ConfigurationError(MarketDataError):
    """Raised when a required credential or setting is missing"""
    pass

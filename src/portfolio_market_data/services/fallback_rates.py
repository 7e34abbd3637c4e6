"""Static exchange rates used when the live rate provider is unavailable"""

from typing import Dict

# USD per one unit of each currency
FALLBACK_USD_RATES: Dict[str, float] = {
    'EUR': 1.10,
    'GBP': 1.27,
    'JPY': 0.0067,
    'CAD': 0.74,
    'AUD': 0.66,
    'CHF': 1.12,
    'CNY': 0.14,
    'HKD': 0.128,
    'SGD': 0.74,
    'INR': 0.012,
    'KRW': 0.00075,
    'TWD': 0.031,
    'NZD': 0.61,
    'SEK': 0.095,
    'NOK': 0.092,
    'DKK': 0.15,
    'MXN': 0.058,
    'BRL': 0.20,
    'ZAR': 0.055,
    'RUB': 0.011,
    'USD': 1.0,
}


def build_fallback_rates(base_currency: str) -> Dict[str, float]:
    """Build a rate table for base_currency from the static USD table.

    USD is returned verbatim. Any other known base is pivoted through USD:
    rate(base -> X) = usd_per[base] / usd_per[X]. An unknown base only knows
    its own identity rate.
    """
    base = base_currency.upper()
    if base == 'USD':
        return dict(FALLBACK_USD_RATES)

    base_to_usd = FALLBACK_USD_RATES.get(base)
    if not base_to_usd:
        return {base: 1.0}

    derived = {
        currency: base_to_usd / usd_per_unit
        for currency, usd_per_unit in FALLBACK_USD_RATES.items()
        if currency != base
    }
    derived[base] = 1.0
    return derived

"""
Tests for structured log formatting and lookup context propagation.
"""

import io
import json
import logging

from portfolio_market_data.context import get_current_lookup, lookup_context
from portfolio_market_data.config import LoggingConfig
from portfolio_market_data.logger import StructuredFormatter, configure_logging


def make_record(message='Fetching price', **extra):
    record = logging.LogRecord('portfolio_market_data.test', logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLookupContext:

    def test_context_is_restored(self):
        assert get_current_lookup() is None
        with lookup_context('stock:AAPL'):
            assert get_current_lookup() == 'stock:AAPL'
            with lookup_context('fx:USD'):
                assert get_current_lookup() == 'fx:USD'
            assert get_current_lookup() == 'stock:AAPL'
        assert get_current_lookup() is None


class TestStructuredFormatter:

    def test_json_output_carries_lookup_and_extras(self):
        formatter = StructuredFormatter('json')

        with lookup_context('stock:AAPL'):
            line = formatter.format(make_record(provider='yahoo'))

        data = json.loads(line)
        assert data['message'] == 'Fetching price'
        assert data['level'] == 'INFO'
        assert data['lookup'] == 'stock:AAPL'
        assert data['provider'] == 'yahoo'

    def test_text_output(self):
        formatter = StructuredFormatter('text')

        with lookup_context('bond:US912828ZT58'):
            line = formatter.format(make_record())

        assert 'portfolio_market_data.test - INFO - Fetching price' in line
        assert line.endswith('[lookup=bond:US912828ZT58]')

    def test_text_output_without_lookup(self):
        line = StructuredFormatter().format(make_record())

        assert '[lookup=' not in line


class TestConfigureLogging:

    def test_console_output_goes_to_given_stream(self, root_logger):
        stream = io.StringIO()

        configure_logging(LoggingConfig(level='info'), stream=stream)
        logging.getLogger('portfolio_market_data.test').info('Rates refreshed')

        assert 'Rates refreshed' in stream.getvalue()
        assert root_logger.level == logging.INFO
        assert logging.getLogger('aiohttp').level == logging.WARNING

"""
Tests for the market data inspection command line.
"""

import json

import pytest
from dependency_injector import providers

from portfolio_market_data import __main__ as cli
from portfolio_market_data.config import reset_config
from portfolio_market_data.container import MarketDataContainer
from portfolio_market_data.exceptions import UpstreamError

from conftest import make_chart


@pytest.fixture
def run_cli(market_data, root_logger, monkeypatch):
    """Run main() against the fake-backed market data service"""
    monkeypatch.delenv('CONFIG_PATH', raising=False)
    reset_config()

    def build_container():
        container = MarketDataContainer()
        container.market_data_service.override(providers.Object(market_data))
        return container

    monkeypatch.setattr(cli, 'MarketDataContainer', build_container)
    yield cli.main
    reset_config()


class TestParser:

    def test_every_lookup_has_a_subcommand(self):
        parser = cli._build_parser()

        assert parser.parse_args(['to-usd', '250', 'JPY']).from_currency == 'JPY'
        assert parser.parse_args(['validate', 'M&M.NS']).ticker == 'M&M.NS'
        assert parser.parse_args(['stocks', 'AAPL', '--convert-to', 'EUR']).convert_to == 'EUR'
        assert parser.parse_args(['rates']).base == 'USD'


class TestMain:

    def test_stdout_is_pure_json_while_logs_go_to_stderr(self, run_cli, fx_client, capsys):
        fx_client.error = UpstreamError("down")

        assert run_cli(['to-usd', '100', 'EUR']) == 0

        captured = capsys.readouterr()
        result = json.loads(captured.out)
        assert result['usd_amount'] == 110.0
        assert result['fallback'] is True
        assert 'fallback rates' in captured.err

    def test_validate(self, run_cli, yahoo, capsys):
        yahoo.charts['M&M.NS'] = make_chart(price=3000.0, currency='INR')

        assert run_cli(['validate', 'm&m.ns']) == 0

        result = json.loads(capsys.readouterr().out)
        assert result['valid'] is True
        assert result['ticker'] == 'M&M.NS'
        assert result['price'] == 3000.0

    def test_lookup_failure_exit_code(self, run_cli, capsys):
        assert run_cli(['bond', 'US912828ZT58']) == 1

        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'bond lookup failed' in captured.err

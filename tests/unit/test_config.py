"""
Unit Tests for Configuration Module

These tests verify that the configuration system works correctly:
- Default values are applied when nothing is set
- Comma-separated settings are parsed into lists
- Validation catches invalid configurations

Run with:
    pytest tests/unit/test_config.py -v
"""

import pytest
from core.config import KNOWN_UPSTREAM_HOSTS, Settings, validate_configuration


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestDefaults:
    """Test the values used when nothing is configured"""

    def test_request_timeout_is_ten_seconds(self):
        assert make_settings().request_timeout == 10.0

    def test_api_prefix(self):
        assert make_settings().api_prefix == "/api/v3"

    def test_default_hosts_are_known(self):
        hosts = make_settings().upstream_hosts_list
        assert len(hosts) >= 1
        assert all(host in KNOWN_UPSTREAM_HOSTS for host in hosts)

    def test_kline_defaults(self):
        config = make_settings()
        assert config.default_kline_symbol == "BTCUSDT"
        assert config.default_kline_interval == "1h"
        assert config.default_kline_limit == 60

    def test_exchange_info_allow_list_has_four_symbols(self):
        assert len(make_settings().exchange_info_symbols_list) == 4

    def test_ticker_allow_list_contains_majors(self):
        symbols = make_settings().ticker_symbols_list
        assert {"BTCUSDT", "ETHUSDT", "SOLUSDT"} <= set(symbols)
        assert 13 <= len(symbols) <= 15

    def test_defaults_pass_validation(self):
        validate_configuration(make_settings())


class TestListParsing:
    """Test that comma-separated settings are parsed correctly"""

    def test_symbols_are_uppercased_and_stripped(self):
        config = make_settings(ticker_symbols=" btcusdt , ethusdt,,")
        assert config.ticker_symbols_list == ["BTCUSDT", "ETHUSDT"]

    def test_hosts_are_lowercased_in_order(self):
        config = make_settings(upstream_hosts="API2.binance.com, api1.binance.com")
        assert config.upstream_hosts_list == ["api2.binance.com", "api1.binance.com"]

    def test_cors_origins_list(self):
        config = make_settings(cors_origins="http://localhost:3000, https://app.example.com")
        assert config.cors_origins_list == ["http://localhost:3000", "https://app.example.com"]


class TestConfigurationValidation:
    """Test that validate_configuration rejects bad settings"""

    @pytest.mark.parametrize("overrides", [
        {"upstream_hosts": ""},
        {"upstream_hosts": "api.evil.example.com"},
        {"api_prefix": "api/v3"},
        {"request_timeout": 0},
        {"ticker_symbols": ""},
        {"exchange_info_symbols": " , "},
        {"default_kline_symbol": "btcusdt"},
        {"cors_origin_regex": "(unclosed"},
        {"app_port": 70000},
        {"log_level": "VERBOSE"},
    ])
    def test_invalid_settings_raise(self, overrides):
        with pytest.raises(ValueError):
            validate_configuration(make_settings(**overrides))

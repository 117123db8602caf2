"""
Tests for AppConfig.
"""

from decimal import Decimal

import pytest

from thalexa.core.config import AppConfig
from thalexa.core.exceptions import ConfigurationError


def test_defaults_without_file(tmp_path):
    config = AppConfig(str(tmp_path / "missing.ini"))

    assert config.ledger_config.network == "mainnet"
    assert config.ledger_config.settle_delay_ms == 2000
    assert config.ledger_config.operation_timeout_ms == 0
    assert config.auth_config.settle_delay_ms == 1500
    assert config.refresh_config.balance_interval_ms == 30000
    assert config.refresh_config.health_interval_ms == 60000
    assert config.pricing_config.price_of("sui") == Decimal("1.5")
    assert config.log_level == "INFO"


def test_reads_ini_file(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(
        "[STORAGE]\npath = /data/thalexa\n"
        "[LEDGER]\nnetwork = testnet\nverify_base_url = https://verify.example/\n"
        "[PRICING]\nUSDC = 1\n"
    )

    config = AppConfig(str(path))

    assert config.storage_config.path == "/data/thalexa"
    assert config.ledger_config.network == "testnet"
    assert config.ledger_config.rpc_url == "https://fullnode.testnet.sui.io"
    assert config.ledger_config.verify_base_url == "https://verify.example"
    assert config.pricing_config.price_of("USDC") == Decimal("1")


def test_from_dict():
    config = AppConfig.from_dict({"REFRESH": {"balance_interval_ms": "5"}})

    assert config.refresh_config.balance_interval_ms == 5


def test_override_replaces_a_single_value():
    config = AppConfig.from_dict({"STORAGE": {"path": "/data/thalexa"}})

    config.override("STORAGE", "path", "/tmp/other")
    config.override("LOGGING", "level", "DEBUG")

    assert config.storage_config.path == "/tmp/other"
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["soon", "-5"])
def test_bad_interval_is_a_configuration_error(value):
    config = AppConfig.from_dict({"REFRESH": {"balance_interval_ms": value}})

    with pytest.raises(ConfigurationError):
        config.refresh_config


def test_bad_price_is_a_configuration_error():
    config = AppConfig.from_dict({"PRICING": {"SUI": "cheap"}})

    with pytest.raises(ConfigurationError):
        config.pricing_config

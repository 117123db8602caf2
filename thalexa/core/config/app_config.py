"""
Application configuration management.

Provides centralized access to configuration values with:
- Typed configuration objects
- Default values for missing config
"""

from __future__ import annotations
import configparser
import os
from decimal import Decimal, InvalidOperation
from typing import Dict
from dataclasses import dataclass, field
import logging

from thalexa.core.exceptions import ConfigurationError

log = logging.getLogger("ThalexaLogger")


@dataclass
class StorageConfig:
    """Local snapshot storage configuration."""

    path: str
    state_file: str = "thalexa_state.json"
    theme_file: str = "thalexa_theme.json"


@dataclass
class LedgerConfig:
    """Ledger service configuration."""

    network: str
    rpc_url: str
    verify_base_url: str
    settle_delay_ms: int
    operation_timeout_ms: int
    faucet_amount: Decimal = Decimal("100")


@dataclass
class AuthConfig:
    """Identity provider configuration."""

    settle_delay_ms: int
    wallet_install_url: str


@dataclass
class RefreshConfig:
    """Background refresh intervals."""

    balance_interval_ms: int
    health_interval_ms: int


@dataclass
class PricingConfig:
    """Token prices in USD used for derived totals."""

    prices: Dict[str, Decimal] = field(default_factory=dict)

    def price_of(self, token: str) -> Decimal:
        return self.prices.get(token.upper(), Decimal("0"))


class AppConfig:
    """
    Centralized configuration management.

    Reads from config.ini and provides typed configuration objects.

    Each instance reads its own file so that tests and multiple
    controllers can run side by side.

    Example:
        config = AppConfig("config.ini")
        ledger = config.ledger_config
        print(f"Ledger at {ledger.rpc_url}")
    """

    DEFAULT_RPC_URLS = {
        "mainnet": "https://fullnode.mainnet.sui.io",
        "testnet": "https://fullnode.testnet.sui.io",
        "devnet": "https://fullnode.devnet.sui.io",
    }

    def __init__(self, config_path: str = "config.ini"):
        """
        Initialize configuration.

        Args:
            config_path: Path to config.ini file
        """
        self._config = configparser.ConfigParser()
        # Keep token symbols as written
        self._config.optionxform = str

        if config_path and os.path.exists(config_path):
            self._config.read(config_path)
            log.info(f"Configuration loaded from {config_path}")
        elif config_path:
            log.warning(f"Config file not found at {config_path}, using defaults")

    @classmethod
    def from_dict(cls, values: Dict[str, Dict[str, str]]) -> AppConfig:
        """
        Build a configuration from nested section/key values.

        Args:
            values: Mapping of section name to key/value pairs

        Returns:
            Configuration that does not touch the filesystem
        """
        config = cls(config_path="")
        config._config.read_dict(values)
        return config

    def override(self, section: str, key: str, value: str) -> None:
        """
        Replace a single value, e.g. from a command line option.

        Args:
            section: Config section name
            key: Key within section
            value: New raw value
        """
        if not self._config.has_section(section):
            self._config.add_section(section)
        self._config[section][key] = value

    @property
    def storage_config(self) -> StorageConfig:
        """Get snapshot storage configuration."""
        path = self._get_value("STORAGE", "path", "~/.thalexa")
        return StorageConfig(
            path=os.path.expanduser(path),
            state_file=self._get_value("STORAGE", "state_file", "thalexa_state.json"),
            theme_file=self._get_value("STORAGE", "theme_file", "thalexa_theme.json"),
        )

    @property
    def ledger_config(self) -> LedgerConfig:
        """Get ledger service configuration."""
        network = self._get_value("LEDGER", "network", "mainnet")
        return LedgerConfig(
            network=network,
            rpc_url=self._get_value(
                "LEDGER",
                "rpc_url",
                self.DEFAULT_RPC_URLS.get(network, self.DEFAULT_RPC_URLS["mainnet"]),
            ),
            verify_base_url=self._get_value(
                "LEDGER", "verify_base_url", "https://thalexa.com/verify"
            ).rstrip("/"),
            settle_delay_ms=self._get_int("LEDGER", "settle_delay_ms", 2000),
            operation_timeout_ms=self._get_int("LEDGER", "operation_timeout_ms", 0),
            faucet_amount=self._get_decimal("LEDGER", "faucet_amount", "100"),
        )

    @property
    def auth_config(self) -> AuthConfig:
        """Get identity provider configuration."""
        return AuthConfig(
            settle_delay_ms=self._get_int("AUTH", "settle_delay_ms", 1500),
            wallet_install_url=self._get_value(
                "AUTH",
                "wallet_install_url",
                "https://chrome.google.com/webstore/detail/sui-wallet/"
                "opcgpfpikagdllpmehafcpipfilcbmhj",
            ),
        )

    @property
    def refresh_config(self) -> RefreshConfig:
        """Get background refresh intervals."""
        return RefreshConfig(
            balance_interval_ms=self._get_int("REFRESH", "balance_interval_ms", 30000),
            health_interval_ms=self._get_int("REFRESH", "health_interval_ms", 60000),
        )

    @property
    def pricing_config(self) -> PricingConfig:
        """Get token prices."""
        prices = {"SUI": Decimal("1.5")}
        if self._config.has_section("PRICING"):
            for token, raw in self._config["PRICING"].items():
                prices[token.upper()] = self._get_decimal("PRICING", token, raw)
        return PricingConfig(prices=prices)

    @property
    def log_level(self) -> str:
        """Get log level."""
        return self._get_value("LOGGING", "level", "INFO")

    def _get_value(self, section: str, key: str, default: str = "") -> str:
        """
        Get a configuration value.

        Args:
            section: Config section name
            key: Key within section
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        try:
            return self._config[section][key]
        except KeyError:
            return default

    def _get_int(self, section: str, key: str, default: int) -> int:
        raw = self._get_value(section, key, str(default))
        try:
            value = int(raw)
        except ValueError:
            raise ConfigurationError(f"{section}.{key}", "must be an integer")
        if value < 0:
            raise ConfigurationError(f"{section}.{key}", "must not be negative")
        return value

    def _get_decimal(self, section: str, key: str, default: str) -> Decimal:
        raw = self._get_value(section, key, default)
        try:
            return Decimal(raw)
        except InvalidOperation:
            raise ConfigurationError(f"{section}.{key}", "is not a number")


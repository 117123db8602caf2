"""
Configuration module.
"""

from thalexa.core.config.app_config import (
    AppConfig,
    StorageConfig,
    LedgerConfig,
    AuthConfig,
    RefreshConfig,
    PricingConfig,
)

__all__ = [
    "AppConfig",
    "StorageConfig",
    "LedgerConfig",
    "AuthConfig",
    "RefreshConfig",
    "PricingConfig",
]

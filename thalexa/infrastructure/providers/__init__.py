"""
Identity provider implementations.
"""

from thalexa.infrastructure.providers.simulated_providers import (
    MagicLinkProvider,
    NewWalletProvider,
    SeedPhraseProvider,
    SimulatedProvider,
    WalletExtension,
    WalletExtensionProvider,
    ZkLoginProvider,
)

__all__ = [
    "MagicLinkProvider",
    "NewWalletProvider",
    "SeedPhraseProvider",
    "SimulatedProvider",
    "WalletExtension",
    "WalletExtensionProvider",
    "ZkLoginProvider",
]

"""
ApplicationState - the full client state persisted between runs.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from thalexa.domain.entities.notification import Notification
from thalexa.domain.entities.product import Product
from thalexa.domain.entities.session import UserIdentity, WalletBinding


class Network(Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"
    DEVNET = "devnet"


class Currency(Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    SUI = "SUI"


class Theme(Enum):
    DARK = "dark"
    LIGHT = "light"

    def toggled(self) -> Theme:
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


@dataclass
class ApplicationState:
    """
    Client state shared by the session, pipeline and refresher.

    Mutated only on the Qt main thread, and only through the services that
    own each field. `is_authenticated` is derived from the wallet binding
    and cannot be set.

    Attributes:
        user: Identity claim, set only by the session manager
        wallet: Bound wallet, at most one
        balances: Token symbol -> amount, replaced wholesale on refresh
        products: Registered products in registration order
        notifications: Notification log, newest first
    """

    user: Optional[UserIdentity] = None
    wallet: Optional[WalletBinding] = None
    balances: Dict[str, Decimal] = field(default_factory=dict)
    products: List[Product] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    network: Network = Network.MAINNET
    currency: Currency = Currency.USD
    theme: Theme = Theme.DARK

    @property
    def is_authenticated(self) -> bool:
        return self.wallet is not None and self.wallet.connected

    @property
    def address(self) -> Optional[str]:
        return self.wallet.address if self.wallet else None

    def find_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def product_ids(self) -> List[str]:
        return [p.id for p in self.products]

    def reset(self) -> None:
        """Reset every field to its default in place."""
        default = ApplicationState()
        self.user = default.user
        self.wallet = default.wallet
        self.balances = default.balances
        self.products = default.products
        self.notifications = default.notifications
        self.network = default.network
        self.currency = default.currency
        self.theme = default.theme

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for serialization.

        Returns:
            JSON-compatible snapshot
        """
        return {
            "user": self.user.to_dict() if self.user else None,
            "wallet": self.wallet.to_dict() if self.wallet else None,
            "is_authenticated": self.is_authenticated,
            "balances": {token: str(amount) for token, amount in self.balances.items()},
            "products": [p.to_dict() for p in self.products],
            "notifications": [n.to_dict() for n in self.notifications],
            "network": self.network.value,
            "currency": self.currency.value,
            "theme": self.theme.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ApplicationState:
        """
        Create from a snapshot dictionary.

        Missing keys take their defaults; `is_authenticated` is ignored
        because it is derived from the wallet.

        Raises:
            ValueError, TypeError, KeyError: If the snapshot is malformed
        """
        if not isinstance(data, dict):
            raise TypeError(f"State snapshot must be an object, got {type(data).__name__}")

        user = data.get("user")
        wallet = data.get("wallet")
        balances = data.get("balances") or {}

        return cls(
            user=UserIdentity.from_dict(user) if user else None,
            wallet=WalletBinding.from_dict(wallet) if wallet else None,
            balances={str(token): Decimal(str(amount)) for token, amount in balances.items()},
            products=[Product.from_dict(p) for p in data.get("products") or []],
            notifications=[Notification.from_dict(n) for n in data.get("notifications") or []],
            network=Network(data.get("network") or Network.MAINNET.value),
            currency=Currency(data.get("currency") or Currency.USD.value),
            theme=Theme(data.get("theme") or Theme.DARK.value),
        )

"""
Domain entities.
"""

from thalexa.domain.entities.app_state import ApplicationState, Network, Currency, Theme
from thalexa.domain.entities.notification import Notification, NotificationType
from thalexa.domain.entities.product import Product, ProductDraft, parse_amount
from thalexa.domain.entities.session import (
    Credential,
    UserIdentity,
    WalletBinding,
    format_address,
)

__all__ = [
    "ApplicationState",
    "Network",
    "Currency",
    "Theme",
    "Notification",
    "NotificationType",
    "Product",
    "ProductDraft",
    "parse_amount",
    "Credential",
    "UserIdentity",
    "WalletBinding",
    "format_address",
]

"""
Pages and their refresh hooks.

A hook turns the current state into the data a page shows. Hooks are
pure: they read the state and never change it.
"""

from __future__ import annotations
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict

from thalexa.core.config.app_config import PricingConfig
from thalexa.domain.entities.app_state import ApplicationState, Currency, Network, Theme
from thalexa.domain.entities.session import format_address

ViewData = Dict[str, Any]
RefreshHook = Callable[[ApplicationState, PricingConfig], ViewData]


class Page(Enum):
    """Navigable pages."""

    HOME = "home"
    DASHBOARD = "dashboard"
    WALLET = "wallet"
    PRODUCTS = "products"
    VERIFY = "verify"
    SETTINGS = "settings"

    @classmethod
    def from_token(cls, token: Any) -> Page:
        """
        Map a location token ("#wallet", "wallet", Page.WALLET) to a page.

        Unknown tokens map to HOME.
        """
        if isinstance(token, Page):
            return token
        value = str(token or "").strip().lstrip("#").lower()
        try:
            return cls(value)
        except ValueError:
            return cls.HOME

    @property
    def requires_auth(self) -> bool:
        return self in AUTH_REQUIRED_PAGES


AUTH_REQUIRED_PAGES = frozenset({Page.DASHBOARD})


def total_value(state: ApplicationState, pricing: PricingConfig) -> Decimal:
    """USD value of all balances at the configured prices."""
    return sum(
        (amount * pricing.price_of(token) for token, amount in state.balances.items()),
        Decimal("0"),
    )


def _home(state: ApplicationState, pricing: PricingConfig) -> ViewData:
    return {
        "is_authenticated": state.is_authenticated,
        "display_name": state.user.display_name if state.user else "",
        "product_count": len(state.products),
    }


def _dashboard(state: ApplicationState, pricing: PricingConfig) -> ViewData:
    return {
        "total_balance": total_value(state, pricing).quantize(Decimal("0.01")),
        "product_count": len(state.products),
        "verified_count": sum(1 for p in state.products if p.verified),
        "network": state.network.value,
        "unread_notifications": sum(1 for n in state.notifications if not n.read),
        "recent_notifications": [n.to_dict() for n in state.notifications[:5]],
    }


def _wallet(state: ApplicationState, pricing: PricingConfig) -> ViewData:
    return {
        "address": state.address,
        "short_address": format_address(state.address),
        "provider": state.wallet.provider if state.wallet else None,
        "balances": dict(state.balances),
        "total_balance": total_value(state, pricing).quantize(Decimal("0.01")),
    }


def _products(state: ApplicationState, pricing: PricingConfig) -> ViewData:
    return {
        "products": [p.to_dict() for p in state.products],
        "owned_count": sum(
            1 for p in state.products if state.address and p.owner_address == state.address
        ),
    }


def _verify(state: ApplicationState, pricing: PricingConfig) -> ViewData:
    return {"known_product_ids": state.product_ids()}


def _settings(state: ApplicationState, pricing: PricingConfig) -> ViewData:
    return {
        "network": state.network.value,
        "currency": state.currency.value,
        "theme": state.theme.value,
        "networks": [n.value for n in Network],
        "currencies": [c.value for c in Currency],
        "themes": [t.value for t in Theme],
    }


REFRESH_HOOKS: Dict[Page, RefreshHook] = {
    Page.HOME: _home,
    Page.DASHBOARD: _dashboard,
    Page.WALLET: _wallet,
    Page.PRODUCTS: _products,
    Page.VERIFY: _verify,
    Page.SETTINGS: _settings,
}

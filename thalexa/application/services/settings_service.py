"""
Settings service - network, currency and theme preferences.
"""

import logging
from typing import Optional

from thalexa.core.exceptions import ValidationError
from thalexa.domain.entities.app_state import Currency, Network, Theme
from thalexa.presentation.state.store import AppStore, NoticeLevel, StateSection

log = logging.getLogger("ThalexaLogger")


class SettingsService:
    """Validates and stores user preferences."""

    def __init__(self, store: AppStore):
        self._store = store

    def save_settings(
        self, network: Optional[str] = None, currency: Optional[str] = None
    ) -> None:
        """
        Update network and/or currency.

        Args:
            network: One of mainnet, testnet, devnet
            currency: One of USD, EUR, GBP, SUI

        Raises:
            ValidationError: If a value is not allowed (nothing is changed)
        """
        try:
            new_network = Network(network) if network else None
        except ValueError:
            raise ValidationError("network", f"unknown network '{network}'")
        try:
            new_currency = Currency(currency.upper()) if currency else None
        except ValueError:
            raise ValidationError("currency", f"unknown currency '{currency}'")

        state = self._store.state
        if new_network is not None:
            state.network = new_network
        if new_currency is not None:
            state.currency = new_currency
        self._store.commit(StateSection.SETTINGS)

        log.info(f"Settings saved: network={state.network.value}, currency={state.currency.value}")
        self._store.post_notice(NoticeLevel.SUCCESS, "Settings saved successfully")

    def toggle_theme(self) -> Theme:
        """
        Switch between dark and light.

        Returns:
            The new theme
        """
        state = self._store.state
        state.theme = state.theme.toggled()
        self._store.repository.save_theme(state.theme)
        self._store.commit(StateSection.SETTINGS)
        log.info(f"Theme switched to {state.theme.value}")
        return state.theme

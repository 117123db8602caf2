"""
Background refresh service.

Two fixed-interval timers keep the ledger-derived view fresh while the
application runs, whatever page is shown:
- balances: replaced wholesale from the ledger
- health: ledger endpoint probe
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from thalexa.core.interfaces.ledger import ILedgerClient
from thalexa.presentation.state.store import AppStore, StateSection

log = logging.getLogger("ThalexaLogger")


class RefreshService(QObject):
    """
    Periodic balance and health refresh.

    Failed ticks are logged and skipped; the next tick simply tries again.

    Example:
        refresher = RefreshService(store, ledger, 30000, 60000)
        refresher.start()
    """

    balances_refreshed = pyqtSignal(object)  # Dict[str, Decimal]
    health_checked = pyqtSignal(bool)

    def __init__(
        self,
        store: AppStore,
        ledger: ILedgerClient,
        balance_interval_ms: int = 30000,
        health_interval_ms: int = 60000,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._store = store
        self._ledger = ledger
        self._last_health: Optional[Dict[str, Any]] = None

        self._balance_timer = QTimer(self)
        self._balance_timer.setInterval(balance_interval_ms)
        self._balance_timer.timeout.connect(self.refresh_balances)

        self._health_timer = QTimer(self)
        self._health_timer.setInterval(health_interval_ms)
        self._health_timer.timeout.connect(self.check_health)

    def start(self) -> None:
        """Start both timers."""
        if self.is_running:
            return
        self._balance_timer.start()
        self._health_timer.start()
        log.info(
            f"RefreshService started: balances every {self._balance_timer.interval()}ms, "
            f"health every {self._health_timer.interval()}ms"
        )

    def stop(self) -> None:
        """Stop both timers."""
        self._balance_timer.stop()
        self._health_timer.stop()
        log.info("RefreshService stopped")

    def dispose(self) -> None:
        self.stop()

    @property
    def is_running(self) -> bool:
        return self._balance_timer.isActive() or self._health_timer.isActive()

    @property
    def last_health(self) -> Optional[Dict[str, Any]]:
        return self._last_health

    def refresh_balances(self) -> None:
        """Fetch balances for the bound wallet and replace the stored ones."""
        address = self._store.state.address
        if not address:
            return

        def on_balances(balances: Optional[Dict[str, Decimal]], error: Optional[Exception]) -> None:
            if error is not None or balances is None:
                log.warning(f"Balance refresh failed: {error}")
                return
            # The wallet may have changed while the request was in flight
            if self._store.state.address != address:
                log.debug("Balance refresh dropped: wallet changed")
                return
            try:
                fresh = {str(token): Decimal(str(amount)) for token, amount in balances.items()}
            except ArithmeticError as e:
                log.warning(f"Balance refresh skipped, bad amount: {e}")
                return
            self._store.state.balances = fresh
            self._store.commit(StateSection.BALANCES)
            self.balances_refreshed.emit(dict(self._store.state.balances))

        self._ledger.fetch_balances(address, on_balances)

    def check_health(self) -> None:
        """Probe the ledger endpoint."""

        def on_health(status: Optional[Dict[str, Any]], error: Optional[Exception]) -> None:
            if error is not None or status is None:
                log.warning(f"Ledger health check failed: {error}")
                return
            self._last_health = dict(status)
            healthy = bool(status.get("healthy", False))
            if not healthy:
                log.warning(f"Ledger reported unhealthy: {status}")
            self.health_checked.emit(healthy)

        self._ledger.check_health(on_health)

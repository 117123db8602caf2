"""
Simulated ledger client.

Stands in for the real ledger RPC: every call settles after a fixed delay
on the Qt event loop, so completions arrive on the main thread exactly
like a network reply would.
"""

from __future__ import annotations
import logging
import secrets
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable

from PyQt6.QtCore import QTimer

from thalexa.core.exceptions import ProviderError
from thalexa.core.interfaces.ledger import BalancesCallback, ILedgerClient, ResultCallback
from thalexa.domain.entities.product import Product
from thalexa.domain.value_objects.operation import OperationKind

log = logging.getLogger("ThalexaLogger")


def random_address() -> str:
    """Random 0x-prefixed 20-byte hex address."""
    return "0x" + secrets.token_hex(20)


class SimulatedLedgerClient(ILedgerClient):
    """
    In-process ledger simulation.

    Keeps a product registry and per-address balances. New addresses are
    credited with a faucet amount the first time they are seen so that
    payments can be tried out.

    Example:
        ledger = SimulatedLedgerClient(settle_delay_ms=2000)
        ledger.submit(OperationKind.VERIFY, {"product_id": "prod_1"}, on_done)
    """

    def __init__(
        self,
        settle_delay_ms: int = 2000,
        network: str = "mainnet",
        faucet_amount: Decimal = Decimal("100"),
        endpoint: str = "",
    ):
        self._delay = settle_delay_ms
        self._network = network
        self._endpoint = endpoint
        self._faucet = faucet_amount
        self._registry: Dict[str, Dict[str, Any]] = {}
        self._balances: Dict[str, Dict[str, Decimal]] = {}
        self._checkpoint = 0
        self._handlers: Dict[OperationKind, Callable[[Dict[str, Any]], Any]] = {
            OperationKind.REGISTER: self._register,
            OperationKind.VERIFY: self._verify,
            OperationKind.SEND: self._send,
        }

    def preload(self, products: Iterable[Product]) -> None:
        """Seed the registry with products already known on this device."""
        for product in products:
            self._registry[product.id] = product.to_dict()
        log.debug(f"Ledger registry preloaded with {len(self._registry)} products")

    # ----------------------------------------------------------------
    # ILedgerClient Implementation
    # ----------------------------------------------------------------

    def submit(
        self,
        kind: OperationKind,
        payload: Dict[str, Any],
        callback: ResultCallback,
    ) -> None:
        handler = self._handlers[kind]
        log.debug(f"Ledger submit {kind.value}: settles in {self._delay}ms")
        self._defer(lambda: handler(payload), callback)

    def fetch_balances(self, address: str, callback: BalancesCallback) -> None:
        self._defer(lambda: dict(self._account(address)), callback)

    def check_health(self, callback: ResultCallback) -> None:
        def probe() -> Dict[str, Any]:
            self._checkpoint += 1
            return {
                "healthy": True,
                "network": self._network,
                "endpoint": self._endpoint,
                "checkpoint": self._checkpoint,
            }

        self._defer(probe, callback)

    # ----------------------------------------------------------------
    # Simulation
    # ----------------------------------------------------------------

    def _defer(self, work: Callable[[], Any], callback: Callable[[Any, Any], None]) -> None:
        def complete() -> None:
            try:
                result = work()
            except ProviderError as e:
                callback(None, e)
                return
            callback(result, None)

        QTimer.singleShot(self._delay, complete)

    def _account(self, address: str) -> Dict[str, Decimal]:
        if address not in self._balances:
            self._balances[address] = {"SUI": self._faucet}
        return self._balances[address]

    def _register(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        record = dict(payload["product"])
        ledger_ref = random_address()
        record["ledger_ref"] = ledger_ref
        self._registry[record["id"]] = record
        return {"ledger_ref": ledger_ref}

    def _verify(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        record = self._registry.get(payload["product_id"])
        return {"found": record is not None, "product": dict(record) if record else None}

    def _send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        token = payload["token"].upper()
        amount = Decimal(payload["amount"])
        sender = self._account(payload["sender"])
        available = sender.get(token, Decimal("0"))
        if available < amount:
            raise ProviderError("ledger", f"insufficient {token} balance")

        sender[token] = available - amount
        recipient = self._account(payload["recipient"])
        recipient[token] = recipient.get(token, Decimal("0")) + amount
        return {"digest": secrets.token_hex(32)}

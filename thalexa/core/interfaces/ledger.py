"""
Ledger client interface.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from thalexa.domain.value_objects.operation import OperationKind

ResultCallback = Callable[[Optional[Any], Optional[Exception]], None]
BalancesCallback = Callable[[Optional[Dict[str, Decimal]], Optional[Exception]], None]


class ILedgerClient(ABC):
    """
    Abstract interface for the backing ledger service.

    Uses the callback-based async pattern. Every call completes exactly
    once with (result, None) or (None, error).

    Results by kind:
        register -> {"ledger_ref": str}
        verify   -> {"found": bool, "product": dict | None}
        send     -> {"digest": str}
    """

    @abstractmethod
    def submit(
        self,
        kind: OperationKind,
        payload: Dict[str, Any],
        callback: ResultCallback,
    ) -> None:
        """
        Submit an operation.

        Args:
            kind: Operation kind
            payload: Operation payload
            callback: Completion callback
        """
        pass

    @abstractmethod
    def fetch_balances(self, address: str, callback: BalancesCallback) -> None:
        """
        Read all balances of an address.

        Args:
            address: Wallet address
            callback: Called with a token -> amount mapping
        """
        pass

    @abstractmethod
    def check_health(self, callback: ResultCallback) -> None:
        """
        Probe the ledger endpoint.

        Args:
            callback: Called with a status dict (at least {"healthy": bool})
        """
        pass

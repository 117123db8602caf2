"""
Operation handles - transient records of in-flight asynchronous calls.

A handle starts pending (or is rejected straight to failed) and reaches
exactly one terminal state. Handles are never persisted.
"""

from __future__ import annotations
import itertools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from thalexa.domain.entities.session import Credential

_operation_ids = itertools.count(1)


class OperationKind(Enum):
    """Ledger operations supported by the pipeline."""

    REGISTER = "register"
    VERIFY = "verify"
    SEND = "send"


class OperationState(Enum):
    """Lifecycle state of an operation handle."""

    PENDING = "pending"
    SETTLED = "settled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not OperationState.PENDING


class _Handle:
    """Shared transition rules for operation handles."""

    state: OperationState
    error: Optional[Exception]
    settled_at: Optional[float]

    @property
    def is_pending(self) -> bool:
        return self.state is OperationState.PENDING

    @property
    def is_settled(self) -> bool:
        return self.state is OperationState.SETTLED

    @property
    def is_failed(self) -> bool:
        return self.state is OperationState.FAILED

    @property
    def entered_pending(self) -> bool:
        """False for calls rejected before any pending state."""
        return self._entered_pending

    def _finish(self, state: OperationState, error: Optional[Exception] = None) -> bool:
        if self.state.is_terminal:
            return False
        self.state = state
        self.error = error
        self.settled_at = time.time()
        return True


@dataclass(eq=False)
class LedgerOperation(_Handle):
    """
    A register/verify/send call against the ledger.

    Attributes:
        kind: Operation kind
        input: Caller input as submitted
        result: Settled value (Product, VerificationRecord, receipt dict)
        error: Failure cause when failed
    """

    kind: OperationKind
    input: Dict[str, Any] = field(default_factory=dict)
    state: OperationState = OperationState.PENDING
    result: Any = None
    error: Optional[Exception] = None
    id: int = field(default_factory=lambda: next(_operation_ids))
    created_at: float = field(default_factory=time.time)
    settled_at: Optional[float] = None
    _entered_pending: bool = field(default=True, repr=False)

    @classmethod
    def rejected(
        cls, kind: OperationKind, error: Exception, input: Optional[Dict[str, Any]] = None
    ) -> LedgerOperation:
        """Build a handle that failed before entering pending."""
        op = cls(kind=kind, input=input or {}, _entered_pending=False)
        op._finish(OperationState.FAILED, error)
        return op

    def settle(self, result: Any) -> bool:
        """
        Move to settled.

        Returns:
            False if the operation already reached a terminal state
        """
        if not self._finish(OperationState.SETTLED):
            return False
        self.result = result
        return True

    def fail(self, error: Exception) -> bool:
        """
        Move to failed.

        Returns:
            False if the operation already reached a terminal state
        """
        return self._finish(OperationState.FAILED, error)

    def __repr__(self) -> str:
        return f"LedgerOperation(id={self.id}, kind={self.kind.value}, state={self.state.value})"


@dataclass(eq=False)
class AuthAttempt(_Handle):
    """A connect call against an identity provider."""

    provider: str
    state: OperationState = OperationState.PENDING
    credential: Optional[Credential] = None
    error: Optional[Exception] = None
    created_at: float = field(default_factory=time.time)
    settled_at: Optional[float] = None
    _entered_pending: bool = field(default=True, repr=False)

    @classmethod
    def rejected(cls, provider: str, error: Exception) -> AuthAttempt:
        attempt = cls(provider=provider, _entered_pending=False)
        attempt._finish(OperationState.FAILED, error)
        return attempt

    def settle(self, credential: Credential) -> bool:
        if not self._finish(OperationState.SETTLED):
            return False
        self.credential = credential
        return True

    def fail(self, error: Exception) -> bool:
        return self._finish(OperationState.FAILED, error)


@dataclass(frozen=True)
class VerificationRecord:
    """
    Outcome of a verification.

    Not finding the product is a normal outcome, not a failure.
    """

    product_id: str
    found: bool
    product: Optional[Dict[str, Any]] = None

    @property
    def verified(self) -> bool:
        return self.found and bool(self.product and self.product.get("verified", False))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "found": self.found,
            "verified": self.verified,
            "product": self.product,
        }

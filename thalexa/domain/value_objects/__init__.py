"""
Domain value objects.
"""

from thalexa.domain.value_objects.operation import (
    AuthAttempt,
    LedgerOperation,
    OperationKind,
    OperationState,
    VerificationRecord,
)

__all__ = [
    "AuthAttempt",
    "LedgerOperation",
    "OperationKind",
    "OperationState",
    "VerificationRecord",
]

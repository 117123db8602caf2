"""
Interface definitions for dependency injection.
"""

from thalexa.core.interfaces.ledger import ILedgerClient, ResultCallback, BalancesCallback
from thalexa.core.interfaces.providers import IAuthProvider, AuthCallback
from thalexa.core.interfaces.repositories import IStateRepository

__all__ = [
    "ILedgerClient",
    "ResultCallback",
    "BalancesCallback",
    "IAuthProvider",
    "AuthCallback",
    "IStateRepository",
]

"""
Ledger client implementations.
"""

from thalexa.infrastructure.ledger.simulated_ledger_client import (
    SimulatedLedgerClient,
    random_address,
)

__all__ = ["SimulatedLedgerClient", "random_address"]

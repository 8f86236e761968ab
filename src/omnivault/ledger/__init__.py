"""
Ledger module - accounting state of a vault.

Provides the balances/counters state with snapshot and restore, and the
serial executor that runs vault operations one at a time.
"""

from omnivault.ledger.lock import SerialExecutor
from omnivault.ledger.state import StateSnapshot, VaultState

__all__ = [
    "VaultState",
    "StateSnapshot",
    "SerialExecutor",
]

"""
OmniVault - single-asset custodial ledger.

Accounts deposit and withdraw one fungible unit of value, bounded by a global
capacity and a per-withdrawal limit. Withdrawals finalize their state before
releasing funds, and roll back completely if the release fails.

Usage:
    >>> from omnivault import Vault
    >>> from decimal import Decimal
    >>>
    >>> vault = Vault(capacity=Decimal("1000"), withdrawal_limit=Decimal("100"))
    >>> await vault.deposit("alice", Decimal("500"))
    >>> await vault.withdraw("alice", Decimal("50"))
    >>> vault.balance_of("alice")
    Decimal('450')
"""

from omnivault.admission import (
    AdmissionChain,
    AdmissionCheck,
    AdmissionResult,
    CapacityCheck,
    NonZeroAmountCheck,
    OperationContext,
    SufficientBalanceCheck,
    WithdrawalLimitCheck,
)
from omnivault.core.config import VaultConfig
from omnivault.core.events import (
    DepositNotification,
    NotificationType,
    VaultNotification,
    WithdrawalNotification,
)
from omnivault.core.exceptions import (
    AdmissionError,
    AmountOverflowError,
    CapacityExceededError,
    ConfigurationError,
    InsufficientBalanceError,
    InvariantViolationError,
    OmniVaultError,
    TransferFailedError,
    ValidationError,
    WithdrawalLimitExceededError,
    ZeroAmountError,
)
from omnivault.core.logging import configure_logging, get_logger
from omnivault.core.types import EntryPath, Instruction, Operation, VaultCall
from omnivault.journal import Journal, JournalEntry, JournalEntryType
from omnivault.protocols import DirectReleaser, FundReleaser, HttpReleaser, ReleaseResult
from omnivault.storage import (
    InMemoryStorage,
    RedisStorage,
    StorageBackend,
    get_storage,
    storage_from_config,
)
from omnivault.vault import Vault

__version__ = "0.1.0"
__all__ = [
    # Main entry point
    "Vault",
    # Config & logging
    "VaultConfig",
    "configure_logging",
    "get_logger",
    # Types
    "EntryPath",
    "Instruction",
    "Operation",
    "VaultCall",
    # Notifications
    "NotificationType",
    "VaultNotification",
    "DepositNotification",
    "WithdrawalNotification",
    # Exceptions
    "OmniVaultError",
    "ConfigurationError",
    "ValidationError",
    "AdmissionError",
    "ZeroAmountError",
    "CapacityExceededError",
    "InsufficientBalanceError",
    "WithdrawalLimitExceededError",
    "TransferFailedError",
    "InvariantViolationError",
    "AmountOverflowError",
    # Admission
    "AdmissionCheck",
    "AdmissionChain",
    "AdmissionResult",
    "OperationContext",
    "NonZeroAmountCheck",
    "CapacityCheck",
    "SufficientBalanceCheck",
    "WithdrawalLimitCheck",
    # Fund release
    "FundReleaser",
    "ReleaseResult",
    "DirectReleaser",
    "HttpReleaser",
    # Journal & storage
    "Journal",
    "JournalEntry",
    "JournalEntryType",
    "StorageBackend",
    "InMemoryStorage",
    "RedisStorage",
    "get_storage",
    "storage_from_config",
]

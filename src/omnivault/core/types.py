"""
Type definitions for OmniVault.

This module contains the enums, aliases and call data classes used across
the vault.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from omnivault.core.exceptions import ValidationError

# An identity capable of holding a balance in the vault
AccountId = str

# Non-negative quantity of the vault's unit of value
Amount = Decimal


class Operation(str, Enum):
    """Kinds of state-changing vault operations."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class EntryPath(str, Enum):
    """Entry point through which an operation reached the vault."""

    DEPOSIT = "deposit"  # explicit deposit instruction
    RECEIVE = "receive"  # value with no instruction
    FALLBACK = "fallback"  # value with an unrecognized instruction
    WITHDRAW = "withdraw"

    @property
    def operation(self) -> Operation:
        if self is EntryPath.WITHDRAW:
            return Operation.WITHDRAWAL
        return Operation.DEPOSIT


class Instruction(str, Enum):
    """Instructions the vault recognizes when dispatching a call."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"

    @classmethod
    def parse(cls, value: str | None) -> Instruction | None:
        """Return the matching instruction, or None if unrecognized."""
        if value is None:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass
class VaultCall:
    """
    A single invocation of the vault as delivered by the host.

    Attributes:
        caller: Account making the call
        value: Value attached to the call (deposits arrive this way)
        instruction: Instruction name, or None for a bare value transfer
        args: Instruction arguments (e.g. ``{"amount": "50"}`` for withdraw)
    """

    caller: AccountId
    value: Decimal = Decimal("0")
    instruction: str | None = None
    args: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.caller:
            raise ValidationError("caller is required", details={"field": "caller"})

    @property
    def is_bare(self) -> bool:
        """True when no instruction accompanies the value."""
        return self.instruction is None or not self.instruction.strip()

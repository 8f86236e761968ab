"""Utility functions for OmniVault."""

from omnivault.utils.amounts import (
    MAX_AMOUNT,
    MAX_DECIMALS,
    ZERO,
    checked_add,
    checked_sub,
    exact_add,
    to_amount,
)

__all__ = [
    # Amount utilities
    "MAX_AMOUNT",
    "MAX_DECIMALS",
    "ZERO",
    "checked_add",
    "checked_sub",
    "exact_add",
    "to_amount",
]

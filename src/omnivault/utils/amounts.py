"""
Amount parsing and overflow-checked arithmetic.

Amounts are non-negative, finite Decimals bounded by MAX_AMOUNT. All balance
and total arithmetic goes through checked_add / checked_sub so that overflow,
underflow or silent rounding surfaces as AmountOverflowError instead of
corrupting the ledger.
"""

from __future__ import annotations

from decimal import (
    Context,
    Decimal,
    DecimalException,
    Inexact,
    InvalidOperation,
    Overflow,
    localcontext,
)
from typing import Any

from omnivault.core.exceptions import AmountOverflowError, ValidationError

ZERO = Decimal("0")

# Largest representable amount (unsigned 256-bit range)
MAX_AMOUNT = Decimal(2**256 - 1)

# Finest representable fraction
MAX_DECIMALS = 18
_SMALLEST_UNIT = Decimal(1).scaleb(-MAX_DECIMALS)

# Wide enough for the sum of two in-range amounts at full scale; rounding traps.
_ARITHMETIC_CONTEXT = Context(prec=120, traps=[InvalidOperation, Inexact, Overflow])


def to_amount(value: Any, field: str = "amount") -> Decimal:
    """
    Parse a value into a validated Amount.

    Args:
        value: int, str, float or Decimal
        field: Name used in error messages

    Returns:
        The amount as a Decimal

    Raises:
        ValidationError: If the value is not a finite, non-negative number
            within MAX_AMOUNT and MAX_DECIMALS
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number, got {value!r}")

    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{field} is not a valid number: {value!r}") from None

    if not amount.is_finite():
        raise ValidationError(f"{field} must be finite, got {value!r}")
    if amount < 0:
        raise ValidationError(f"{field} must not be negative, got {value}")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field} exceeds maximum representable amount")

    try:
        with localcontext(_ARITHMETIC_CONTEXT):
            amount.quantize(_SMALLEST_UNIT)
    except DecimalException:
        raise ValidationError(
            f"{field} has more than {MAX_DECIMALS} decimal places: {value}"
        ) from None

    # Normalizes -0 to 0
    return amount + ZERO if amount.is_zero() else amount


def exact_add(a: Decimal, b: Decimal, operation: str = "add") -> Decimal:
    """Add two amounts without rounding and without the MAX_AMOUNT bound."""
    try:
        with localcontext(_ARITHMETIC_CONTEXT):
            return a + b
    except DecimalException as e:
        raise AmountOverflowError(
            f"Arithmetic error during {operation}: {a} + {b}", operation=operation
        ) from e


def checked_add(a: Decimal, b: Decimal, operation: str = "add") -> Decimal:
    """Add two amounts, raising AmountOverflowError past MAX_AMOUNT."""
    result = exact_add(a, b, operation)

    if result > MAX_AMOUNT:
        raise AmountOverflowError(
            f"Amount overflow during {operation}: {a} + {b}",
            operation=operation,
            details={"max_amount": str(MAX_AMOUNT)},
        )
    return result


def checked_sub(a: Decimal, b: Decimal, operation: str = "sub") -> Decimal:
    """Subtract two amounts, raising AmountOverflowError below zero."""
    try:
        with localcontext(_ARITHMETIC_CONTEXT):
            result = a - b
    except DecimalException as e:
        raise AmountOverflowError(
            f"Arithmetic error during {operation}: {a} - {b}", operation=operation
        ) from e

    if result < 0:
        raise AmountOverflowError(
            f"Amount underflow during {operation}: {a} - {b}", operation=operation
        )
    return result

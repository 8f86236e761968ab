"""
Admission check base classes and chain.

Admission checks are pure predicates over a proposed operation and the
current vault state. They never mutate anything; a chain evaluates them in a
fixed order so error precedence is deterministic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from omnivault.core.exceptions import AdmissionError
from omnivault.core.types import EntryPath, Operation


@dataclass
class AdmissionResult:
    """
    Result of an admission check.

    Attributes:
        allowed: Whether the operation may proceed
        reason: Human-readable reason (when rejected)
        check_name: Name of the check that produced this result
        error: Error to raise for a rejection
        metadata: Additional context data
    """

    allowed: bool
    reason: str | None = None
    check_name: str = ""
    error: AdmissionError | None = None
    metadata: dict[str, Any] | None = None

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.allowed

    @classmethod
    def reject(cls, check_name: str, error: AdmissionError, **metadata: Any) -> AdmissionResult:
        return cls(
            allowed=False,
            reason=str(error),
            check_name=check_name,
            error=error,
            metadata=metadata or None,
        )


@dataclass(frozen=True)
class OperationContext:
    """
    Proposed operation plus the state snapshot the checks evaluate against.

    Attributes:
        account: Calling account
        amount: Proposed deposit or withdrawal amount
        operation: Deposit or withdrawal
        balance: Caller's current balance
        total_held: Current total held by the vault
        path: Entry point the operation came through
    """

    account: str
    amount: Decimal
    operation: Operation
    balance: Decimal
    total_held: Decimal
    path: EntryPath


class AdmissionCheck(ABC):
    """Abstract base class for admission checks."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this check."""
        ...

    @abstractmethod
    def check(self, context: OperationContext) -> AdmissionResult:
        """Evaluate the check against a proposed operation."""
        ...


class AdmissionChain:
    """
    Ordered chain of admission checks.

    ``check`` stops at the first rejection; ``enforce`` raises its error.
    """

    def __init__(self, checks: list[AdmissionCheck] | None = None) -> None:
        self._checks: list[AdmissionCheck] = list(checks or [])

    def add(self, check: AdmissionCheck) -> AdmissionChain:
        """Append a check to the chain."""
        self._checks.append(check)
        return self

    def get(self, name: str) -> AdmissionCheck | None:
        """Get a check by name."""
        for check in self._checks:
            if check.name == name:
                return check
        return None

    @property
    def checks(self) -> list[AdmissionCheck]:
        return list(self._checks)

    def check(self, context: OperationContext) -> AdmissionResult:
        """Run checks in order and return the first rejection, if any."""
        passed: list[str] = []

        for check in self._checks:
            result = check.check(context)
            if not result.allowed:
                result.metadata = result.metadata or {}
                result.metadata["passed_checks"] = passed
                return result
            passed.append(check.name)

        return AdmissionResult(
            allowed=True,
            reason="All checks passed",
            check_name="chain",
            metadata={"passed_checks": passed},
        )

    def check_all(self, context: OperationContext) -> list[AdmissionResult]:
        """Run every check without stopping at the first rejection."""
        return [check.check(context) for check in self._checks]

    def enforce(self, context: OperationContext) -> None:
        """
        Run the chain and raise the first rejection's error.

        Raises:
            AdmissionError: The error carried by the first failing check
        """
        result = self.check(context)
        if not result.allowed:
            if result.error is not None:
                raise result.error
            raise AdmissionError(result.reason or "Operation rejected", check_name=result.check_name)

    def __len__(self) -> int:
        return len(self._checks)

    def __iter__(self) -> Iterator[AdmissionCheck]:
        return iter(self._checks)

import logging
import os
from decimal import Decimal

import pytest

from omnivault import DirectReleaser, InMemoryStorage, Journal, Vault
from omnivault.core.logging import LOGGER_NAME


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep OMNIVAULT_* variables from the outer environment out of tests."""
    for name in list(os.environ):
        if name.startswith("OMNIVAULT_"):
            monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes straight to os.environ
    for name in list(os.environ):
        if name.startswith("OMNIVAULT_"):
            del os.environ[name]


@pytest.fixture(autouse=True)
def restore_logger():
    """Put the package logger back the way the test found it."""
    logger = logging.getLogger(LOGGER_NAME)
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield logger
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


@pytest.fixture
def releaser() -> DirectReleaser:
    return DirectReleaser()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def journal(storage) -> Journal:
    return Journal(storage)


@pytest.fixture
def vault(releaser, journal) -> Vault:
    """Vault with capacity 1000 and withdrawal limit 100."""
    return Vault(
        capacity=Decimal("1000"),
        withdrawal_limit=Decimal("100"),
        releaser=releaser,
        journal=journal,
    )


@pytest.fixture
def state_of():
    """Capture everything an operation may change, for before/after comparisons."""

    def _state_of(vault: Vault, *accounts: str) -> dict:
        return {
            "total_held": vault.total_held(),
            "deposit_count": vault.deposit_count(),
            "withdrawal_count": vault.withdrawal_count(),
            "balances": {a: vault.balance_of(a) for a in accounts},
            "deposits_by": {a: vault.deposit_count_of(a) for a in accounts},
            "withdrawals_by": {a: vault.withdrawal_count_of(a) for a in accounts},
            "notifications": vault.notifications,
        }

    return _state_of

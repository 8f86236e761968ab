"""
Example: Basic Vault Flow

Demonstrates deposits, withdrawals and the admission checks that reject them.
"""

import asyncio
import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()

from omnivault import (  # noqa: E402
    CapacityExceededError,
    InsufficientBalanceError,
    Vault,
    VaultConfig,
    WithdrawalLimitExceededError,
)


async def main():
    """
    Basic example showing:
    1. Build a vault from environment (falls back to capacity 1000 / limit 100)
    2. Deposit and withdraw
    3. Rejections leave the vault unchanged
    """
    print("=== OmniVault Basic Example ===\n")

    if os.environ.get("OMNIVAULT_CAPACITY"):
        config = VaultConfig.from_env()
    else:
        config = VaultConfig(capacity=Decimal("1000"), withdrawal_limit=Decimal("100"))
    # Also applies config.log_level to the omnivault logger
    vault = Vault.from_config(config)
    print(f"Vault ready (capacity: {vault.capacity}, limit: {vault.withdrawal_limit})")

    await vault.deposit("alice", Decimal("500"))
    print(f"alice deposited 500 -> balance {vault.balance_of('alice')}")

    try:
        await vault.deposit("bob", vault.available_capacity() + 1)
    except CapacityExceededError as e:
        print(f"bob rejected: {e}")

    try:
        await vault.withdraw("alice", vault.withdrawal_limit + 1)
    except WithdrawalLimitExceededError as e:
        print(f"alice rejected: {e}")

    await vault.withdraw("alice", Decimal("50"))
    print(f"alice withdrew 50 -> balance {vault.balance_of('alice')}")

    try:
        await vault.withdraw("alice", Decimal("1000"))
    except InsufficientBalanceError as e:
        print(f"alice rejected: {e}")

    print(f"\nTotal held: {vault.total_held()}")
    print(f"Deposits: {vault.deposit_count()}, withdrawals: {vault.withdrawal_count()}")


if __name__ == "__main__":
    asyncio.run(main())

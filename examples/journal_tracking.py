"""
Example: Journal and Recipient Callbacks

Demonstrates the audit journal, notification listeners, and a recipient that
calls back into the vault while its withdrawal is being paid out.
"""

import asyncio
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()

from omnivault import (  # noqa: E402
    DirectReleaser,
    InMemoryStorage,
    InsufficientBalanceError,
    Journal,
    JournalEntryType,
    TransferFailedError,
    Vault,
)


async def main():
    """
    Journal example showing:
    1. Automatic journaling of committed operations
    2. A recipient re-entering the vault during its payout
    3. A refused payout rolling the withdrawal back
    """
    print("=== OmniVault Journal Example ===\n")

    releaser = DirectReleaser()
    journal = Journal(InMemoryStorage())
    vault = Vault(
        capacity=Decimal("1000"),
        withdrawal_limit=Decimal("100"),
        releaser=releaser,
        journal=journal,
    )
    vault.subscribe(lambda n: print(f"  [{n.type.value}] {n.account} {n.amount} -> {n.new_balance}"))

    print("--- Deposits ---")
    await vault.deposit("alice", Decimal("120"))
    await vault.receive("bob", Decimal("30"))

    # ========================================
    # Reentrant recipient
    # ========================================
    print("\n--- Reentrant Recipient ---")

    async def greedy(amount: Decimal) -> None:
        # Runs after alice's balance has already been reduced
        print(f"  alice receives {amount}, balance now {vault.balance_of('alice')}")
        try:
            await vault.withdraw("alice", Decimal("100"))
        except InsufficientBalanceError as e:
            print(f"  second withdrawal rejected: {e}")

    releaser.register("alice", greedy)
    await vault.withdraw("alice", Decimal("100"))
    releaser.unregister("alice")

    # ========================================
    # Refused payout
    # ========================================
    print("\n--- Refused Payout ---")
    releaser.reject("bob")
    try:
        await vault.withdraw("bob", Decimal("30"))
    except TransferFailedError as e:
        print(f"  {e}")
    print(f"  bob still holds {vault.balance_of('bob')}")

    # ========================================
    # Query the journal
    # ========================================
    print("\n--- Journal Contents ---")
    for entry in await journal.query(limit=10):
        print(f"  [{entry.entry_type.value}] {entry.account} {entry.amount} via {entry.path.value}")

    deposited = await journal.get_total("alice", JournalEntryType.DEPOSIT)
    withdrawn = await journal.get_total("alice", JournalEntryType.WITHDRAWAL)
    print(f"\nalice deposited {deposited}, withdrew {withdrawn}")
    print(f"Total held: {vault.total_held()}")


if __name__ == "__main__":
    asyncio.run(main())

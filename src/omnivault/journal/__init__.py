"""
Journal module - persistent audit trail of committed vault operations.
"""

from omnivault.journal.journal import Journal, JournalEntry, JournalEntryType

__all__ = [
    "Journal",
    "JournalEntry",
    "JournalEntryType",
]

"""
Database models package.
"""

from ledger.models.entry_type import EntryType
from ledger.models.user import User
from ledger.models.category import Category
from ledger.models.transaction import Transaction

__all__ = [
    "EntryType",
    "User",
    "Category",
    "Transaction",
]

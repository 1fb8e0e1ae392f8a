"""
Entry type shared by categories and transactions.
"""

import enum


class EntryType(str, enum.Enum):
    """Whether money flows out (expense) or in (income)."""
    expense = "expense"
    income = "income"

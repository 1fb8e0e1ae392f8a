"""
Dashboard schemas.
"""

from decimal import Decimal
from typing import List

from ledger.models.entry_type import EntryType
from ledger.schemas.common import CamelModel


class TransactionSummary(CamelModel):
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal


class CategorySpending(CamelModel):
    category_name: str
    category_type: EntryType
    total_amount: Decimal


class MonthTrend(CamelModel):
    month: str
    income: Decimal
    expense: Decimal
    net: Decimal


class SummaryReport(CamelModel):
    """Summary and per-category spending together, as the CLI prints them."""
    summary: TransactionSummary
    spending_by_category: List[CategorySpending]

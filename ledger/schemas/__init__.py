"""
Pydantic schemas package.
"""

from ledger.schemas.common import CamelModel
from ledger.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryRead,
)
from ledger.schemas.transaction import (
    TransactionCreate,
    TransactionUpdate,
    TransactionRead,
    TransactionFilter,
    BulkCategorizeRequest,
    BulkCategorizeResponse,
)
from ledger.schemas.dashboard import (
    TransactionSummary,
    CategorySpending,
    MonthTrend,
    SummaryReport,
)

__all__ = [
    "CamelModel",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryRead",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionRead",
    "TransactionFilter",
    "BulkCategorizeRequest",
    "BulkCategorizeResponse",
    "TransactionSummary",
    "CategorySpending",
    "MonthTrend",
    "SummaryReport",
]

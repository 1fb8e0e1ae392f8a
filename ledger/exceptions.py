"""
Ledger error types.

Business-level absence is not an error: services return ``None`` or
``False`` for it. Storage errors from SQLAlchemy are not wrapped.
"""

from typing import List


class LedgerError(Exception):
    """Base class for errors raised by the ledger core."""


class LedgerValidationError(LedgerError):
    """Input rejected by the validator layer."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Validation failed")


class CategoryNotFoundError(LedgerError):
    """A referenced category does not exist for this user."""

    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__("Category not found")


class CategoryInUseError(LedgerError):
    """A category cannot be deleted while transactions reference it."""

    def __init__(self, category_id: str, transaction_count: int):
        self.category_id = category_id
        self.transaction_count = transaction_count
        super().__init__(
            f"Cannot delete category with existing transactions ({transaction_count})"
        )

"""
Category Pydantic schemas.

Field limits are declared here; cross-field and policy rules live in
``ledger.validators``.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ledger.models.entry_type import EntryType
from ledger.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    """Schema for creating a category."""
    user_id: str = Field(..., min_length=1, max_length=36)
    name: str = Field(..., min_length=1, max_length=100)
    type: EntryType


class CategoryUpdate(CamelModel):
    """Schema for updating a category. Unset fields are left alone."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[EntryType] = None


class CategoryRead(CamelModel):
    """Schema for category response."""
    id: str
    user_id: str
    name: str
    type: EntryType
    created_at: datetime
    updated_at: datetime

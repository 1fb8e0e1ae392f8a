"""
Transaction schemas.
"""

import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from ledger.models.entry_type import EntryType
from ledger.normalize import to_utc_date, to_optional_utc_date
from ledger.schemas.common import CamelModel


class TransactionCreate(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=36)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    type: EntryType
    date: datetime.date
    category_id: Optional[str] = None
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return to_utc_date(value)


class TransactionUpdate(CamelModel):
    """Partial update. An explicit null clears ``category_id`` or ``description``."""
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    type: Optional[EntryType] = None
    date: Optional[datetime.date] = None
    category_id: Optional[str] = None
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return to_optional_utc_date(value)


class TransactionRead(CamelModel):
    id: str
    user_id: str
    category_id: Optional[str]
    amount: Decimal
    type: EntryType
    date: datetime.date
    description: Optional[str]
    created_at: datetime.datetime
    updated_at: datetime.datetime


class TransactionFilter(CamelModel):
    user_id: str
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    category_id: Optional[str] = None
    type: Optional[EntryType] = None
    limit: Optional[int] = None
    offset: Optional[int] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_dates(cls, value):
        return to_optional_utc_date(value)


class BulkCategorizeRequest(CamelModel):
    user_id: str
    transaction_ids: list[str]
    category_id: Optional[str] = None


class BulkCategorizeResponse(CamelModel):
    updated: int

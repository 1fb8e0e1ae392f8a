"""
Transaction API endpoints.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ledger.config import Settings
from ledger.database import UnitOfWork
from ledger.dependencies import get_settings, get_transaction_service, get_unit_of_work
from ledger.models.entry_type import EntryType
from ledger.schemas.transaction import (
    BulkCategorizeRequest,
    BulkCategorizeResponse,
    TransactionCreate,
    TransactionFilter,
    TransactionRead,
    TransactionUpdate,
)
from ledger.services.transaction_service import TransactionService
from ledger.validators import (
    validate_bulk_categorize,
    validate_transaction_create,
    validate_transaction_filter,
    validate_transaction_update,
)

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=List[TransactionRead])
def list_transactions(
    user_id: str = Query(..., alias="userId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    type: Optional[EntryType] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: TransactionService = Depends(get_transaction_service),
    config: Settings = Depends(get_settings),
):
    """List transactions with filtering and pagination"""
    filters = TransactionFilter(
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        type=type,
        limit=config.default_list_limit if limit is None else limit,
        offset=offset,
    )
    validate_transaction_filter(filters, config).raise_if_invalid()
    return service.list(filters, uow=uow)


@router.post("", response_model=TransactionRead, status_code=201)
def create_transaction(
    transaction: TransactionCreate,
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: TransactionService = Depends(get_transaction_service),
):
    """Record a transaction"""
    validate_transaction_create(transaction).raise_if_invalid()
    created = service.create(transaction, uow=uow)
    uow.commit()
    return created


@router.post("/bulk-categorize", response_model=BulkCategorizeResponse)
def bulk_categorize(
    request: BulkCategorizeRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: TransactionService = Depends(get_transaction_service),
    config: Settings = Depends(get_settings),
):
    """Bulk update category for multiple transactions"""
    validate_bulk_categorize(request, config).raise_if_invalid()
    updated = service.bulk_categorize(
        request.user_id, request.transaction_ids, request.category_id, uow=uow
    )
    uow.commit()
    return BulkCategorizeResponse(updated=updated)


@router.get("/{transaction_id}", response_model=TransactionRead)
def get_transaction(
    transaction_id: str,
    user_id: str = Query(..., alias="userId"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: TransactionService = Depends(get_transaction_service),
):
    """Get a single transaction"""
    transaction = service.get_by_id(transaction_id, user_id, uow=uow)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.api_route("/{transaction_id}", methods=["PUT", "PATCH"], response_model=TransactionRead)
def update_transaction(
    transaction_id: str,
    update: TransactionUpdate,
    user_id: str = Query(..., alias="userId"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: TransactionService = Depends(get_transaction_service),
):
    """Update only the fields present in the body"""
    validate_transaction_update(update).raise_if_invalid()
    transaction = service.update(transaction_id, user_id, update, uow=uow)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    uow.commit()
    return transaction


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    user_id: str = Query(..., alias="userId"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: TransactionService = Depends(get_transaction_service),
):
    """Delete a transaction"""
    if not service.delete(transaction_id, user_id, uow=uow):
        raise HTTPException(status_code=404, detail="Transaction not found")
    uow.commit()
    return None

"""
Category API endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ledger.database import UnitOfWork
from ledger.dependencies import get_category_service, get_unit_of_work
from ledger.models.entry_type import EntryType
from ledger.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from ledger.services.category_service import CategoryService
from ledger.validators import validate_category_create, validate_category_update, validate_user

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryRead])
def list_categories(
    user_id: str = Query(..., alias="userId"),
    type: Optional[EntryType] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: CategoryService = Depends(get_category_service),
):
    """List a user's categories by name."""
    validate_user(user_id).raise_if_invalid()
    return service.list(user_id, type=type, uow=uow)


@router.post("", response_model=CategoryRead, status_code=201)
def create_category(
    category: CategoryCreate,
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: CategoryService = Depends(get_category_service),
):
    """Create a new category."""
    validate_category_create(category).raise_if_invalid()
    created = service.create(category, uow=uow)
    uow.commit()
    return created


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: str,
    user_id: str = Query(..., alias="userId"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: CategoryService = Depends(get_category_service),
):
    """Get a specific category."""
    category = service.get_by_id(category_id, user_id, uow=uow)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.api_route("/{category_id}", methods=["PUT", "PATCH"], response_model=CategoryRead)
def update_category(
    category_id: str,
    category_update: CategoryUpdate,
    user_id: str = Query(..., alias="userId"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: CategoryService = Depends(get_category_service),
):
    """Update a category's name or type."""
    validate_category_update(category_update).raise_if_invalid()
    category = service.update(category_id, user_id, category_update, uow=uow)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    uow.commit()
    return category


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: str,
    user_id: str = Query(..., alias="userId"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: CategoryService = Depends(get_category_service),
):
    """Delete a category. Refused with 409 while transactions use it."""
    if not service.delete(category_id, user_id, uow=uow):
        raise HTTPException(status_code=404, detail="Category not found")
    uow.commit()
    return None

"""
FastAPI dependencies.
"""

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from ledger.config import Settings, settings
from ledger.database import SessionLocal, UnitOfWork, get_db
from ledger.services.category_service import CategoryService
from ledger.services.transaction_service import TransactionService


def get_settings() -> Settings:
    return settings


def get_unit_of_work(db: Session = Depends(get_db)) -> Generator[UnitOfWork, None, None]:
    """
    One unit of work per request, wrapping the request's session. Routes
    commit it explicitly; an exception rolls it back.
    """
    uow = UnitOfWork(db)
    try:
        yield uow
    except Exception:
        uow.rollback()
        raise


def get_category_service() -> CategoryService:
    return CategoryService(SessionLocal)


def get_transaction_service() -> TransactionService:
    return TransactionService(SessionLocal)

"""
Category persistence service.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger.database import SessionFactory, UnitOfWork
from ledger.exceptions import CategoryInUseError
from ledger.models.category import Category
from ledger.models.entry_type import EntryType
from ledger.models.transaction import Transaction
from ledger.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate

logger = logging.getLogger(__name__)


class CategoryService:
    """
    CRUD for categories, always scoped to the owning user.

    Every method takes an optional unit of work. With one, the work is
    flushed into the caller's transaction and committed by the caller;
    without one, the call runs in its own transaction.
    """

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    @contextmanager
    def _scope(self, uow: Optional[UnitOfWork]) -> Iterator[Session]:
        try:
            if uow is not None:
                yield uow.session
            else:
                with UnitOfWork.start(self._session_factory) as own:
                    yield own.session
        except SQLAlchemyError as e:
            logger.error(f"Storage error in category service: {e}")
            raise

    @staticmethod
    def _owned(db: Session, category_id: str, user_id: str) -> Optional[Category]:
        return db.query(Category).filter(
            Category.id == category_id,
            Category.user_id == user_id,
        ).first()

    def create(self, data: CategoryCreate, uow: Optional[UnitOfWork] = None) -> CategoryRead:
        with self._scope(uow) as db:
            category = Category(
                user_id=data.user_id,
                name=data.name,
                type=EntryType(data.type),
            )
            db.add(category)
            db.flush()
            db.refresh(category)
            logger.info(f"Created category {category.id} for user {data.user_id}")
            return CategoryRead.model_validate(category)

    def list(self, user_id: str, type: Optional[EntryType] = None,
             uow: Optional[UnitOfWork] = None) -> List[CategoryRead]:
        with self._scope(uow) as db:
            query = db.query(Category).filter(Category.user_id == user_id)
            if type is not None:
                query = query.filter(Category.type == EntryType(type))
            query = query.order_by(Category.name.asc(), Category.created_at.asc())
            return [CategoryRead.model_validate(c) for c in query.all()]

    def get_by_id(self, category_id: str, user_id: str,
                  uow: Optional[UnitOfWork] = None) -> Optional[CategoryRead]:
        with self._scope(uow) as db:
            category = self._owned(db, category_id, user_id)
            if not category:
                return None
            return CategoryRead.model_validate(category)

    def update(self, category_id: str, user_id: str, changes: CategoryUpdate,
               uow: Optional[UnitOfWork] = None) -> Optional[CategoryRead]:
        with self._scope(uow) as db:
            category = self._owned(db, category_id, user_id)
            if not category:
                return None

            update_data = changes.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                setattr(category, field, value)

            db.flush()
            db.refresh(category)
            logger.info(f"Updated category {category_id}: {sorted(update_data)}")
            return CategoryRead.model_validate(category)

    def delete(self, category_id: str, user_id: str, uow: Optional[UnitOfWork] = None) -> bool:
        """
        Delete a category. Raises CategoryInUseError while any transaction
        still references it.
        """
        with self._scope(uow) as db:
            category = self._owned(db, category_id, user_id)
            if not category:
                return False

            in_use = db.query(func.count(Transaction.id)).filter(
                Transaction.category_id == category_id
            ).scalar()
            if in_use:
                logger.warning(f"Refusing to delete category {category_id}: {in_use} transaction(s)")
                raise CategoryInUseError(category_id, in_use)

            db.delete(category)
            db.flush()
            logger.info(f"Deleted category {category_id}")
            return True

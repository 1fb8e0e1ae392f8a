"""
Transaction persistence and reporting service.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Iterator, List, Optional, Sequence, Tuple

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger.database import SessionFactory, UnitOfWork
from ledger.exceptions import CategoryNotFoundError
from ledger.models.category import Category
from ledger.models.entry_type import EntryType
from ledger.models.transaction import Transaction
from ledger.normalize import to_money, to_utc_date, utc_today
from ledger.schemas.dashboard import CategorySpending, MonthTrend, TransactionSummary
from ledger.schemas.transaction import (
    TransactionCreate,
    TransactionFilter,
    TransactionRead,
    TransactionUpdate,
)

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


def month_window(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month."""
    start = date(year, month, 1)
    if month == 12:
        next_start = date(year + 1, 1, 1)
    else:
        next_start = date(year, month + 1, 1)
    return start, date.fromordinal(next_start.toordinal() - 1)


def trailing_months(today: date, months: int) -> List[Tuple[int, int]]:
    """(year, month) pairs for the last ``months`` months, oldest first."""
    result = []
    for i in range(months - 1, -1, -1):
        m = today.month - i
        y = today.year
        while m <= 0:
            m += 12
            y -= 1
        result.append((y, m))
    return result


class TransactionService:
    """
    CRUD and aggregate reads for transactions, always scoped to one user.

    Amounts are Decimals on the way in and on the way out.
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
            logger.error(f"Storage error in transaction service: {e}")
            raise

    @staticmethod
    def _owned(db: Session, transaction_id: str, user_id: str) -> Optional[Transaction]:
        return db.query(Transaction).filter(
            Transaction.id == transaction_id,
            Transaction.user_id == user_id,
        ).first()

    @staticmethod
    def _check_category(db: Session, category_id: Optional[str], user_id: str) -> None:
        if category_id is None:
            return
        owned = db.query(Category.id).filter(
            Category.id == category_id,
            Category.user_id == user_id,
        ).first()
        if not owned:
            raise CategoryNotFoundError(category_id)

    @staticmethod
    def _in_range(query, user_id: str, start_date: date, end_date: date):
        return query.filter(
            Transaction.user_id == user_id,
            Transaction.date >= to_utc_date(start_date),
            Transaction.date <= to_utc_date(end_date),
        )

    def create(self, data: TransactionCreate, uow: Optional[UnitOfWork] = None) -> TransactionRead:
        with self._scope(uow) as db:
            self._check_category(db, data.category_id, data.user_id)
            transaction = Transaction(
                user_id=data.user_id,
                category_id=data.category_id,
                amount=to_money(data.amount),
                type=EntryType(data.type),
                date=to_utc_date(data.date),
                description=data.description,
            )
            db.add(transaction)
            db.flush()
            db.refresh(transaction)
            logger.info(f"Created transaction {transaction.id} for user {data.user_id}")
            return TransactionRead.model_validate(transaction)

    def list(self, filters: TransactionFilter, uow: Optional[UnitOfWork] = None) -> List[TransactionRead]:
        """List transactions, newest date first, then most recently created."""
        with self._scope(uow) as db:
            query = db.query(Transaction).filter(Transaction.user_id == filters.user_id)

            if filters.start_date:
                query = query.filter(Transaction.date >= filters.start_date)
            if filters.end_date:
                query = query.filter(Transaction.date <= filters.end_date)
            if filters.category_id:
                query = query.filter(Transaction.category_id == filters.category_id)
            if filters.type:
                query = query.filter(Transaction.type == EntryType(filters.type))

            query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
            if filters.offset:
                query = query.offset(filters.offset)
            if filters.limit:
                query = query.limit(filters.limit)

            return [TransactionRead.model_validate(t) for t in query.all()]

    def get_by_id(self, transaction_id: str, user_id: str,
                  uow: Optional[UnitOfWork] = None) -> Optional[TransactionRead]:
        with self._scope(uow) as db:
            transaction = self._owned(db, transaction_id, user_id)
            if not transaction:
                return None
            return TransactionRead.model_validate(transaction)

    def update(self, transaction_id: str, user_id: str, changes: TransactionUpdate,
               uow: Optional[UnitOfWork] = None) -> Optional[TransactionRead]:
        with self._scope(uow) as db:
            transaction = self._owned(db, transaction_id, user_id)
            if not transaction:
                return None

            update_data = changes.model_dump(exclude_unset=True)
            if "category_id" in update_data:
                self._check_category(db, update_data["category_id"], user_id)
            if "amount" in update_data:
                update_data["amount"] = to_money(update_data["amount"])
            if "date" in update_data:
                update_data["date"] = to_utc_date(update_data["date"])

            for field, value in update_data.items():
                setattr(transaction, field, value)

            db.flush()
            db.refresh(transaction)
            logger.info(f"Updated transaction {transaction_id}: {sorted(update_data)}")
            return TransactionRead.model_validate(transaction)

    def delete(self, transaction_id: str, user_id: str, uow: Optional[UnitOfWork] = None) -> bool:
        with self._scope(uow) as db:
            transaction = self._owned(db, transaction_id, user_id)
            if not transaction:
                return False
            db.delete(transaction)
            db.flush()
            logger.info(f"Deleted transaction {transaction_id}")
            return True

    def bulk_categorize(self, user_id: str, transaction_ids: Sequence[str],
                        category_id: Optional[str], uow: Optional[UnitOfWork] = None) -> int:
        """
        Move the user's transactions to one category, or clear it with None.
        Ids that do not belong to the user are skipped. Returns the number
        of rows changed.
        """
        with self._scope(uow) as db:
            self._check_category(db, category_id, user_id)
            updated = 0
            for transaction in db.query(Transaction).filter(
                Transaction.id.in_(list(transaction_ids)),
                Transaction.user_id == user_id,
            ):
                transaction.category_id = category_id
                updated += 1
            db.flush()
            logger.info(f"Recategorized {updated} transaction(s) for user {user_id}")
            return updated

    def get_summary(self, user_id: str, start_date: date, end_date: date,
                    uow: Optional[UnitOfWork] = None) -> TransactionSummary:
        """Income and expense totals in an inclusive date range."""
        income = func.sum(case((Transaction.type == EntryType.income, Transaction.amount), else_=0))
        expense = func.sum(case((Transaction.type == EntryType.expense, Transaction.amount), else_=0))

        with self._scope(uow) as db:
            query = self._in_range(db.query(income, expense), user_id, start_date, end_date)
            total_income, total_expense = query.one()

        total_income = to_money(total_income)
        total_expense = to_money(total_expense)
        return TransactionSummary(
            total_income=total_income,
            total_expense=total_expense,
            balance=total_income - total_expense,
        )

    def get_spending_by_category(self, user_id: str, start_date: date, end_date: date,
                                 uow: Optional[UnitOfWork] = None) -> List[CategorySpending]:
        """
        Expense totals per category, largest first; ties by category name.
        Expenses without a category are reported as "Uncategorized".
        """
        total = func.sum(Transaction.amount)

        with self._scope(uow) as db:
            query = db.query(Category.name, Category.type, total).select_from(Transaction).outerjoin(
                Category, Transaction.category_id == Category.id
            )
            query = self._in_range(query, user_id, start_date, end_date).filter(
                Transaction.type == EntryType.expense
            ).group_by(Category.name, Category.type)
            rows = query.all()

        # The outer join groups expenses without a category under a None name
        spending = [
            CategorySpending(
                category_name=UNCATEGORIZED if name is None else name,
                category_type=EntryType(category_type or EntryType.expense),
                total_amount=to_money(amount),
            )
            for name, category_type, amount in rows
        ]
        spending.sort(key=lambda row: (-row.total_amount, row.category_name))
        return spending

    def get_monthly_trends(self, user_id: str, months: int, today: Optional[date] = None,
                           uow: Optional[UnitOfWork] = None) -> List[MonthTrend]:
        """Income, expense and net per calendar month, oldest month first."""
        today = today or utc_today()
        trends = []
        for year, month in trailing_months(today, months):
            start, end = month_window(year, month)
            summary = self.get_summary(user_id, start, end, uow=uow)
            trends.append(MonthTrend(
                month=start.strftime("%Y-%m"),
                income=summary.total_income,
                expense=summary.total_expense,
                net=summary.balance,
            ))
        return trends

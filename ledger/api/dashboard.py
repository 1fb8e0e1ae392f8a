"""
Dashboard API endpoints.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ledger.config import Settings
from ledger.database import UnitOfWork
from ledger.dependencies import get_settings, get_transaction_service, get_unit_of_work
from ledger.schemas.dashboard import CategorySpending, MonthTrend, TransactionSummary
from ledger.services.transaction_service import TransactionService
from ledger.validators import validate_report_range, validate_trend_months, validate_user

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=TransactionSummary)
def get_dashboard_summary(
    user_id: str = Query(..., alias="userId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: TransactionService = Depends(get_transaction_service),
    config: Settings = Depends(get_settings),
):
    """
    Income and expense totals for an inclusive date range.
    Returns: totalIncome, totalExpense, balance
    """
    validate_report_range(user_id, start_date, end_date, config).raise_if_invalid()
    return service.get_summary(user_id, start_date, end_date, uow=uow)


@router.get("/spending-by-category", response_model=List[CategorySpending])
def get_spending_by_category(
    user_id: str = Query(..., alias="userId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: TransactionService = Depends(get_transaction_service),
    config: Settings = Depends(get_settings),
):
    """Expense totals per category, largest first."""
    validate_report_range(user_id, start_date, end_date, config).raise_if_invalid()
    return service.get_spending_by_category(user_id, start_date, end_date, uow=uow)


@router.get("/trends", response_model=List[MonthTrend])
def get_spending_trends(
    user_id: str = Query(..., alias="userId"),
    months: int = 6,
    uow: UnitOfWork = Depends(get_unit_of_work),
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Get income and spending over the last few months.
    Returns: [{month, income, expense, net}, ...]
    """
    validate_user(user_id).extend(validate_trend_months(months).errors).raise_if_invalid()
    return service.get_monthly_trends(user_id, months, uow=uow)

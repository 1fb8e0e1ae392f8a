"""
Main API router.
"""

from fastapi import APIRouter
from ledger.api import categories, transactions, dashboard

api_router = APIRouter()

api_router.include_router(categories.router)
api_router.include_router(transactions.router)
api_router.include_router(dashboard.router)

"""
Expense and Sale API Endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backoffice.app.db.session import get_db
from backoffice.app.models.expense import Expense
from backoffice.app.models.sale import Sale
from backoffice.app.schemas.common import ApiResponse
from backoffice.app.schemas.ledger import TransactionResultResponse
from backoffice.app.schemas.vehicle import VehicleResponse
from backoffice.app.schemas.transactions import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseResult,
    SaleCreate,
    SaleResponse,
    SaleResult,
)
from backoffice.app.core.dependencies import get_expense_adapter, get_sale_adapter
from backoffice.app.domain.adapters.expense import ExpenseAdapter
from backoffice.app.domain.adapters.sale import SaleAdapter

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("/expense", response_model=ApiResponse[ExpenseResult], status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreate,
    db: AsyncSession = Depends(get_db),
    adapter: ExpenseAdapter = Depends(get_expense_adapter)
):
    """
    Record an expense and debit it from the spending party (company by default).
    """
    outcome = await adapter.record_expense(db, expense_data)

    return ApiResponse(
        message="Expense created successfully",
        data=ExpenseResult(
            expense=ExpenseResponse.model_validate(outcome.expense),
            transaction=TransactionResultResponse.model_validate(outcome.transaction)
        )
    )


@router.get("/expense", response_model=ApiResponse[List[ExpenseResponse]])
async def list_expenses(
    party_id: Optional[int] = Query(None, description="Filter by spending party"),
    db: AsyncSession = Depends(get_db)
):
    query = select(Expense).order_by(Expense.id.desc())
    if party_id:
        query = query.where(Expense.party_id == party_id)
    result = await db.execute(query)

    return ApiResponse(
        message="Expenses retrieved successfully",
        data=[ExpenseResponse.model_validate(expense) for expense in result.scalars().all()]
    )


@router.post("/sale", response_model=ApiResponse[SaleResult], status_code=status.HTTP_201_CREATED)
async def create_sale(
    sale_data: SaleCreate,
    db: AsyncSession = Depends(get_db),
    adapter: SaleAdapter = Depends(get_sale_adapter)
):
    """
    Sell a vehicle.

    Credits the sale price and debits commission plus other charges against
    the selling party in one unit. A vehicle can be sold once.
    """
    outcome = await adapter.record_sale(db, sale_data)
    postings = [outcome.credit] + ([outcome.debit] if outcome.debit else [])

    return ApiResponse(
        message="Sale created successfully",
        data=SaleResult(
            sale=SaleResponse.model_validate(outcome.sale),
            vehicle=VehicleResponse.model_validate(outcome.vehicle),
            ledger_entries=[TransactionResultResponse.model_validate(p) for p in postings],
            new_balance=outcome.new_balance
        )
    )


@router.get("/sale", response_model=ApiResponse[List[SaleResponse]])
async def list_sales(
    party_id: Optional[int] = Query(None, description="Filter by selling party"),
    db: AsyncSession = Depends(get_db)
):
    query = select(Sale).order_by(Sale.id.desc())
    if party_id:
        query = query.where(Sale.party_id == party_id)
    result = await db.execute(query)

    return ApiResponse(
        message="Sales retrieved successfully",
        data=[SaleResponse.model_validate(sale) for sale in result.scalars().all()]
    )

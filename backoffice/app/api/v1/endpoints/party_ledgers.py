"""
Shareholder and Customer Ledger API Endpoints.

Direct IN/OUT transactions against a shareholder or customer, mirrored on
the company account in the same unit.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.app.db.session import get_db
from backoffice.app.schemas.common import ApiResponse
from backoffice.app.schemas.ledger import TransactionResultResponse
from backoffice.app.schemas.party_ledger import (
    PartyTransactionCreate,
    PartyTransactionResponse,
    PartyTransactionResult,
)
from backoffice.app.core.dependencies import get_shareholder_ledger_adapter, get_customer_ledger_adapter
from backoffice.app.domain.adapters.party_ledger import PartyLedgerAdapter, PartyTransactionOutcome

shareholder_router = APIRouter(prefix="/shareholder-ledger", tags=["Shareholder Ledger"])
customer_router = APIRouter(prefix="/customer-ledger", tags=["Customer Ledger"])


def _result(outcome: PartyTransactionOutcome) -> PartyTransactionResult:
    company = outcome.company_result
    return PartyTransactionResult(
        transaction=PartyTransactionResponse.model_validate(outcome.transaction),
        ledger=TransactionResultResponse.model_validate(outcome.party_result),
        company_ledger=TransactionResultResponse.model_validate(company) if company else None
    )


@shareholder_router.post("", response_model=ApiResponse[PartyTransactionResult], status_code=status.HTTP_201_CREATED)
async def create_shareholder_transaction(
    transaction_data: PartyTransactionCreate,
    db: AsyncSession = Depends(get_db),
    adapter: PartyLedgerAdapter = Depends(get_shareholder_ledger_adapter)
):
    """
    Post a shareholder IN/OUT; IN credits the company, OUT debits it.
    """
    outcome = await adapter.record(db, transaction_data)
    return ApiResponse(message="Shareholder transaction created successfully", data=_result(outcome))


@shareholder_router.get("", response_model=ApiResponse[List[PartyTransactionResponse]])
async def list_shareholder_transactions(
    party_id: Optional[int] = Query(None, description="Filter by shareholder"),
    db: AsyncSession = Depends(get_db),
    adapter: PartyLedgerAdapter = Depends(get_shareholder_ledger_adapter)
):
    transactions = await adapter.list(db, party_id)
    return ApiResponse(
        message="Shareholder transactions retrieved successfully",
        data=[PartyTransactionResponse.model_validate(t) for t in transactions]
    )


@customer_router.post("", response_model=ApiResponse[PartyTransactionResult], status_code=status.HTTP_201_CREATED)
async def create_customer_transaction(
    transaction_data: PartyTransactionCreate,
    db: AsyncSession = Depends(get_db),
    adapter: PartyLedgerAdapter = Depends(get_customer_ledger_adapter)
):
    """
    Post a customer IN/OUT, mirrored inversely on the company when enabled.
    """
    outcome = await adapter.record(db, transaction_data)
    return ApiResponse(message="Customer transaction created successfully", data=_result(outcome))


@customer_router.get("", response_model=ApiResponse[List[PartyTransactionResponse]])
async def list_customer_transactions(
    party_id: Optional[int] = Query(None, description="Filter by customer"),
    db: AsyncSession = Depends(get_db),
    adapter: PartyLedgerAdapter = Depends(get_customer_ledger_adapter)
):
    transactions = await adapter.list(db, party_id)
    return ApiResponse(
        message="Customer transactions retrieved successfully",
        data=[PartyTransactionResponse.model_validate(t) for t in transactions]
    )

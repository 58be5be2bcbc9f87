"""
Payment Request API Endpoints.

Parties raise payment requests; back-office staff approve or reject them.
Approval debits the requesting party once.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.app.db.session import get_db
from backoffice.app.models.ledger_enums import PaymentRequestStatus
from backoffice.app.schemas.common import ApiResponse
from backoffice.app.schemas.ledger import TransactionResultResponse
from backoffice.app.schemas.payment_request import (
    PaymentRequestCreate,
    PaymentRequestUpdate,
    PaymentRequestResponse,
    PaymentRequestResult,
)
from backoffice.app.core.dependencies import get_payment_request_adapter
from backoffice.app.domain.adapters.payment_request import PaymentRequestAdapter

router = APIRouter(prefix="/payment-requests", tags=["Payment Requests"])


@router.post("", response_model=ApiResponse[PaymentRequestResponse], status_code=status.HTTP_201_CREATED)
async def create_payment_request(
    request_data: PaymentRequestCreate,
    db: AsyncSession = Depends(get_db),
    adapter: PaymentRequestAdapter = Depends(get_payment_request_adapter)
):
    payment_request = await adapter.create(db, request_data)
    return ApiResponse(
        message="Payment request created successfully",
        data=PaymentRequestResponse.model_validate(payment_request)
    )


@router.put("/{request_id}", response_model=ApiResponse[PaymentRequestResult])
async def update_payment_request(
    request_id: int,
    update_data: PaymentRequestUpdate,
    db: AsyncSession = Depends(get_db),
    adapter: PaymentRequestAdapter = Depends(get_payment_request_adapter)
):
    """
    Update a payment request.

    Moving it to APPROVED debits the requester; an approved request is final
    and a second approval is rejected with ALREADY_APPROVED.
    """
    outcome = await adapter.update(db, request_id, update_data)
    transaction = TransactionResultResponse.model_validate(outcome.transaction) if outcome.transaction else None

    return ApiResponse(
        message="Payment request updated successfully",
        data=PaymentRequestResult(
            payment_request=PaymentRequestResponse.model_validate(outcome.payment_request),
            transaction=transaction
        )
    )


@router.get("", response_model=ApiResponse[List[PaymentRequestResponse]])
async def list_payment_requests(
    request_status: Optional[PaymentRequestStatus] = Query(None, alias="status", description="Filter by status"),
    party_id: Optional[int] = Query(None, description="Filter by requesting party"),
    db: AsyncSession = Depends(get_db),
    adapter: PaymentRequestAdapter = Depends(get_payment_request_adapter)
):
    requests = await adapter.list(db, status=request_status, party_id=party_id)
    return ApiResponse(
        message="Payment requests retrieved successfully",
        data=[PaymentRequestResponse.model_validate(item) for item in requests]
    )


@router.get("/{request_id}", response_model=ApiResponse[PaymentRequestResponse])
async def get_payment_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    adapter: PaymentRequestAdapter = Depends(get_payment_request_adapter)
):
    payment_request = await adapter.get(db, request_id)
    return ApiResponse(
        message="Payment request retrieved successfully",
        data=PaymentRequestResponse.model_validate(payment_request)
    )

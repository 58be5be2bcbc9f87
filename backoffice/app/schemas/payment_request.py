"""
Payment Request Schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from backoffice.app.models.ledger_enums import PaymentRequestStatus
from backoffice.app.schemas.ledger import TransactionResultResponse


class PaymentRequestCreate(BaseModel):
    """Schema for raising a payment request."""
    party_id: int
    transaction_no: str = Field(..., min_length=1, max_length=100)
    amount: Decimal
    img_url: Optional[str] = Field("", max_length=500)

    class Config:
        extra = "forbid"


class PaymentRequestUpdate(BaseModel):
    """Status transition and field updates of a payment request."""
    status: Optional[PaymentRequestStatus] = None
    transaction_no: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[Decimal] = None
    img_url: Optional[str] = Field(None, max_length=500)
    verified_by: Optional[int] = None

    class Config:
        extra = "forbid"


class PaymentRequestResponse(BaseModel):
    id: int
    party_id: int
    transaction_no: str
    amount: Decimal
    img_url: str
    status: PaymentRequestStatus
    verified_by: Optional[int]
    approved_at: Optional[datetime]

    class Config:
        from_attributes = True


class PaymentRequestResult(BaseModel):
    payment_request: PaymentRequestResponse
    transaction: Optional[TransactionResultResponse] = None

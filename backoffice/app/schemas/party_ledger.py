"""
Shareholder / Customer Ledger Schemas.
"""

from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional
from backoffice.app.models.ledger_enums import TransactionType
from backoffice.app.schemas.ledger import TransactionResultResponse


class PartyTransactionCreate(BaseModel):
    """IN/OUT transaction against a shareholder or customer."""
    party_id: int
    type: TransactionType
    amount: Decimal
    description: str = Field(..., min_length=1, max_length=500)
    added_by: int

    class Config:
        extra = "forbid"


class PartyTransactionResponse(BaseModel):
    id: int
    party_id: int
    transaction_type: TransactionType
    amount: Decimal
    description: str
    added_by: int
    ledger_entry_id: Optional[int]
    company_ledger_entry_id: Optional[int]

    class Config:
        from_attributes = True


class PartyTransactionResult(BaseModel):
    transaction: PartyTransactionResponse
    ledger: TransactionResultResponse
    company_ledger: Optional[TransactionResultResponse] = None

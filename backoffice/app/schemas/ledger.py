"""
Ledger Schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from backoffice.app.models.ledger_enums import Direction, LedgerEntryType


class LedgerEntryResponse(BaseModel):
    """Schema for displaying a ledger entry."""
    id: int
    party_id: int
    entry_type: LedgerEntryType
    direction: Direction
    debit: Decimal
    credit: Decimal
    balance: Decimal
    description: Optional[str]
    reference_type: Optional[str]
    reference_id: Optional[int]
    added_by: Optional[int]
    transaction_at: datetime

    class Config:
        from_attributes = True


class LedgerListResponse(BaseModel):
    """Schema for a paginated party ledger."""
    entries: List[LedgerEntryResponse]
    total: int
    page: int
    page_size: int


class LedgerVerifyResponse(BaseModel):
    """Result of replaying a party ledger."""
    party_id: int
    initial_balance: Decimal
    computed_balance: Decimal
    stored_balance: Decimal
    entry_count: int
    first_inconsistent_entry_id: Optional[int]
    is_consistent: bool

    class Config:
        from_attributes = True


class TransactionResultResponse(BaseModel):
    """One posted balance movement."""
    party_id: int
    direction: Direction
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    ledger_entry: LedgerEntryResponse

    class Config:
        from_attributes = True

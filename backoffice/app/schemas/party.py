"""
Party Schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from backoffice.app.models.ledger_enums import PartyType
from backoffice.app.schemas.ledger import LedgerEntryResponse


class PartyCreate(BaseModel):
    """Schema for registering a balance-holding party."""
    party_type: PartyType
    name: str = Field(..., min_length=1, max_length=200)
    username: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    initial_balance: Decimal = Decimal("0")
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class PartyResponse(BaseModel):
    """Schema for displaying a party."""
    id: int
    party_type: PartyType
    name: str
    username: Optional[str]
    location: Optional[str]
    phone: Optional[str]
    initial_balance: Decimal
    balance: Decimal
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class BalanceResponse(BaseModel):
    party_id: int
    balance: Decimal


class BalanceOverwrite(BaseModel):
    """Corrective administrative overwrite of a balance."""
    balance: Decimal
    actor_id: int
    reason: str = Field(..., min_length=1, max_length=300)

    class Config:
        extra = "forbid"


class BalanceOverwriteResponse(BaseModel):
    party_id: int
    previous_balance: Decimal
    new_balance: Decimal
    ledger_entry: Optional[LedgerEntryResponse]

    class Config:
        from_attributes = True


class AuditLogResponse(BaseModel):
    """Schema for displaying an audit row."""
    id: int
    actor_id: Optional[int]
    action: str
    party_id: Optional[int]
    reference_type: Optional[str]
    reference_id: Optional[int]
    correlation_id: Optional[str] = None
    meta_data: Optional[Dict[str, Any]]
    timestamp: datetime

    class Config:
        from_attributes = True

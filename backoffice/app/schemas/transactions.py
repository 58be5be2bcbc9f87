"""
Expense and Sale Schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from backoffice.app.schemas.ledger import TransactionResultResponse
from backoffice.app.schemas.vehicle import VehicleResponse


class ExpenseCreate(BaseModel):
    """Schema for recording an expense. `party_id` defaults to the company account."""
    party_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    image_path: Optional[str] = Field(None, max_length=500)
    amount: Decimal
    added_by: int

    class Config:
        extra = "forbid"


class ExpenseResponse(BaseModel):
    id: int
    party_id: int
    title: str
    description: str
    image_path: str
    amount: Decimal
    added_by: int
    ledger_entry_id: Optional[int]

    class Config:
        from_attributes = True


class ExpenseResult(BaseModel):
    expense: ExpenseResponse
    transaction: TransactionResultResponse


class SaleCreate(BaseModel):
    """Schema for selling a vehicle. `party_id` defaults to the company account."""
    party_id: Optional[int] = None
    vehicle_id: int
    date: datetime
    sale_price: Decimal
    commission_amount: Decimal = Field(Decimal("0"), ge=0)
    other_charges: Decimal = Field(Decimal("0"), ge=0)
    fullname: Optional[str] = Field(None, max_length=200)
    mobile_no: Optional[str] = Field(None, max_length=50)
    passport_no: Optional[str] = Field(None, max_length=50)
    details: Optional[str] = Field(None, max_length=1000)
    image_path: Optional[str] = Field(None, max_length=500)
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class SaleResponse(BaseModel):
    id: int
    party_id: int
    vehicle_id: int
    date: datetime
    sale_price: Decimal
    commission_amount: Decimal
    other_charges: Decimal
    fullname: str
    mobile_no: str
    passport_no: str
    details: str

    class Config:
        from_attributes = True


class SaleResult(BaseModel):
    sale: SaleResponse
    vehicle: VehicleResponse
    ledger_entries: List[TransactionResultResponse]
    new_balance: Decimal

"""
Inspection, Transport and Port Collect Schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from backoffice.app.models.ledger_enums import PaidStatus
from backoffice.app.schemas.ledger import TransactionResultResponse


class InspectionCreate(BaseModel):
    """One inspection invoice covering one or more vehicles."""
    party_id: Optional[int] = None
    vehicle_ids: List[int] = Field(..., min_length=1)
    date: datetime
    company: str = Field(..., min_length=1, max_length=200)
    invoice_no: str = Field(..., min_length=1, max_length=100)
    invoice_amount: Decimal = Field(Decimal("0"), ge=0)
    invoice_tax: Decimal = Field(Decimal("0"), ge=0)
    invoice_total: Decimal = Field(Decimal("0"), ge=0)
    invoice_amount_dollars: Decimal = Field(Decimal("0"), ge=0)
    image_path: Optional[str] = Field("", max_length=500)
    paid_status: PaidStatus = PaidStatus.UNPAID
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class InspectionUpdate(BaseModel):
    party_id: Optional[int] = None
    date: Optional[datetime] = None
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    invoice_amount: Optional[Decimal] = Field(None, ge=0)
    invoice_tax: Optional[Decimal] = Field(None, ge=0)
    invoice_total: Optional[Decimal] = Field(None, ge=0)
    invoice_amount_dollars: Optional[Decimal] = Field(None, ge=0)
    image_path: Optional[str] = Field(None, max_length=500)
    paid_status: Optional[PaidStatus] = None
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class InspectionResponse(BaseModel):
    id: int
    party_id: int
    vehicle_id: int
    date: datetime
    company: str
    invoice_no: str
    invoice_amount: Decimal
    invoice_tax: Decimal
    invoice_total: Decimal
    invoice_amount_dollars: Decimal
    image_path: str
    paid_status: PaidStatus

    class Config:
        from_attributes = True


class TransportItem(BaseModel):
    vehicle_id: int
    party_id: Optional[int] = None
    date: datetime
    delivery_date: Optional[datetime] = None
    port: Optional[str] = Field("", max_length=200)
    company: Optional[str] = Field("", max_length=200)
    amount: Decimal = Field(Decimal("0"), ge=0)
    ten_percent: Decimal = Field(Decimal("0"), ge=0)
    amount_total: Decimal = Field(Decimal("0"), ge=0)
    amount_total_dollars: Decimal = Field(Decimal("0"), ge=0)
    image_path: Optional[str] = Field("", max_length=500)
    paid_status: PaidStatus = PaidStatus.UNPAID

    class Config:
        extra = "forbid"


class TransportCreate(BaseModel):
    items: List[TransportItem] = Field(..., min_length=1)
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class TransportUpdate(BaseModel):
    party_id: Optional[int] = None
    date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    port: Optional[str] = Field(None, max_length=200)
    company: Optional[str] = Field(None, max_length=200)
    amount: Optional[Decimal] = Field(None, ge=0)
    ten_percent: Optional[Decimal] = Field(None, ge=0)
    amount_total: Optional[Decimal] = Field(None, ge=0)
    amount_total_dollars: Optional[Decimal] = Field(None, ge=0)
    image_path: Optional[str] = Field(None, max_length=500)
    paid_status: Optional[PaidStatus] = None
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class TransportResponse(BaseModel):
    id: int
    party_id: int
    vehicle_id: int
    date: datetime
    delivery_date: Optional[datetime]
    port: str
    company: str
    amount: Decimal
    ten_percent: Decimal
    amount_total: Decimal
    amount_total_dollars: Decimal
    image_path: str
    paid_status: PaidStatus

    class Config:
        from_attributes = True


class PortCollectItem(BaseModel):
    vehicle_id: int
    party_id: Optional[int] = None
    date: datetime
    invoice_no: str = Field(..., min_length=1, max_length=100)
    freight_amount: Decimal = Field(Decimal("0"), ge=0)
    port_charges: Decimal = Field(Decimal("0"), ge=0)
    clearing_charges: Decimal = Field(Decimal("0"), ge=0)
    other_charges: Decimal = Field(Decimal("0"), ge=0)
    total_amount: Decimal = Field(Decimal("0"), ge=0)
    image_path: Optional[str] = Field("", max_length=500)
    paid_status: PaidStatus = PaidStatus.UNPAID

    class Config:
        extra = "forbid"


class PortCollectCreate(BaseModel):
    items: List[PortCollectItem] = Field(..., min_length=1)
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class PortCollectUpdate(BaseModel):
    party_id: Optional[int] = None
    date: Optional[datetime] = None
    freight_amount: Optional[Decimal] = Field(None, ge=0)
    port_charges: Optional[Decimal] = Field(None, ge=0)
    clearing_charges: Optional[Decimal] = Field(None, ge=0)
    other_charges: Optional[Decimal] = Field(None, ge=0)
    total_amount: Optional[Decimal] = Field(None, ge=0)
    image_path: Optional[str] = Field(None, max_length=500)
    paid_status: Optional[PaidStatus] = None
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class PortCollectResponse(BaseModel):
    id: int
    party_id: int
    vehicle_id: int
    date: datetime
    invoice_no: str
    freight_amount: Decimal
    port_charges: Decimal
    clearing_charges: Decimal
    other_charges: Decimal
    total_amount: Decimal
    image_path: str
    paid_status: PaidStatus

    class Config:
        from_attributes = True


class InspectionResult(BaseModel):
    inspection: InspectionResponse
    transaction: Optional[TransactionResultResponse] = None


class TransportResult(BaseModel):
    transport: TransportResponse
    transaction: Optional[TransactionResultResponse] = None


class PortCollectResult(BaseModel):
    port_collect: PortCollectResponse
    transaction: Optional[TransactionResultResponse] = None

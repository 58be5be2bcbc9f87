"""
Purchase Invoice and Cargo Booking Schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from backoffice.app.models.ledger_enums import PaidStatus, FreightTerm
from backoffice.app.schemas.ledger import TransactionResultResponse
from backoffice.app.schemas.vehicle import VehicleResponse


class InvoiceVehicle(BaseModel):
    """Vehicle bought on the invoice; registered together with it."""
    chassis_no: str = Field(..., min_length=1, max_length=100)
    maker: Optional[str] = Field(None, max_length=100)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    color: Optional[str] = Field(None, max_length=50)

    class Config:
        extra = "forbid"


class PurchaseInvoiceCreate(BaseModel):
    party_id: Optional[int] = None
    invoice_no: str = Field(..., min_length=1, max_length=100)
    date: datetime
    auction_house: Optional[str] = Field("", max_length=200)
    amount_yen: Decimal = Field(Decimal("0"), ge=0)
    amount_dollars: Decimal = Field(Decimal("0"), ge=0)
    image_path: Optional[str] = Field("", max_length=500)
    paid_status: PaidStatus = PaidStatus.UNPAID
    vehicles: List[InvoiceVehicle] = Field(default_factory=list)
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class PurchaseInvoiceUpdate(BaseModel):
    party_id: Optional[int] = None
    date: Optional[datetime] = None
    auction_house: Optional[str] = Field(None, max_length=200)
    amount_yen: Optional[Decimal] = Field(None, ge=0)
    amount_dollars: Optional[Decimal] = Field(None, ge=0)
    image_path: Optional[str] = Field(None, max_length=500)
    paid_status: Optional[PaidStatus] = None
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class PurchaseInvoiceResponse(BaseModel):
    id: int
    party_id: int
    invoice_no: str
    date: datetime
    auction_house: str
    amount_yen: Decimal
    amount_dollars: Decimal
    image_path: str
    paid_status: PaidStatus

    class Config:
        from_attributes = True


class PurchaseInvoiceResult(BaseModel):
    invoice: PurchaseInvoiceResponse
    vehicles: List[VehicleResponse] = []
    transaction: Optional[TransactionResultResponse] = None


class CargoBookingCreate(BaseModel):
    """
    Ocean shipment of vehicles.

    PRE_PAID debits `net_total_amount_dollars` from the payer, COLLECT
    credits `total_amount_dollars`; the posted amount must be positive.
    """
    party_id: Optional[int] = None
    booking_no: str = Field(..., min_length=1, max_length=100)
    vehicle_ids: List[int] = Field(..., min_length=1)
    freight_term: FreightTerm
    carrier: Optional[str] = Field("", max_length=200)
    vessel: Optional[str] = Field("", max_length=200)
    port_of_loading: Optional[str] = Field("", max_length=200)
    port_of_discharge: Optional[str] = Field("", max_length=200)
    consignee: Optional[str] = Field("", max_length=200)
    etd: Optional[datetime] = None
    eta: Optional[datetime] = None
    freight_amount_dollars: Decimal = Field(Decimal("0"), ge=0)
    total_amount_dollars: Decimal = Field(Decimal("0"), ge=0)
    net_total_amount_dollars: Decimal = Field(Decimal("0"), ge=0)
    image_path: Optional[str] = Field("", max_length=500)
    added_by: Optional[int] = None

    class Config:
        extra = "forbid"


class CargoBookingResponse(BaseModel):
    id: int
    party_id: int
    booking_no: str
    freight_term: FreightTerm
    carrier: str
    vessel: str
    port_of_loading: str
    port_of_discharge: str
    consignee: str
    etd: Optional[datetime]
    eta: Optional[datetime]
    freight_amount_dollars: Decimal
    total_amount_dollars: Decimal
    net_total_amount_dollars: Decimal
    image_path: str
    ledger_entry_id: Optional[int]

    class Config:
        from_attributes = True


class CargoBookingResult(BaseModel):
    booking: CargoBookingResponse
    vehicle_ids: List[int]
    transaction: Optional[TransactionResultResponse] = None

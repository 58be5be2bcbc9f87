"""
Purchase Invoice and Cargo Booking API Endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.app.db.session import get_db
from backoffice.app.models.ledger_enums import PaidStatus, FreightTerm
from backoffice.app.schemas.common import ApiResponse
from backoffice.app.schemas.ledger import TransactionResultResponse
from backoffice.app.schemas.vehicle import VehicleResponse
from backoffice.app.schemas.purchasing import (
    PurchaseInvoiceCreate,
    PurchaseInvoiceUpdate,
    PurchaseInvoiceResponse,
    PurchaseInvoiceResult,
    CargoBookingCreate,
    CargoBookingResponse,
    CargoBookingResult,
)
from backoffice.app.core.dependencies import get_purchase_invoice_adapter, get_cargo_booking_adapter
from backoffice.app.domain.adapters.purchasing import PurchaseInvoiceAdapter, CargoBookingAdapter

purchase_invoice_router = APIRouter(prefix="/purchase-invoices", tags=["Purchase Invoices"])
cargo_router = APIRouter(prefix="/cargo", tags=["Cargo"])


# ---------------------------------------------------------------- Purchase invoices

@purchase_invoice_router.post("", response_model=ApiResponse[PurchaseInvoiceResult], status_code=status.HTTP_201_CREATED)
async def create_purchase_invoice(
    invoice_data: PurchaseInvoiceCreate,
    db: AsyncSession = Depends(get_db),
    adapter: PurchaseInvoiceAdapter = Depends(get_purchase_invoice_adapter)
):
    """
    Create an invoice and register the vehicles bought on it.

    An invoice submitted as PAID debits `amount_dollars` immediately.
    """
    item = invoice_data.model_dump(exclude={"added_by"}, exclude_none=True)
    batch = await adapter.create(db, [item], actor_id=invoice_data.added_by)

    record = batch.records[0]
    transaction = TransactionResultResponse.model_validate(batch.transactions[0]) if batch.transactions else None

    return ApiResponse(
        message="Purchase invoice created successfully",
        data=PurchaseInvoiceResult(
            invoice=PurchaseInvoiceResponse.model_validate(record),
            vehicles=[VehicleResponse.model_validate(v) for v in batch.vehicles[record.id]],
            transaction=transaction
        )
    )


@purchase_invoice_router.put("/{invoice_id}", response_model=ApiResponse[PurchaseInvoiceResult])
async def update_purchase_invoice(
    invoice_id: int,
    update_data: PurchaseInvoiceUpdate,
    db: AsyncSession = Depends(get_db),
    adapter: PurchaseInvoiceAdapter = Depends(get_purchase_invoice_adapter)
):
    """
    Update an invoice; the transition into PAID debits `amount_dollars`.
    """
    outcome = await adapter.update(
        db,
        invoice_id,
        update_data.model_dump(exclude={"paid_status", "added_by"}, exclude_none=True),
        paid_status=update_data.paid_status,
        actor_id=update_data.added_by
    )
    transaction = TransactionResultResponse.model_validate(outcome.transaction) if outcome.transaction else None
    vehicles = await adapter.vehicles_of(db, invoice_id)

    return ApiResponse(
        message="Purchase invoice updated successfully",
        data=PurchaseInvoiceResult(
            invoice=PurchaseInvoiceResponse.model_validate(outcome.record),
            vehicles=[VehicleResponse.model_validate(v) for v in vehicles],
            transaction=transaction
        )
    )


@purchase_invoice_router.get("", response_model=ApiResponse[List[PurchaseInvoiceResponse]])
async def list_purchase_invoices(
    paid_status: Optional[PaidStatus] = Query(None, description="Filter by paid status"),
    db: AsyncSession = Depends(get_db),
    adapter: PurchaseInvoiceAdapter = Depends(get_purchase_invoice_adapter)
):
    records = await adapter.list(db, paid_status)
    return ApiResponse(
        message="Purchase invoices retrieved successfully",
        data=[PurchaseInvoiceResponse.model_validate(record) for record in records]
    )


@purchase_invoice_router.get("/{invoice_id}", response_model=ApiResponse[PurchaseInvoiceResult])
async def get_purchase_invoice(
    invoice_id: int,
    db: AsyncSession = Depends(get_db),
    adapter: PurchaseInvoiceAdapter = Depends(get_purchase_invoice_adapter)
):
    record = await adapter.get(db, invoice_id)
    vehicles = await adapter.vehicles_of(db, invoice_id)
    return ApiResponse(
        message="Purchase invoice retrieved successfully",
        data=PurchaseInvoiceResult(
            invoice=PurchaseInvoiceResponse.model_validate(record),
            vehicles=[VehicleResponse.model_validate(v) for v in vehicles]
        )
    )


# ---------------------------------------------------------------- Cargo

@cargo_router.post("", response_model=ApiResponse[CargoBookingResult], status_code=status.HTTP_201_CREATED)
async def create_cargo_booking(
    booking_data: CargoBookingCreate,
    db: AsyncSession = Depends(get_db),
    adapter: CargoBookingAdapter = Depends(get_cargo_booking_adapter)
):
    """
    Book a shipment and move its vehicles to SHIPPED.

    PRE_PAID debits the payer, COLLECT credits it.
    """
    booking = booking_data.model_dump(exclude={"vehicle_ids", "added_by"}, exclude_none=True)
    outcome = await adapter.book(db, booking, booking_data.vehicle_ids, actor_id=booking_data.added_by)

    return ApiResponse(
        message="Cargo booked successfully",
        data=CargoBookingResult(
            booking=CargoBookingResponse.model_validate(outcome.booking),
            vehicle_ids=outcome.vehicle_ids,
            transaction=TransactionResultResponse.model_validate(outcome.transaction)
        )
    )


@cargo_router.get("", response_model=ApiResponse[List[CargoBookingResponse]])
async def list_cargo_bookings(
    freight_term: Optional[FreightTerm] = Query(None, description="Filter by freight term"),
    db: AsyncSession = Depends(get_db),
    adapter: CargoBookingAdapter = Depends(get_cargo_booking_adapter)
):
    bookings = await adapter.list(db, freight_term)
    return ApiResponse(
        message="Cargo bookings retrieved successfully",
        data=[CargoBookingResponse.model_validate(booking) for booking in bookings]
    )


@cargo_router.get("/{booking_id}", response_model=ApiResponse[CargoBookingResult])
async def get_cargo_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    adapter: CargoBookingAdapter = Depends(get_cargo_booking_adapter)
):
    booking = await adapter.get(db, booking_id)
    return ApiResponse(
        message="Cargo booking retrieved successfully",
        data=CargoBookingResult(
            booking=CargoBookingResponse.model_validate(booking),
            vehicle_ids=await adapter.vehicle_ids(db, booking_id)
        )
    )

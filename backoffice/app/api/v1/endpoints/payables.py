"""
Inspection, Transport and Port Collect API Endpoints.

The three record families share one lifecycle: batch creation moves the
listed vehicles into the matching stage, and the UNPAID -> PAID transition
debits the payable amount from the paying party exactly once.
"""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.app.db.session import get_db
from backoffice.app.models.ledger_enums import PaidStatus
from backoffice.app.schemas.common import ApiResponse
from backoffice.app.schemas.ledger import TransactionResultResponse
from backoffice.app.schemas.payables import (
    InspectionCreate,
    InspectionUpdate,
    InspectionResponse,
    InspectionResult,
    TransportCreate,
    TransportUpdate,
    TransportResponse,
    TransportResult,
    PortCollectCreate,
    PortCollectUpdate,
    PortCollectResponse,
    PortCollectResult,
)
from backoffice.app.core.dependencies import (
    get_inspection_adapter,
    get_transport_adapter,
    get_port_collect_adapter,
)
from backoffice.app.domain.adapters.payables import (
    InspectionAdapter,
    TransportAdapter,
    PortCollectAdapter,
    PayableBatchOutcome,
)

inspection_router = APIRouter(prefix="/inspection", tags=["Inspection"])
transport_router = APIRouter(prefix="/transport", tags=["Transport"])
port_collect_router = APIRouter(prefix="/port-collect", tags=["Port Collect"])


def _transactions_by_record(batch: PayableBatchOutcome) -> Dict[int, TransactionResultResponse]:
    return {
        result.ledger_entry.reference_id: TransactionResultResponse.model_validate(result)
        for result in batch.transactions
    }


def _changes(update_data) -> Dict[str, Any]:
    return update_data.model_dump(exclude={"paid_status", "added_by"}, exclude_none=True)


# ---------------------------------------------------------------- Inspection

@inspection_router.post("", response_model=ApiResponse[List[InspectionResult]], status_code=status.HTTP_201_CREATED)
async def create_inspection(
    inspection_data: InspectionCreate,
    db: AsyncSession = Depends(get_db),
    adapter: InspectionAdapter = Depends(get_inspection_adapter)
):
    """
    Create one inspection per listed vehicle.

    Records submitted as PAID are charged immediately.
    """
    base = inspection_data.model_dump(exclude={"vehicle_ids", "added_by"}, exclude_none=True)
    items = [dict(base, vehicle_id=vehicle_id) for vehicle_id in inspection_data.vehicle_ids]

    batch = await adapter.create(db, items, actor_id=inspection_data.added_by)
    transactions = _transactions_by_record(batch)

    return ApiResponse(
        message="Inspection created successfully",
        data=[
            InspectionResult(
                inspection=InspectionResponse.model_validate(record),
                transaction=transactions.get(record.id)
            )
            for record in batch.records
        ]
    )


@inspection_router.put("/{inspection_id}", response_model=ApiResponse[InspectionResult])
async def update_inspection(
    inspection_id: int,
    update_data: InspectionUpdate,
    db: AsyncSession = Depends(get_db),
    adapter: InspectionAdapter = Depends(get_inspection_adapter)
):
    """
    Update an inspection; the transition into PAID debits `invoice_amount_dollars`.
    """
    outcome = await adapter.update(
        db,
        inspection_id,
        _changes(update_data),
        paid_status=update_data.paid_status,
        actor_id=update_data.added_by
    )
    transaction = TransactionResultResponse.model_validate(outcome.transaction) if outcome.transaction else None

    return ApiResponse(
        message="Inspection updated successfully",
        data=InspectionResult(inspection=InspectionResponse.model_validate(outcome.record), transaction=transaction)
    )


@inspection_router.get("", response_model=ApiResponse[List[InspectionResponse]])
async def list_inspections(
    paid_status: Optional[PaidStatus] = Query(None, description="Filter by paid status"),
    db: AsyncSession = Depends(get_db),
    adapter: InspectionAdapter = Depends(get_inspection_adapter)
):
    records = await adapter.list(db, paid_status)
    return ApiResponse(
        message="Inspections retrieved successfully",
        data=[InspectionResponse.model_validate(record) for record in records]
    )


@inspection_router.get("/{inspection_id}", response_model=ApiResponse[InspectionResponse])
async def get_inspection(
    inspection_id: int,
    db: AsyncSession = Depends(get_db),
    adapter: InspectionAdapter = Depends(get_inspection_adapter)
):
    record = await adapter.get(db, inspection_id)
    return ApiResponse(message="Inspection retrieved successfully", data=InspectionResponse.model_validate(record))


# ---------------------------------------------------------------- Transport

@transport_router.post("", response_model=ApiResponse[List[TransportResult]], status_code=status.HTTP_201_CREATED)
async def create_transport(
    transport_data: TransportCreate,
    db: AsyncSession = Depends(get_db),
    adapter: TransportAdapter = Depends(get_transport_adapter)
):
    """
    Create transport records, one per vehicle.
    """
    items = [item.model_dump(exclude_none=True) for item in transport_data.items]

    batch = await adapter.create(db, items, actor_id=transport_data.added_by)
    transactions = _transactions_by_record(batch)

    return ApiResponse(
        message="Transport created successfully",
        data=[
            TransportResult(
                transport=TransportResponse.model_validate(record),
                transaction=transactions.get(record.id)
            )
            for record in batch.records
        ]
    )


@transport_router.put("/{transport_id}", response_model=ApiResponse[TransportResult])
async def update_transport(
    transport_id: int,
    update_data: TransportUpdate,
    db: AsyncSession = Depends(get_db),
    adapter: TransportAdapter = Depends(get_transport_adapter)
):
    """
    Update a transport record; the transition into PAID debits `amount_total_dollars`.
    """
    outcome = await adapter.update(
        db,
        transport_id,
        _changes(update_data),
        paid_status=update_data.paid_status,
        actor_id=update_data.added_by
    )
    transaction = TransactionResultResponse.model_validate(outcome.transaction) if outcome.transaction else None

    return ApiResponse(
        message="Transport updated successfully",
        data=TransportResult(transport=TransportResponse.model_validate(outcome.record), transaction=transaction)
    )


@transport_router.get("", response_model=ApiResponse[List[TransportResponse]])
async def list_transports(
    paid_status: Optional[PaidStatus] = Query(None, description="Filter by paid status"),
    db: AsyncSession = Depends(get_db),
    adapter: TransportAdapter = Depends(get_transport_adapter)
):
    records = await adapter.list(db, paid_status)
    return ApiResponse(
        message="Transports retrieved successfully",
        data=[TransportResponse.model_validate(record) for record in records]
    )


@transport_router.get("/{transport_id}", response_model=ApiResponse[TransportResponse])
async def get_transport(
    transport_id: int,
    db: AsyncSession = Depends(get_db),
    adapter: TransportAdapter = Depends(get_transport_adapter)
):
    record = await adapter.get(db, transport_id)
    return ApiResponse(message="Transport retrieved successfully", data=TransportResponse.model_validate(record))


# ---------------------------------------------------------------- Port collect

@port_collect_router.post("", response_model=ApiResponse[List[PortCollectResult]], status_code=status.HTTP_201_CREATED)
async def create_port_collect(
    collect_data: PortCollectCreate,
    db: AsyncSession = Depends(get_db),
    adapter: PortCollectAdapter = Depends(get_port_collect_adapter)
):
    """
    Create port collection records in a batch.
    """
    items = [item.model_dump(exclude_none=True) for item in collect_data.items]

    batch = await adapter.create(db, items, actor_id=collect_data.added_by)
    transactions = _transactions_by_record(batch)

    return ApiResponse(
        message="Port collect created successfully",
        data=[
            PortCollectResult(
                port_collect=PortCollectResponse.model_validate(record),
                transaction=transactions.get(record.id)
            )
            for record in batch.records
        ]
    )


@port_collect_router.put("/{collect_id}", response_model=ApiResponse[PortCollectResult])
async def update_port_collect(
    collect_id: int,
    update_data: PortCollectUpdate,
    db: AsyncSession = Depends(get_db),
    adapter: PortCollectAdapter = Depends(get_port_collect_adapter)
):
    """
    Update a port collection record; the transition into PAID debits `total_amount`.
    """
    outcome = await adapter.update(
        db,
        collect_id,
        _changes(update_data),
        paid_status=update_data.paid_status,
        actor_id=update_data.added_by
    )
    transaction = TransactionResultResponse.model_validate(outcome.transaction) if outcome.transaction else None

    return ApiResponse(
        message="Port collect updated successfully",
        data=PortCollectResult(port_collect=PortCollectResponse.model_validate(outcome.record), transaction=transaction)
    )


@port_collect_router.get("", response_model=ApiResponse[List[PortCollectResponse]])
async def list_port_collects(
    paid_status: Optional[PaidStatus] = Query(None, description="Filter by paid status"),
    db: AsyncSession = Depends(get_db),
    adapter: PortCollectAdapter = Depends(get_port_collect_adapter)
):
    records = await adapter.list(db, paid_status)
    return ApiResponse(
        message="Port collects retrieved successfully",
        data=[PortCollectResponse.model_validate(record) for record in records]
    )


@port_collect_router.get("/{collect_id}", response_model=ApiResponse[PortCollectResponse])
async def get_port_collect(
    collect_id: int,
    db: AsyncSession = Depends(get_db),
    adapter: PortCollectAdapter = Depends(get_port_collect_adapter)
):
    record = await adapter.get(db, collect_id)
    return ApiResponse(message="Port collect retrieved successfully", data=PortCollectResponse.model_validate(record))

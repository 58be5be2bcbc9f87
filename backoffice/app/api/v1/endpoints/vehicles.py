"""
Vehicle API Endpoints.

Vehicle registration and stage moves. Stage changes carry no balance
effect; money moves through the inspection, transport, port collection
and sale endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backoffice.app.db.session import get_db
from backoffice.app.models.vehicle import Vehicle
from backoffice.app.models.ledger_enums import VehicleStage, SaleStatus
from backoffice.app.schemas.common import ApiResponse
from backoffice.app.schemas.vehicle import VehicleCreate, VehicleStageUpdate, VehicleResponse
from backoffice.app.core.dependencies import get_balance_engine
from backoffice.app.core.exceptions import RecordNotFoundError
from backoffice.app.domain.ledger.engine import BalanceEngine
from backoffice.app.domain.ledger.party_store import PartyStore

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


async def _get_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id, populate_existing=True)
    if not vehicle:
        raise RecordNotFoundError("Vehicle", vehicle_id)
    return vehicle


@router.post("", response_model=ApiResponse[VehicleResponse], status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    db: AsyncSession = Depends(get_db),
    engine: BalanceEngine = Depends(get_balance_engine)
):
    """
    Register a vehicle. It starts in stage PENDING and unsold.

    Duplicate chassis numbers are rejected as a constraint conflict.
    """
    async def work(unit) -> Vehicle:
        if vehicle_data.owner_party_id is not None:
            await PartyStore.get_party(unit.db, vehicle_data.owner_party_id)
        vehicle = Vehicle(
            chassis_no=vehicle_data.chassis_no,
            maker=vehicle_data.maker,
            year=vehicle_data.year,
            color=vehicle_data.color,
            owner_party_id=vehicle_data.owner_party_id,
            stage=VehicleStage.PENDING,
            sale_status=SaleStatus.PENDING,
        )
        unit.db.add(vehicle)
        await unit.db.flush()
        return vehicle

    vehicle = await engine.atomic(db, work)
    await db.refresh(vehicle)

    return ApiResponse(message="Vehicle created successfully", data=VehicleResponse.model_validate(vehicle))


@router.get("", response_model=ApiResponse[List[VehicleResponse]])
async def list_vehicles(
    stage: Optional[VehicleStage] = Query(None, description="Filter by stage"),
    sale_status: Optional[SaleStatus] = Query(None, description="Filter by sale status"),
    db: AsyncSession = Depends(get_db)
):
    query = select(Vehicle).order_by(Vehicle.id.desc())
    if stage:
        query = query.where(Vehicle.stage == stage)
    if sale_status:
        query = query.where(Vehicle.sale_status == sale_status)
    result = await db.execute(query)

    return ApiResponse(
        message="Vehicles retrieved successfully",
        data=[VehicleResponse.model_validate(vehicle) for vehicle in result.scalars().all()]
    )


@router.get("/{vehicle_id}", response_model=ApiResponse[VehicleResponse])
async def get_vehicle(vehicle_id: int, db: AsyncSession = Depends(get_db)):
    vehicle = await _get_vehicle(db, vehicle_id)
    return ApiResponse(message="Vehicle retrieved successfully", data=VehicleResponse.model_validate(vehicle))


@router.put("/{vehicle_id}/stage", response_model=ApiResponse[VehicleResponse])
async def update_vehicle_stage(
    vehicle_id: int,
    stage_data: VehicleStageUpdate,
    db: AsyncSession = Depends(get_db),
    engine: BalanceEngine = Depends(get_balance_engine)
):
    """
    Move a vehicle to another stage, e.g. into the showroom.
    """
    async def work(unit) -> Vehicle:
        vehicle = await _get_vehicle(unit.db, vehicle_id)
        vehicle.stage = stage_data.stage
        await unit.db.flush()
        return vehicle

    vehicle = await engine.atomic(db, work)
    await db.refresh(vehicle)

    return ApiResponse(message="Vehicle stage updated", data=VehicleResponse.model_validate(vehicle))

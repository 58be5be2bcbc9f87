"""
Sale adapter.

Two-step posting against the selling party: CREDIT the sale price, then
DEBIT commission plus other charges. The vehicle flips PENDING -> SOLD in
the same unit through a conditional update.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update

from backoffice.app.models.sale import Sale
from backoffice.app.models.vehicle import Vehicle
from backoffice.app.models.ledger_enums import Direction, SaleStatus
from backoffice.app.schemas.transactions import SaleCreate
from backoffice.app.core.exceptions import RecordNotFoundError, VehicleAlreadySoldError
from backoffice.app.domain.ledger.engine import BalanceEngine, TransactionRequest, TransactionResult, normalize_amount
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.adapters.policy import AdapterPolicy
from backoffice.app.services.audit import log_event, AuditAction


@dataclass
class SaleOutcome:
    sale: Sale
    vehicle: Vehicle
    credit: TransactionResult
    debit: Optional[TransactionResult]

    @property
    def new_balance(self) -> Decimal:
        return (self.debit or self.credit).new_balance


class SaleAdapter:

    def __init__(self, engine: BalanceEngine, policy: AdapterPolicy):
        self.engine = engine
        self.policy = policy

    async def record_sale(self, db: AsyncSession, payload: SaleCreate) -> SaleOutcome:
        """
        Sell a vehicle.

        Flow:
        1. Validate sale price and the vehicle
        2. Mark vehicle SOLD (only from PENDING) and create the Sale
        3. CREDIT sale price
        4. DEBIT commission + other charges when non-zero

        Raises:
            RecordNotFoundError: If the vehicle does not exist
            VehicleAlreadySoldError: If the vehicle is not PENDING
        """
        sale_price = normalize_amount(payload.sale_price)
        charges = (payload.commission_amount or Decimal("0")) + (payload.other_charges or Decimal("0"))
        party_id = payload.party_id or self.policy.company_party_id

        vehicle = await db.get(Vehicle, payload.vehicle_id, populate_existing=True)
        if not vehicle:
            raise RecordNotFoundError("Vehicle", payload.vehicle_id)
        if vehicle.sale_status != SaleStatus.PENDING:
            raise VehicleAlreadySoldError(vehicle.id, vehicle.chassis_no)
        await PartyStore.get_party(db, party_id)

        async def mark_sold(session: AsyncSession) -> Sale:
            result = await session.execute(
                update(Vehicle)
                .where(Vehicle.id == vehicle.id, Vehicle.sale_status == SaleStatus.PENDING)
                .values(sale_status=SaleStatus.SOLD, updated_at=datetime.now(timezone.utc))
                .returning(Vehicle.id)
                .execution_options(synchronize_session=False)
            )
            if result.scalar_one_or_none() is None:
                raise VehicleAlreadySoldError(vehicle.id, vehicle.chassis_no)

            sale = Sale(
                party_id=party_id,
                vehicle_id=vehicle.id,
                date=payload.date,
                sale_price=sale_price,
                commission_amount=payload.commission_amount or Decimal("0"),
                other_charges=payload.other_charges or Decimal("0"),
                fullname=payload.fullname or "",
                mobile_no=payload.mobile_no or "",
                passport_no=payload.passport_no or "",
                details=payload.details or "",
                image_path=payload.image_path or "",
            )
            session.add(sale)
            await session.flush()
            return sale

        async def work(unit) -> SaleOutcome:
            credit = await unit.post(TransactionRequest(
                party_id=party_id,
                direction=Direction.CREDIT,
                amount=sale_price,
                description=f"Sale amount credited for vehicle {vehicle.chassis_no}",
                allow_negative=self.policy.allow_negative,
                reference_type="sale",
                added_by=payload.added_by,
                related_record_mutation=mark_sold,
            ))
            sale = credit.related_record

            debit = None
            if charges > 0:
                debit = await unit.post(TransactionRequest(
                    party_id=party_id,
                    direction=Direction.DEBIT,
                    amount=charges,
                    description=(
                        f"Sale charges (Commission: {sale.commission_amount}, Other: {sale.other_charges}) "
                        f"for vehicle {vehicle.chassis_no} - {payload.details or 'No details'}"
                    ),
                    allow_negative=self.policy.allow_negative,
                    reference_type="sale",
                    reference_id=sale.id,
                    added_by=payload.added_by,
                ))

            await log_event(
                unit.db,
                action=AuditAction.VEHICLE_SOLD,
                actor_id=payload.added_by,
                party_id=party_id,
                reference_type="sale",
                reference_id=sale.id,
                metadata={"vehicle_id": vehicle.id, "sale_price": str(sale_price)}
            )
            await unit.db.refresh(vehicle)
            return SaleOutcome(sale=sale, vehicle=vehicle, credit=credit, debit=debit)

        return await self.engine.atomic(db, work)

"""
Purchasing adapters: auction purchase invoices and cargo bookings.

A purchase invoice registers the vehicles it covers and charges the payer
once, when it is created PAID or later moves UNPAID -> PAID. A cargo
booking ships a batch of vehicles and posts one movement whose direction
follows the freight term.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from backoffice.app.models.purchase_invoice import PurchaseInvoice
from backoffice.app.models.cargo_booking import CargoBooking
from backoffice.app.models.vehicle import Vehicle
from backoffice.app.models.ledger_enums import Direction, FreightTerm, PaidStatus, VehicleStage
from backoffice.app.core.exceptions import RecordNotFoundError, AlreadyProcessedError
from backoffice.app.domain.ledger.engine import (
    BalanceEngine,
    TransactionRequest,
    TransactionResult,
    normalize_amount,
)
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.adapters.policy import AdapterPolicy
from backoffice.app.domain.adapters.payables import PayableRecordAdapter, PayableBatchOutcome
from backoffice.app.services.audit import log_event, AuditAction

logger = logging.getLogger("backoffice.ledger")


@dataclass
class PurchaseBatchOutcome(PayableBatchOutcome):
    # Vehicles registered per invoice id
    vehicles: Dict[int, List[Vehicle]] = field(default_factory=dict)


class PurchaseInvoiceAdapter(PayableRecordAdapter):
    """
    Purchase invoices reuse the payable lifecycle, but one invoice covers
    many vehicles and is charged as a whole.
    """

    model = PurchaseInvoice
    resource_name = "Purchase invoice"
    reference_type = "purchase_invoice"
    paid_action = AuditAction.PURCHASE_INVOICE_PAID

    def describe(self, record: PurchaseInvoice, vehicle: Optional[Vehicle] = None) -> str:
        return f"Payment for Purchase Invoice #{record.invoice_no}"

    async def payment_description(self, db: AsyncSession, record: PurchaseInvoice) -> str:
        return self.describe(record)

    async def create(
        self,
        db: AsyncSession,
        items: List[Dict[str, Any]],
        actor_id: Optional[int] = None
    ) -> PurchaseBatchOutcome:
        """
        Create invoices together with the vehicles they cover.

        Each item is a dict of invoice fields plus a `vehicles` list of
        vehicle field dicts. Invoices created as PAID are charged in the
        same unit.

        Raises:
            PartyNotFoundError: If a paying party is missing
            InvalidAmountError: If a PAID invoice has no dollar amount
            ConstraintConflictError: On duplicate invoice or chassis numbers
        """
        async def work(unit) -> PurchaseBatchOutcome:
            outcome = PurchaseBatchOutcome()
            for item in items:
                values = dict(item)
                vehicle_rows = values.pop("vehicles", [])
                values["party_id"] = values.get("party_id") or self.policy.company_party_id
                paid = values.pop("paid_status", None) == PaidStatus.PAID

                await PartyStore.get_party(unit.db, values["party_id"])

                record = PurchaseInvoice(paid_status=PaidStatus.UNPAID, **values)
                unit.db.add(record)
                await unit.db.flush()

                vehicles = [Vehicle(purchase_invoice_id=record.id, **row) for row in vehicle_rows]
                unit.db.add_all(vehicles)
                await unit.db.flush()
                for vehicle in vehicles:
                    await unit.db.refresh(vehicle)

                if paid:
                    record.paid_status = PaidStatus.PAID
                    result = await unit.post(self._pay_request(record, self.describe(record), actor_id))
                    await self._audit_paid(unit.db, record, actor_id, result)
                    outcome.transactions.append(result)

                outcome.records.append(record)
                outcome.vehicles[record.id] = vehicles

            await unit.db.flush()
            return outcome

        return await self.engine.atomic(db, work)

    async def vehicles_of(self, db: AsyncSession, invoice_id: int) -> List[Vehicle]:
        result = await db.execute(
            select(Vehicle).where(Vehicle.purchase_invoice_id == invoice_id).order_by(Vehicle.id)
        )
        return result.scalars().all()


@dataclass
class CargoOutcome:
    booking: CargoBooking
    vehicle_ids: List[int]
    transaction: TransactionResult


class CargoBookingAdapter:
    """
    Book a shipment: every listed vehicle moves to SHIPPED and the payer's
    balance moves once.

    PRE_PAID bookings debit `net_total_amount_dollars`; COLLECT bookings
    credit `total_amount_dollars`. A vehicle can sit on one booking only.
    """

    reference_type = "cargo_booking"

    def __init__(self, engine: BalanceEngine, policy: AdapterPolicy):
        self.engine = engine
        self.policy = policy

    @staticmethod
    def describe(booking: CargoBooking, vehicle_count: int) -> str:
        term = booking.freight_term.value.replace("_", " ").lower()
        return f"Cargo booking {booking.booking_no} ({term}): {vehicle_count} vehicle(s)"

    async def book(
        self,
        db: AsyncSession,
        booking: Dict[str, Any],
        vehicle_ids: List[int],
        actor_id: Optional[int] = None
    ) -> CargoOutcome:
        """
        Create a booking, ship its vehicles and post the freight movement.

        Raises:
            InvalidAmountError: If the amount posted for the freight term is not positive
            PartyNotFoundError: If the paying party is missing
            RecordNotFoundError: If a vehicle is missing
            AlreadyProcessedError: If a vehicle is already on a booking
            ConstraintConflictError: On a duplicate booking number
        """
        values = dict(booking)
        values["party_id"] = values.get("party_id") or self.policy.company_party_id
        ids = list(dict.fromkeys(vehicle_ids))

        record = CargoBooking(**values)
        amount = normalize_amount(record.posted_amount)
        direction = Direction.OUT if record.freight_term == FreightTerm.PRE_PAID else Direction.IN

        async def ship(session: AsyncSession) -> CargoBooking:
            result = await session.execute(
                update(Vehicle)
                .where(Vehicle.id.in_(ids), Vehicle.cargo_booking_id.is_(None))
                .values(
                    cargo_booking_id=record.id,
                    stage=VehicleStage.SHIPPED,
                    updated_at=datetime.now(timezone.utc),
                )
                .returning(Vehicle.id)
                .execution_options(synchronize_session=False)
            )
            shipped = set(result.scalars().all())
            if len(shipped) != len(ids):
                raise AlreadyProcessedError(
                    "Vehicle is already booked on a cargo",
                    details={"vehicle_ids": [vid for vid in ids if vid not in shipped]}
                )
            return record

        async def work(unit) -> CargoOutcome:
            await PartyStore.get_party(unit.db, record.party_id)

            found = await unit.db.execute(select(Vehicle.id).where(Vehicle.id.in_(ids)))
            existing = set(found.scalars().all())
            for vehicle_id in ids:
                if vehicle_id not in existing:
                    raise RecordNotFoundError("Vehicle", vehicle_id)

            unit.db.add(record)
            await unit.db.flush()

            result = await unit.post(TransactionRequest(
                party_id=record.party_id,
                direction=direction,
                amount=amount,
                description=self.describe(record, len(ids)),
                allow_negative=self.policy.allow_negative,
                reference_type=self.reference_type,
                reference_id=record.id,
                added_by=actor_id,
                related_record_mutation=ship,
            ))
            record.ledger_entry_id = result.ledger_entry.id
            await unit.db.flush()

            await log_event(
                unit.db,
                action=AuditAction.CARGO_BOOKED,
                actor_id=actor_id,
                party_id=record.party_id,
                reference_type=self.reference_type,
                reference_id=record.id,
                metadata={
                    "freight_term": record.freight_term.value,
                    "amount": str(result.amount),
                    "vehicle_ids": ids,
                }
            )
            return CargoOutcome(booking=record, vehicle_ids=ids, transaction=result)

        outcome = await self.engine.atomic(db, work)
        logger.info(
            "Cargo booking %s shipped %s vehicle(s), %s %s on party %s",
            outcome.booking.booking_no, len(ids), direction.value, amount, outcome.booking.party_id
        )
        return outcome

    async def get(self, db: AsyncSession, booking_id: int) -> CargoBooking:
        booking = await db.get(CargoBooking, booking_id)
        if not booking:
            raise RecordNotFoundError("Cargo booking", booking_id)
        return booking

    async def vehicle_ids(self, db: AsyncSession, booking_id: int) -> List[int]:
        result = await db.execute(
            select(Vehicle.id).where(Vehicle.cargo_booking_id == booking_id).order_by(Vehicle.id)
        )
        return result.scalars().all()

    async def list(self, db: AsyncSession, freight_term: Optional[FreightTerm] = None) -> List[CargoBooking]:
        query = select(CargoBooking).order_by(CargoBooking.id.desc())
        if freight_term:
            query = query.where(CargoBooking.freight_term == freight_term)
        result = await db.execute(query)
        return result.scalars().all()

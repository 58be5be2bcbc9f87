"""
Payable record adapters: inspection, transport and port collection.

All three follow the same lifecycle. Records are created UNPAID (or PAID,
charged immediately) and moving a record into PAID debits its payable
amount from the paying party exactly once.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Type
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from backoffice.app.models.inspection import Inspection
from backoffice.app.models.transport import Transport
from backoffice.app.models.port_collect import PortCollect
from backoffice.app.models.vehicle import Vehicle
from backoffice.app.models.ledger_enums import Direction, PaidStatus, VehicleStage
from backoffice.app.core.exceptions import RecordNotFoundError, AlreadyProcessedError
from backoffice.app.domain.ledger.engine import BalanceEngine, TransactionRequest, TransactionResult
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.adapters.policy import AdapterPolicy
from backoffice.app.services.audit import log_event, AuditAction


@dataclass
class PayableOutcome:
    record: Any
    transaction: Optional[TransactionResult] = None


@dataclass
class PayableBatchOutcome:
    records: List[Any] = field(default_factory=list)
    transactions: List[TransactionResult] = field(default_factory=list)


class PayableRecordAdapter:
    """
    Shared create / pay flow for records that carry a `paid_status`.

    Subclasses name the model, the stage the vehicle enters, the audit
    action and the ledger description.
    """

    model: Type = None
    resource_name: str = ""
    reference_type: str = ""
    stage: VehicleStage = None
    paid_action: str = ""

    def __init__(self, engine: BalanceEngine, policy: AdapterPolicy):
        self.engine = engine
        self.policy = policy

    def describe(self, record: Any, vehicle: Vehicle) -> str:
        raise NotImplementedError

    async def _get_vehicle(self, db: AsyncSession, vehicle_id: int) -> Vehicle:
        vehicle = await db.get(Vehicle, vehicle_id)
        if not vehicle:
            raise RecordNotFoundError("Vehicle", vehicle_id)
        return vehicle

    async def payment_description(self, db: AsyncSession, record: Any) -> str:
        vehicle = await self._get_vehicle(db, record.vehicle_id)
        return self.describe(record, vehicle)

    def _pay_request(self, record: Any, description: str, actor_id: Optional[int],
                     mutation: Optional[Callable] = None) -> TransactionRequest:
        return TransactionRequest(
            party_id=record.party_id,
            direction=Direction.OUT,
            amount=record.payable_amount,
            description=description,
            allow_negative=self.policy.allow_negative,
            reference_type=self.reference_type,
            reference_id=record.id,
            added_by=actor_id,
            related_record_mutation=mutation,
        )

    async def _audit_paid(self, db: AsyncSession, record: Any, actor_id: Optional[int],
                          result: TransactionResult) -> None:
        await log_event(
            db,
            action=self.paid_action,
            actor_id=actor_id,
            party_id=record.party_id,
            reference_type=self.reference_type,
            reference_id=record.id,
            metadata={"amount": str(result.amount), "ledger_entry_id": result.ledger_entry.id}
        )

    async def create(
        self,
        db: AsyncSession,
        items: List[Dict[str, Any]],
        actor_id: Optional[int] = None
    ) -> PayableBatchOutcome:
        """
        Create one record per item and move each vehicle into this stage.

        Items created as PAID are charged in the same unit. Each item is a
        dict of model fields that must include `vehicle_id`; `party_id`
        defaults to the company account.

        Raises:
            RecordNotFoundError: If a vehicle is missing
            PartyNotFoundError: If a paying party is missing
            ConstraintConflictError: On duplicate invoice numbers
        """
        async def work(unit) -> PayableBatchOutcome:
            outcome = PayableBatchOutcome()
            for item in items:
                values = dict(item)
                values["party_id"] = values.get("party_id") or self.policy.company_party_id
                paid = values.pop("paid_status", None) == PaidStatus.PAID

                vehicle = await self._get_vehicle(unit.db, values["vehicle_id"])
                await PartyStore.get_party(unit.db, values["party_id"])

                record = self.model(paid_status=PaidStatus.UNPAID, **values)
                unit.db.add(record)
                vehicle.stage = self.stage
                await unit.db.flush()

                if paid:
                    record.paid_status = PaidStatus.PAID
                    result = await unit.post(
                        self._pay_request(record, self.describe(record, vehicle), actor_id)
                    )
                    await self._audit_paid(unit.db, record, actor_id, result)
                    outcome.transactions.append(result)

                outcome.records.append(record)

            await unit.db.flush()
            return outcome

        return await self.engine.atomic(db, work)

    async def update(
        self,
        db: AsyncSession,
        record_id: int,
        changes: Dict[str, Any],
        paid_status: Optional[PaidStatus] = None,
        actor_id: Optional[int] = None
    ) -> PayableOutcome:
        """
        Update a record and charge it when it moves into PAID.

        Field-only updates never touch balances. Submitting PAID for a
        record that is already PAID, or reverting PAID to UNPAID, is
        rejected so a payment can never be charged twice.

        Raises:
            RecordNotFoundError: If the record does not exist
            AlreadyProcessedError: If the record is already PAID
        """
        record = await db.get(self.model, record_id, populate_existing=True)
        if not record:
            raise RecordNotFoundError(self.resource_name, record_id)

        if record.paid_status == PaidStatus.PAID and paid_status is not None:
            raise AlreadyProcessedError(
                f"{self.resource_name} {record_id} is already paid",
                details={"id": record_id, "paid_status": record.paid_status.value}
            )

        model = self.model

        async def mark_paid(session: AsyncSession) -> Any:
            result = await session.execute(
                update(model)
                .where(model.id == record_id, model.paid_status == PaidStatus.UNPAID)
                .values(paid_status=PaidStatus.PAID, updated_at=datetime.now(timezone.utc))
                .returning(model.id)
                .execution_options(synchronize_session=False)
            )
            if result.scalar_one_or_none() is None:
                raise AlreadyProcessedError(
                    f"{self.resource_name} {record_id} is already paid",
                    details={"id": record_id}
                )
            await session.refresh(record)
            return record

        async def work(unit) -> PayableOutcome:
            if "party_id" in changes and changes["party_id"] is not None:
                await PartyStore.get_party(unit.db, changes["party_id"])
            for name, value in changes.items():
                if value is not None:
                    setattr(record, name, value)
            await unit.db.flush()

            if paid_status != PaidStatus.PAID:
                return PayableOutcome(record=record)

            description = await self.payment_description(unit.db, record)
            result = await unit.post(self._pay_request(record, description, actor_id, mutation=mark_paid))
            await self._audit_paid(unit.db, record, actor_id, result)
            return PayableOutcome(record=record, transaction=result)

        return await self.engine.atomic(db, work)

    async def get(self, db: AsyncSession, record_id: int) -> Any:
        record = await db.get(self.model, record_id, populate_existing=True)
        if not record:
            raise RecordNotFoundError(self.resource_name, record_id)
        return record

    async def list(self, db: AsyncSession, paid_status: Optional[PaidStatus] = None) -> List[Any]:
        query = select(self.model).order_by(self.model.id.desc())
        if paid_status:
            query = query.where(self.model.paid_status == paid_status)
        result = await db.execute(query)
        return result.scalars().all()


class InspectionAdapter(PayableRecordAdapter):
    model = Inspection
    resource_name = "Inspection"
    reference_type = "inspection"
    stage = VehicleStage.INSPECTION
    paid_action = AuditAction.INSPECTION_PAID

    def describe(self, record: Inspection, vehicle: Vehicle) -> str:
        return f"Payment for Inspection #{record.invoice_no} (Vehicle: {vehicle.chassis_no})"


class TransportAdapter(PayableRecordAdapter):
    model = Transport
    resource_name = "Transport"
    reference_type = "transport"
    stage = VehicleStage.TRANSPORT
    paid_action = AuditAction.TRANSPORT_PAID

    def describe(self, record: Transport, vehicle: Vehicle) -> str:
        return f"Payment for Transport #{record.id} (Vehicle: {vehicle.chassis_no})"


class PortCollectAdapter(PayableRecordAdapter):
    model = PortCollect
    resource_name = "Port collect"
    reference_type = "port_collect"
    stage = VehicleStage.COLLECT
    paid_action = AuditAction.PORT_COLLECT_PAID

    def describe(self, record: PortCollect, vehicle: Vehicle) -> str:
        return f"Collected charges for vehicle {vehicle.chassis_no} (Invoice: {record.invoice_no})"

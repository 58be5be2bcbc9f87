"""
Inspection, transport and port collection payment tests.
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy import select, func

from backoffice.app.core.exceptions import AlreadyProcessedError, ConstraintConflictError, InvalidAmountError
from backoffice.app.domain.adapters.payables import InspectionAdapter, TransportAdapter, PortCollectAdapter
from backoffice.app.domain.adapters.policy import policy_for
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.models.ledger_entry import LedgerEntry
from backoffice.app.models.ledger_enums import PaidStatus, VehicleStage
from backoffice.app.models.vehicle import Vehicle
from backoffice.app.services.audit import get_audit_trail, AuditAction


@pytest.fixture
def inspections(balance_engine):
    return InspectionAdapter(balance_engine, policy_for("inspection"))


@pytest.fixture
def transports(balance_engine):
    return TransportAdapter(balance_engine, policy_for("transport"))


@pytest.fixture
def port_collects(balance_engine):
    return PortCollectAdapter(balance_engine, policy_for("port_collect"))


def inspection_item(vehicle_id, invoice_no="INV-1", dollars="300", paid_status=PaidStatus.UNPAID):
    return {
        "vehicle_id": vehicle_id,
        "date": datetime.now(timezone.utc),
        "company": "JEVIC",
        "invoice_no": invoice_no,
        "invoice_amount": Decimal("30000"),
        "invoice_tax": Decimal("3000"),
        "invoice_total": Decimal("33000"),
        "invoice_amount_dollars": Decimal(dollars),
        "paid_status": paid_status,
    }


async def entry_count(session):
    return await session.scalar(select(func.count(LedgerEntry.id)))


@pytest.mark.asyncio
async def test_create_unpaid_moves_stage_without_charge(db_session, inspections, company, make_vehicle):
    first = await make_vehicle("CH-INS-1")
    second = await make_vehicle("CH-INS-2")

    batch = await inspections.create(db_session, [inspection_item(first.id), inspection_item(second.id)])

    assert len(batch.records) == 2
    assert batch.transactions == []
    assert all(r.paid_status == PaidStatus.UNPAID for r in batch.records)
    assert all(r.party_id == company.id for r in batch.records)
    for vehicle_id in (first.id, second.id):
        vehicle = await db_session.get(Vehicle, vehicle_id, populate_existing=True)
        assert vehicle.stage == VehicleStage.INSPECTION
    assert await PartyStore.get_balance(db_session, company.id) == Decimal("1000")


@pytest.mark.asyncio
async def test_paying_twice_is_rejected(db_session, inspections, company, make_vehicle):
    vehicle = await make_vehicle("CH-INS-3")
    batch = await inspections.create(db_session, [inspection_item(vehicle.id)])
    record_id = batch.records[0].id
    company_id = company.id

    outcome = await inspections.update(db_session, record_id, {}, paid_status=PaidStatus.PAID, actor_id=1)
    assert outcome.record.paid_status == PaidStatus.PAID
    assert outcome.transaction.amount == Decimal("300")
    assert outcome.transaction.ledger_entry.reference_type == "inspection"
    assert outcome.transaction.ledger_entry.reference_id == record_id
    assert await PartyStore.get_balance(db_session, company.id) == Decimal("700")

    with pytest.raises(AlreadyProcessedError):
        await inspections.update(db_session, record_id, {}, paid_status=PaidStatus.PAID)

    with pytest.raises(AlreadyProcessedError):
        await inspections.update(db_session, record_id, {}, paid_status=PaidStatus.UNPAID)

    assert await PartyStore.get_balance(db_session, company_id) == Decimal("700")
    assert await entry_count(db_session) == 1

    audit = await get_audit_trail(db_session, reference_type="inspection", reference_id=record_id)
    assert [row.action for row in audit] == [AuditAction.INSPECTION_PAID]


@pytest.mark.asyncio
async def test_field_update_has_no_balance_effect(db_session, inspections, company, make_vehicle):
    vehicle = await make_vehicle("CH-INS-4")
    batch = await inspections.create(db_session, [inspection_item(vehicle.id)])

    outcome = await inspections.update(
        db_session, batch.records[0].id, {"company": "Auto Inspect", "invoice_amount_dollars": Decimal("320")}
    )

    assert outcome.transaction is None
    assert outcome.record.company == "Auto Inspect"
    assert await entry_count(db_session) == 0

    outcome = await inspections.update(db_session, batch.records[0].id, {}, paid_status=PaidStatus.PAID)
    assert outcome.transaction.amount == Decimal("320")


@pytest.mark.asyncio
async def test_created_paid_is_charged_immediately(db_session, inspections, company, make_vehicle):
    vehicle = await make_vehicle("CH-INS-5")

    batch = await inspections.create(
        db_session, [inspection_item(vehicle.id, dollars="125.50", paid_status=PaidStatus.PAID)], actor_id=1
    )

    assert batch.records[0].paid_status == PaidStatus.PAID
    assert len(batch.transactions) == 1
    assert await PartyStore.get_balance(db_session, company.id) == Decimal("874.50")


@pytest.mark.asyncio
async def test_duplicate_invoice_for_vehicle_conflicts(db_session, inspections, company, make_vehicle):
    vehicle = await make_vehicle("CH-INS-6")
    await inspections.create(db_session, [inspection_item(vehicle.id, invoice_no="INV-DUP")])

    with pytest.raises(ConstraintConflictError):
        await inspections.create(db_session, [inspection_item(vehicle.id, invoice_no="INV-DUP")])


@pytest.mark.asyncio
async def test_zero_payable_amount_is_rejected(db_session, inspections, company, make_vehicle):
    vehicle = await make_vehicle("CH-INS-7")
    batch = await inspections.create(db_session, [inspection_item(vehicle.id, dollars="0")])
    record_id = batch.records[0].id

    with pytest.raises(InvalidAmountError):
        await inspections.update(db_session, record_id, {}, paid_status=PaidStatus.PAID)

    record = await inspections.get(db_session, record_id)
    assert record.paid_status == PaidStatus.UNPAID


@pytest.mark.asyncio
async def test_transport_payment_uses_total_dollars(db_session, transports, company, make_vehicle):
    vehicle = await make_vehicle("CH-TR-1")
    batch = await transports.create(db_session, [{
        "vehicle_id": vehicle.id,
        "date": datetime.now(timezone.utc),
        "port": "Yokohama",
        "company": "Carrier Ltd",
        "amount": Decimal("100"),
        "ten_percent": Decimal("10"),
        "amount_total": Decimal("110"),
        "amount_total_dollars": Decimal("90"),
    }])

    refreshed = await db_session.get(Vehicle, vehicle.id, populate_existing=True)
    assert refreshed.stage == VehicleStage.TRANSPORT

    outcome = await transports.update(db_session, batch.records[0].id, {}, paid_status=PaidStatus.PAID)
    assert outcome.transaction.amount == Decimal("90")
    assert await PartyStore.get_balance(db_session, company.id) == Decimal("910")


@pytest.mark.asyncio
async def test_port_collect_payment_debits_total(db_session, port_collects, company, make_vehicle):
    vehicle = await make_vehicle("CH-PC-1")
    batch = await port_collects.create(db_session, [{
        "vehicle_id": vehicle.id,
        "date": datetime.now(timezone.utc),
        "invoice_no": "PC-1",
        "freight_amount": Decimal("200"),
        "port_charges": Decimal("30"),
        "clearing_charges": Decimal("20"),
        "other_charges": Decimal("0"),
        "total_amount": Decimal("250"),
    }])

    refreshed = await db_session.get(Vehicle, vehicle.id, populate_existing=True)
    assert refreshed.stage == VehicleStage.COLLECT

    outcome = await port_collects.update(db_session, batch.records[0].id, {}, paid_status=PaidStatus.PAID)
    assert outcome.transaction.new_balance == Decimal("750")

    unpaid = await port_collects.list(db_session, PaidStatus.UNPAID)
    assert unpaid == []

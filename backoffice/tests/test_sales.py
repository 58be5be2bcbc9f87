"""
Vehicle sale tests.
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy import select

from backoffice.app.core.exceptions import VehicleAlreadySoldError, RecordNotFoundError, InvalidAmountError
from backoffice.app.domain.adapters.sale import SaleAdapter
from backoffice.app.domain.adapters.policy import policy_for
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.ledger.ledger_log import LedgerLog
from backoffice.app.models.ledger_entry import LedgerEntry
from backoffice.app.models.ledger_enums import Direction, SaleStatus
from backoffice.app.models.vehicle import Vehicle
from backoffice.app.schemas.transactions import SaleCreate
from backoffice.app.services.audit import get_audit_trail, AuditAction


@pytest.fixture
def adapter(balance_engine):
    return SaleAdapter(balance_engine, policy_for("sale"))


def sale_payload(vehicle_id, price="5000", commission="200", other="50"):
    return SaleCreate(
        vehicle_id=vehicle_id,
        date=datetime.now(timezone.utc),
        sale_price=Decimal(price),
        commission_amount=Decimal(commission),
        other_charges=Decimal(other),
        fullname="Jane Buyer",
        mobile_no="+100200300",
        details="Cash sale",
        added_by=1,
    )


async def company_entries(session, party_id):
    result = await session.execute(
        select(LedgerEntry).where(LedgerEntry.party_id == party_id).order_by(LedgerEntry.id)
    )
    return result.scalars().all()


@pytest.mark.asyncio
async def test_sale_credits_price_then_debits_charges(db_session, adapter, company, make_vehicle):
    vehicle = await make_vehicle("CH-SALE-1")

    outcome = await adapter.record_sale(db_session, sale_payload(vehicle.id))

    assert outcome.credit.direction == Direction.CREDIT
    assert outcome.credit.amount == Decimal("5000")
    assert outcome.debit.direction == Direction.DEBIT
    assert outcome.debit.amount == Decimal("250")
    assert outcome.new_balance == Decimal("5750")
    assert outcome.vehicle.sale_status == SaleStatus.SOLD
    assert outcome.sale.party_id == company.id

    entries = await company_entries(db_session, company.id)
    assert [e.reference_type for e in entries] == ["sale", "sale"]
    assert all(e.reference_id == outcome.sale.id for e in entries)
    assert "Commission: 200" in entries[1].description

    replay = await LedgerLog.replay(db_session, company.id)
    assert replay.is_consistent

    audit = await get_audit_trail(db_session, action=AuditAction.VEHICLE_SOLD)
    assert len(audit) == 1


@pytest.mark.asyncio
async def test_sale_without_charges_posts_single_entry(db_session, adapter, company, make_vehicle):
    vehicle = await make_vehicle("CH-SALE-2")

    outcome = await adapter.record_sale(db_session, sale_payload(vehicle.id, commission="0", other="0"))

    assert outcome.debit is None
    assert outcome.new_balance == Decimal("6000")
    assert len(await company_entries(db_session, company.id)) == 1


@pytest.mark.asyncio
async def test_selling_sold_vehicle_changes_nothing(db_session, adapter, company, make_vehicle):
    vehicle = await make_vehicle("CH-SALE-3")
    await adapter.record_sale(db_session, sale_payload(vehicle.id))
    vehicle_id, company_id = vehicle.id, company.id
    balance = await PartyStore.get_balance(db_session, company_id)
    entry_count = len(await company_entries(db_session, company_id))

    with pytest.raises(VehicleAlreadySoldError):
        await adapter.record_sale(db_session, sale_payload(vehicle_id, price="9000"))

    assert await PartyStore.get_balance(db_session, company_id) == balance
    assert len(await company_entries(db_session, company_id)) == entry_count


@pytest.mark.asyncio
async def test_missing_vehicle(db_session, adapter, company):
    with pytest.raises(RecordNotFoundError):
        await adapter.record_sale(db_session, sale_payload(404))


@pytest.mark.asyncio
async def test_invalid_price_leaves_vehicle_unsold(db_session, adapter, company, make_vehicle):
    vehicle = await make_vehicle("CH-SALE-4")
    vehicle_id, company_id = vehicle.id, company.id

    with pytest.raises(InvalidAmountError):
        await adapter.record_sale(db_session, sale_payload(vehicle_id, price="0"))

    refreshed = await db_session.get(Vehicle, vehicle_id, populate_existing=True)
    assert refreshed.sale_status == SaleStatus.PENDING
    assert await company_entries(db_session, company_id) == []


@pytest.mark.asyncio
async def test_longest_details_fit_the_charges_entry(db_session, adapter, company, make_vehicle):
    vehicle = await make_vehicle("CH-SALE-5")
    payload = sale_payload(vehicle.id).model_copy(update={"details": "d" * 1000})

    outcome = await adapter.record_sale(db_session, payload)

    limit = LedgerEntry.__table__.c.description.type.length
    assert len(outcome.debit.ledger_entry.description) == limit
    assert outcome.debit.ledger_entry.description.startswith("Sale charges (Commission: 200")
    assert outcome.sale.details == "d" * 1000

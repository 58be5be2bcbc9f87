"""
Payment request approval tests.
"""

import pytest
from decimal import Decimal
from sqlalchemy import select, func

from backoffice.app.core.exceptions import AlreadyApprovedError, InvalidAmountError, RecordNotFoundError
from backoffice.app.domain.adapters.payment_request import PaymentRequestAdapter
from backoffice.app.domain.adapters.policy import policy_for
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.models.ledger_entry import LedgerEntry
from backoffice.app.models.ledger_enums import PaymentRequestStatus, Direction
from backoffice.app.schemas.payment_request import PaymentRequestCreate, PaymentRequestUpdate
from backoffice.app.services.audit import get_audit_trail, AuditAction


@pytest.fixture
def adapter(balance_engine):
    return PaymentRequestAdapter(balance_engine, policy_for("payment_request"))


@pytest.fixture
async def distributor(company, make_party):
    return await make_party(name="Distributor", balance="1000")


async def ledger_rows(session, party_id):
    result = await session.execute(
        select(LedgerEntry).where(LedgerEntry.party_id == party_id).order_by(LedgerEntry.id)
    )
    return result.scalars().all()


@pytest.mark.asyncio
async def test_created_pending_without_balance_effect(db_session, adapter, distributor):
    request = await adapter.create(db_session, PaymentRequestCreate(
        party_id=distributor.id, transaction_no="TX-1", amount=Decimal("150")
    ))

    assert request.status == PaymentRequestStatus.PENDING
    assert request.amount == Decimal("150")
    assert await PartyStore.get_balance(db_session, distributor.id) == Decimal("1000")
    assert await ledger_rows(db_session, distributor.id) == []


@pytest.mark.asyncio
async def test_approving_twice_debits_once(db_session, adapter, distributor):
    request = await adapter.create(db_session, PaymentRequestCreate(
        party_id=distributor.id, transaction_no="TX-2", amount=Decimal("150")
    ))
    request_id, distributor_id = request.id, distributor.id

    outcome = await adapter.update(db_session, request_id, PaymentRequestUpdate(
        status=PaymentRequestStatus.APPROVED, verified_by=1
    ))
    assert outcome.payment_request.status == PaymentRequestStatus.APPROVED
    assert outcome.payment_request.approved_at is not None
    assert outcome.transaction.direction == Direction.OUT
    assert outcome.transaction.new_balance == Decimal("850")

    with pytest.raises(AlreadyApprovedError):
        await adapter.update(db_session, request_id, PaymentRequestUpdate(
            status=PaymentRequestStatus.APPROVED, verified_by=1
        ))

    rows = await ledger_rows(db_session, distributor_id)
    assert len(rows) == 1
    assert rows[0].reference_type == "payment_request"
    assert rows[0].reference_id == request_id
    assert await PartyStore.get_balance(db_session, distributor_id) == Decimal("850")

    audit = await get_audit_trail(db_session, party_id=distributor_id, action=AuditAction.PAYMENT_REQUEST_APPROVED)
    assert len(audit) == 1


@pytest.mark.asyncio
async def test_rejected_then_approved(db_session, adapter, distributor):
    request = await adapter.create(db_session, PaymentRequestCreate(
        party_id=distributor.id, transaction_no="TX-3", amount=Decimal("75.50")
    ))

    outcome = await adapter.update(db_session, request.id, PaymentRequestUpdate(
        status=PaymentRequestStatus.REJECTED, verified_by=1
    ))
    assert outcome.transaction is None
    assert outcome.payment_request.status == PaymentRequestStatus.REJECTED
    assert await ledger_rows(db_session, distributor.id) == []

    outcome = await adapter.update(db_session, request.id, PaymentRequestUpdate(
        status=PaymentRequestStatus.APPROVED, verified_by=1
    ))
    assert outcome.transaction is not None
    assert await PartyStore.get_balance(db_session, distributor.id) == Decimal("924.50")


@pytest.mark.asyncio
async def test_approval_uses_updated_amount(db_session, adapter, distributor):
    request = await adapter.create(db_session, PaymentRequestCreate(
        party_id=distributor.id, transaction_no="TX-4", amount=Decimal("100")
    ))

    await adapter.update(db_session, request.id, PaymentRequestUpdate(
        status=PaymentRequestStatus.APPROVED, amount=Decimal("60"), verified_by=2
    ))

    assert await PartyStore.get_balance(db_session, distributor.id) == Decimal("940")


@pytest.mark.asyncio
async def test_invalid_amount_rejected_on_create(db_session, adapter, distributor):
    with pytest.raises(InvalidAmountError):
        await adapter.create(db_session, PaymentRequestCreate(
            party_id=distributor.id, transaction_no="TX-5", amount=Decimal("0")
        ))


@pytest.mark.asyncio
async def test_missing_request(db_session, adapter, distributor):
    with pytest.raises(RecordNotFoundError):
        await adapter.update(db_session, 999, PaymentRequestUpdate(status=PaymentRequestStatus.APPROVED))


@pytest.mark.asyncio
async def test_list_filters_by_status(db_session, adapter, distributor):
    first = await adapter.create(db_session, PaymentRequestCreate(
        party_id=distributor.id, transaction_no="TX-6", amount=Decimal("10")
    ))
    await adapter.create(db_session, PaymentRequestCreate(
        party_id=distributor.id, transaction_no="TX-7", amount=Decimal("20")
    ))
    await adapter.update(db_session, first.id, PaymentRequestUpdate(status=PaymentRequestStatus.REJECTED))

    pending = await adapter.list(db_session, status=PaymentRequestStatus.PENDING)
    assert [r.transaction_no for r in pending] == ["TX-7"]

    count = await db_session.scalar(select(func.count()).select_from(LedgerEntry))
    assert count == 0

"""
Concurrency Tests.

Validates that concurrent debits against one party are serialized by the
conditional balance UPDATE, so the floor check can never be raced.
"""

import asyncio
import pytest
from decimal import Decimal
from sqlalchemy import event, select, func
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from backoffice.app.db.session import Base
from backoffice.app.core.exceptions import InsufficientBalanceError, AlreadyApprovedError
from backoffice.app.domain.ledger.engine import BalanceEngine, TransactionRequest
from backoffice.app.domain.ledger.ledger_log import LedgerLog
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.adapters.policy import AdapterPolicy
from backoffice.app.domain.adapters.payment_request import PaymentRequestAdapter
from backoffice.app.models.ledger_entry import LedgerEntry
from backoffice.app.models.ledger_enums import Direction, PartyType, PaymentRequestStatus
from backoffice.app.schemas.payment_request import PaymentRequestCreate, PaymentRequestUpdate


@pytest.fixture
async def file_session_factory(tmp_path):
    """
    File-backed SQLite so every session holds its own connection.

    Transactions start with BEGIN IMMEDIATE, which makes the second writer
    wait for the first to commit instead of failing on lock upgrade.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
        connect_args={"timeout": 30},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


async def _seed_party(factory, balance: str, party_type=PartyType.DISTRIBUTOR):
    async with factory() as session:
        party = await PartyStore.create_party(
            session, party_type=party_type, name="Racer", initial_balance=Decimal(balance)
        )
        await session.commit()
        return party.id


@pytest.mark.asyncio
async def test_concurrent_debits_respect_floor(file_session_factory):
    """Two OUT 80 against balance 100: exactly one succeeds."""
    party_id = await _seed_party(file_session_factory, "100")
    engine = BalanceEngine(timeout_seconds=30)

    async def debit():
        async with file_session_factory() as session:
            return await engine.execute(session, TransactionRequest(
                party_id=party_id,
                direction=Direction.OUT,
                amount="80",
                description="concurrent debit",
                allow_negative=False,
            ))

    outcomes = await asyncio.gather(debit(), debit(), return_exceptions=True)

    successes = [o for o in outcomes if not isinstance(o, Exception)]
    failures = [o for o in outcomes if isinstance(o, Exception)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], InsufficientBalanceError)

    async with file_session_factory() as session:
        assert await PartyStore.get_balance(session, party_id) == Decimal("20")
        replay = await LedgerLog.replay(session, party_id)
        assert replay.is_consistent
        assert replay.entry_count == 1


@pytest.mark.asyncio
async def test_concurrent_credits_all_apply(file_session_factory):
    party_id = await _seed_party(file_session_factory, "0")
    engine = BalanceEngine(timeout_seconds=30)

    async def credit(i):
        async with file_session_factory() as session:
            return await engine.execute(session, TransactionRequest(
                party_id=party_id, direction=Direction.IN, amount="5", description=f"credit {i}"
            ))

    await asyncio.gather(*(credit(i) for i in range(10)))

    async with file_session_factory() as session:
        assert await PartyStore.get_balance(session, party_id) == Decimal("50")
        replay = await LedgerLog.replay(session, party_id)
        assert replay.is_consistent
        assert replay.entry_count == 10


@pytest.mark.asyncio
async def test_concurrent_approvals_debit_once(file_session_factory):
    party_id = await _seed_party(file_session_factory, "500")
    adapter = PaymentRequestAdapter(BalanceEngine(timeout_seconds=30), AdapterPolicy(company_party_id=party_id))

    async with file_session_factory() as session:
        request = await adapter.create(session, PaymentRequestCreate(
            party_id=party_id, transaction_no="TX-RACE", amount=Decimal("120")
        ))
        request_id = request.id

    async def approve():
        async with file_session_factory() as session:
            return await adapter.update(session, request_id, PaymentRequestUpdate(
                status=PaymentRequestStatus.APPROVED, verified_by=1
            ))

    outcomes = await asyncio.gather(approve(), approve(), return_exceptions=True)

    assert sum(1 for o in outcomes if not isinstance(o, Exception)) == 1
    assert sum(1 for o in outcomes if isinstance(o, AlreadyApprovedError)) == 1

    async with file_session_factory() as session:
        assert await PartyStore.get_balance(session, party_id) == Decimal("380")
        entries = await session.scalar(
            select(func.count(LedgerEntry.id)).where(LedgerEntry.party_id == party_id)
        )
        assert entries == 1

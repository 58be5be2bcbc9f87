"""
Centralized Test Configuration.
"""

import pytest
from decimal import Decimal
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from backoffice.app.main import app
from backoffice.app.db.session import get_db, Base
from backoffice.app.core.config import settings
from backoffice.app.domain.ledger.engine import BalanceEngine
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.models.ledger_enums import PartyType
from backoffice.app.models.vehicle import Vehicle

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """Async client for testing, bound to the per-test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides = {}


@pytest.fixture
def balance_engine():
    return BalanceEngine(timeout_seconds=5)


@pytest.fixture
def make_party(db_session):
    """Factory committing a party with the given opening balance."""
    async def _make(party_type=PartyType.DISTRIBUTOR, name="Party", balance="0", username=None):
        party = await PartyStore.create_party(
            db_session,
            party_type=party_type,
            name=name,
            initial_balance=Decimal(balance),
            username=username,
        )
        await db_session.commit()
        return party
    return _make


@pytest.fixture
def make_vehicle(db_session):
    """Factory committing an unsold vehicle in stage PENDING."""
    async def _make(chassis_no="CH-0001"):
        vehicle = Vehicle(chassis_no=chassis_no, maker="Toyota", year=2019, color="White")
        db_session.add(vehicle)
        await db_session.commit()
        await db_session.refresh(vehicle)
        return vehicle
    return _make


@pytest.fixture
async def company(make_party):
    """The configured company account; first row, so it takes `company_party_id`."""
    party = await make_party(PartyType.ADMIN, name="Company", balance="1000")
    assert party.id == settings.company_party_id
    return party

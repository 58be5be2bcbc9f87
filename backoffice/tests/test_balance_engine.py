"""
Balance engine tests.

Validates amount normalization, floor checks, rollback of whole units and
that every party's ledger replays to its stored balance.
"""

import asyncio
import pytest
from decimal import Decimal
from sqlalchemy import select, func

from backoffice.app.core.exceptions import (
    InvalidAmountError,
    InsufficientBalanceError,
    PartyNotFoundError,
    StoreUnavailableError,
)
from backoffice.app.domain.ledger.engine import BalanceEngine, TransactionRequest, normalize_amount
from backoffice.app.domain.ledger.ledger_log import LedgerLog, LedgerFilters
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.models.ledger_entry import LedgerEntry
from backoffice.app.models.ledger_enums import Direction, LedgerEntryType


async def count_entries(session, party_id):
    return await session.scalar(
        select(func.count(LedgerEntry.id)).where(LedgerEntry.party_id == party_id)
    )


def test_normalize_amount_accepts_numbers_and_strings():
    assert normalize_amount(10) == Decimal("10.00")
    assert normalize_amount(12.5) == Decimal("12.50")
    assert normalize_amount("10.005") == Decimal("10.01")
    assert normalize_amount(Decimal("0.01")) == Decimal("0.01")


@pytest.mark.parametrize("amount", [0, -5, "abc", None, "NaN", "Infinity", True, "0.004"])
def test_normalize_amount_rejects_invalid(amount):
    with pytest.raises(InvalidAmountError):
        normalize_amount(amount)


@pytest.mark.asyncio
async def test_replay_matches_stored_balance(db_session, balance_engine, make_party):
    """Final balance equals opening balance plus every committed movement."""
    party = await make_party(balance="100")

    moves = [
        (Direction.IN, "50"),
        (Direction.OUT, "30.25"),
        (Direction.CREDIT, 10),
        (Direction.DEBIT, "129.75"),
        (Direction.OUT, "20"),
    ]
    for direction, amount in moves:
        await balance_engine.execute(db_session, TransactionRequest(
            party_id=party.id,
            direction=direction,
            amount=amount,
            description=f"{direction.value} {amount}",
        ))

    assert await PartyStore.get_balance(db_session, party.id) == Decimal("-20")

    replay = await LedgerLog.replay(db_session, party.id)
    assert replay.is_consistent
    assert replay.entry_count == len(moves)
    assert replay.computed_balance == Decimal("-20")
    assert replay.first_inconsistent_entry_id is None


@pytest.mark.asyncio
async def test_result_carries_snapshot_and_entry(db_session, balance_engine, make_party):
    party = await make_party(balance="100")

    result = await balance_engine.execute(db_session, TransactionRequest(
        party_id=party.id,
        direction=Direction.OUT,
        amount="40",
        description="Fuel",
        reference_type="expense",
        reference_id=7,
        added_by=3,
    ))

    assert result.previous_balance == Decimal("100")
    assert result.new_balance == Decimal("60")
    entry = result.ledger_entry
    assert entry.id is not None
    assert entry.entry_type == LedgerEntryType.DEBIT
    assert entry.debit == Decimal("40")
    assert entry.credit == Decimal("0")
    assert entry.balance == Decimal("60")
    assert entry.reference_type == "expense"
    assert entry.reference_id == 7


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, "-10", "not-a-number"])
async def test_invalid_amount_writes_nothing(db_session, balance_engine, make_party, amount):
    party = await make_party(balance="100")
    party_id = party.id

    with pytest.raises(InvalidAmountError):
        await balance_engine.execute(db_session, TransactionRequest(
            party_id=party_id, direction=Direction.OUT, amount=amount, description="bad"
        ))

    assert await PartyStore.get_balance(db_session, party_id) == Decimal("100")
    assert await count_entries(db_session, party_id) == 0


@pytest.mark.asyncio
async def test_floor_rejects_debit_when_negatives_disallowed(db_session, balance_engine, make_party):
    party = await make_party(balance="50")
    party_id = party.id

    with pytest.raises(InsufficientBalanceError) as exc_info:
        await balance_engine.execute(db_session, TransactionRequest(
            party_id=party_id,
            direction=Direction.OUT,
            amount="80",
            description="too much",
            allow_negative=False,
        ))

    assert exc_info.value.status_code == 400
    assert exc_info.value.available == Decimal("50")
    assert await PartyStore.get_balance(db_session, party_id) == Decimal("50")
    assert await count_entries(db_session, party_id) == 0


@pytest.mark.asyncio
async def test_advisory_policy_allows_negative_balance(db_session, balance_engine, make_party):
    party = await make_party(balance="50")

    result = await balance_engine.execute(db_session, TransactionRequest(
        party_id=party.id, direction=Direction.OUT, amount="80", description="overdraw"
    ))

    assert result.new_balance == Decimal("-30")


@pytest.mark.asyncio
async def test_missing_party(db_session, balance_engine):
    with pytest.raises(PartyNotFoundError):
        await balance_engine.execute(db_session, TransactionRequest(
            party_id=404, direction=Direction.IN, amount="10", description="nobody"
        ))


@pytest.mark.asyncio
async def test_failed_post_rolls_back_whole_unit(db_session, balance_engine, make_party):
    """A multi-step unit either applies every posting or none."""
    first = await make_party(name="First", balance="100")
    second = await make_party(name="Second", balance="10")
    first_id, second_id = first.id, second.id

    async def work(unit):
        await unit.post(TransactionRequest(
            party_id=first_id, direction=Direction.IN, amount="25", description="step 1"
        ))
        await unit.post(TransactionRequest(
            party_id=second_id, direction=Direction.OUT, amount="500",
            description="step 2", allow_negative=False
        ))

    with pytest.raises(InsufficientBalanceError):
        await balance_engine.atomic(db_session, work)

    assert await PartyStore.get_balance(db_session, first_id) == Decimal("100")
    assert await count_entries(db_session, first_id) == 0
    assert await count_entries(db_session, second_id) == 0


@pytest.mark.asyncio
async def test_adjustment_is_not_a_postable_direction(db_session, balance_engine, make_party):
    party = await make_party(balance="10")
    party_id = party.id

    with pytest.raises(ValueError):
        await balance_engine.execute(db_session, TransactionRequest(
            party_id=party_id, direction=Direction.ADJUSTMENT, amount="5", description="manual"
        ))

    assert await count_entries(db_session, party_id) == 0


@pytest.mark.asyncio
async def test_timeout_rolls_back_and_reports_unavailable(db_session, make_party):
    party = await make_party(balance="10")
    party_id = party.id
    engine = BalanceEngine(timeout_seconds=0.5)

    async def slow(unit):
        await unit.post(TransactionRequest(
            party_id=party_id, direction=Direction.IN, amount="5", description="slow"
        ))
        await asyncio.sleep(5)

    with pytest.raises(StoreUnavailableError):
        await engine.atomic(db_session, slow)

    assert await PartyStore.get_balance(db_session, party_id) == Decimal("10")
    assert await count_entries(db_session, party_id) == 0


@pytest.mark.asyncio
async def test_ledger_listing_filters_and_pages(db_session, balance_engine, make_party):
    party = await make_party(balance="0")
    for i in range(5):
        await balance_engine.execute(db_session, TransactionRequest(
            party_id=party.id, direction=Direction.IN, amount=10, description=f"Deposit {i}"
        ))
    await balance_engine.execute(db_session, TransactionRequest(
        party_id=party.id, direction=Direction.OUT, amount=5, description="Port fee"
    ))

    entries, total = await LedgerLog.list_for_party(db_session, party.id, page=1, page_size=4)
    assert total == 6
    assert len(entries) == 4
    assert entries[0].description == "Port fee"

    entries, total = await LedgerLog.list_for_party(db_session, party.id, LedgerFilters(search="deposit"))
    assert total == 5
    assert all("Deposit" in entry.description for entry in entries)


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(db_session, balance_engine, make_party):
    party = await make_party(balance="0")
    for description in ("Paid 50% deposit", "Paid 500 yen fee", "Lot_7 auction", "Lot 7X auction"):
        await balance_engine.execute(db_session, TransactionRequest(
            party_id=party.id, direction=Direction.IN, amount=1, description=description
        ))

    entries, total = await LedgerLog.list_for_party(db_session, party.id, LedgerFilters(search="50%"))
    assert total == 1
    assert entries[0].description == "Paid 50% deposit"

    entries, total = await LedgerLog.list_for_party(db_session, party.id, LedgerFilters(search="LOT_7"))
    assert [entry.description for entry in entries] == ["Lot_7 auction"]


@pytest.mark.asyncio
async def test_long_description_fits_ledger_column(db_session, balance_engine, make_party):
    party = await make_party(balance="0")
    limit = LedgerEntry.__table__.c.description.type.length

    result = await balance_engine.execute(db_session, TransactionRequest(
        party_id=party.id, direction=Direction.IN, amount=1, description="x" * (limit + 40)
    ))

    assert len(result.ledger_entry.description) == limit
    assert result.ledger_entry.description.endswith("...")

    short = await balance_engine.execute(db_session, TransactionRequest(
        party_id=party.id, direction=Direction.IN, amount=1, description="x" * limit
    ))
    assert short.ledger_entry.description == "x" * limit

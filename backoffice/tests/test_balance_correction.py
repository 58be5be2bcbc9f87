"""
Corrective balance overwrite tests.
"""

import pytest
from decimal import Decimal

from backoffice.app.core.exceptions import PartyNotFoundError
from backoffice.app.domain.adapters.balance_correction import overwrite_balance
from backoffice.app.domain.ledger.engine import TransactionRequest
from backoffice.app.domain.ledger.ledger_log import LedgerLog
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.models.ledger_enums import Direction, LedgerEntryType
from backoffice.app.services.audit import get_audit_trail, AuditAction


@pytest.mark.asyncio
async def test_overwrite_records_adjustment_and_keeps_replay_exact(db_session, balance_engine, make_party):
    party = await make_party(balance="100")
    await balance_engine.execute(db_session, TransactionRequest(
        party_id=party.id, direction=Direction.OUT, amount="30", description="Fees"
    ))

    correction = await overwrite_balance(
        balance_engine, db_session, party.id, Decimal("45"), actor_id=9, reason="Bank reconciliation"
    )

    assert correction.previous_balance == Decimal("70")
    assert correction.new_balance == Decimal("45")
    entry = correction.ledger_entry
    assert entry.direction == Direction.ADJUSTMENT
    assert entry.entry_type == LedgerEntryType.DEBIT
    assert entry.debit == Decimal("25")
    assert "Bank reconciliation" in entry.description

    assert await PartyStore.get_balance(db_session, party.id) == Decimal("45")
    replay = await LedgerLog.replay(db_session, party.id)
    assert replay.is_consistent
    assert replay.entry_count == 2

    audit = await get_audit_trail(db_session, party_id=party.id, action=AuditAction.BALANCE_OVERWRITTEN)
    assert len(audit) == 1
    assert audit[0].actor_id == 9
    assert Decimal(audit[0].meta_data["previous"]) == Decimal("70")


@pytest.mark.asyncio
async def test_overwrite_to_same_balance_audits_without_entry(db_session, balance_engine, make_party):
    party = await make_party(balance="100")

    correction = await overwrite_balance(
        balance_engine, db_session, party.id, Decimal("100"), actor_id=1, reason="Confirmed"
    )

    assert correction.ledger_entry is None
    assert len(await get_audit_trail(db_session, party_id=party.id)) == 1


@pytest.mark.asyncio
async def test_overwrite_missing_party(db_session, balance_engine):
    with pytest.raises(PartyNotFoundError):
        await overwrite_balance(balance_engine, db_session, 404, Decimal("1"), actor_id=1, reason="n/a")

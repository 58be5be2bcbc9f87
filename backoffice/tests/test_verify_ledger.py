"""
Offline ledger verification script tests (asyncpg connection mocked).
"""

import asyncpg
import pytest
from decimal import Decimal
from unittest.mock import patch, AsyncMock

import verify_ledger


def party_row(party_id, initial, balance):
    return {
        "id": party_id, "party_type": "ADMIN", "name": "Company",
        "initial_balance": Decimal(initial), "balance": Decimal(balance),
    }


def entry_row(entry_id, debit, credit, balance):
    return {"id": entry_id, "debit": Decimal(debit), "credit": Decimal(credit), "balance": Decimal(balance)}


def test_replay_reports_first_bad_snapshot():
    entries = [entry_row(1, "0", "50", "150"), entry_row(2, "20", "0", "999"), entry_row(3, "10", "0", "120")]

    computed, first_bad = verify_ledger.replay(Decimal("100"), entries)

    assert computed == Decimal("120")
    assert first_bad == 2


@pytest.mark.asyncio
async def test_consistent_ledgers_exit_zero(capsys):
    conn = AsyncMock()
    conn.fetch.side_effect = [
        [party_row(1, "100", "130")],
        [entry_row(1, "0", "50", "150"), entry_row(2, "20", "0", "130")],
    ]

    with patch.object(verify_ledger.asyncpg, "connect", AsyncMock(return_value=conn)):
        assert await verify_ledger.verify_ledgers() == 0

    conn.close.assert_awaited_once()
    assert "1 parties checked, 0 drifted" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_drifted_balance_exits_one():
    conn = AsyncMock()
    conn.fetch.side_effect = [[party_row(1, "100", "500")], [entry_row(1, "0", "50", "150")]]

    with patch.object(verify_ledger.asyncpg, "connect", AsyncMock(return_value=conn)):
        assert await verify_ledger.verify_ledgers() == 1


@pytest.mark.asyncio
async def test_failed_query_reports_and_closes(capsys):
    conn = AsyncMock()
    conn.fetch.side_effect = asyncpg.exceptions.UndefinedTableError('relation "parties" does not exist')

    with patch.object(verify_ledger.asyncpg, "connect", AsyncMock(return_value=conn)):
        assert await verify_ledger.verify_ledgers() == 1

    conn.close.assert_awaited_once()
    assert "Ledger query failed" in capsys.readouterr().out

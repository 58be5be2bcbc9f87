"""
Corrective balance overwrite.

The only path that sets a balance to an absolute value. It runs in its own
atomic unit outside the business event flows, records the difference as an
ADJUSTMENT ledger row so replay stays exact, and writes an audit row.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.app.models.ledger_entry import LedgerEntry
from backoffice.app.models.ledger_enums import Direction, LedgerEntryType
from backoffice.app.domain.ledger.engine import BalanceEngine, CENT
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.ledger.ledger_log import LedgerLog
from backoffice.app.services.audit import log_event, AuditAction

logger = logging.getLogger("backoffice.ledger")


@dataclass
class BalanceCorrection:
    party_id: int
    previous_balance: Decimal
    new_balance: Decimal
    ledger_entry: Optional[LedgerEntry]


async def overwrite_balance(
    engine: BalanceEngine,
    db: AsyncSession,
    party_id: int,
    new_balance: Decimal,
    actor_id: int,
    reason: str
) -> BalanceCorrection:
    """
    Set a party's balance to `new_balance`.

    Args:
        engine: Engine providing the atomic unit
        db: Database session
        party_id: Party to correct
        new_balance: Absolute target balance
        actor_id: Back-office user applying the correction
        reason: Free-text justification, stored on the ledger row and audit log

    Returns:
        BalanceCorrection with the ADJUSTMENT entry (None when nothing changed)
    """
    new_balance = Decimal(new_balance).quantize(CENT)

    async def work(unit) -> BalanceCorrection:
        previous = await PartyStore.set_balance(unit.db, party_id, new_balance)
        difference = new_balance - previous

        entry = None
        if difference != 0:
            entry = LedgerEntry(
                party_id=party_id,
                entry_type=LedgerEntryType.CREDIT if difference > 0 else LedgerEntryType.DEBIT,
                direction=Direction.ADJUSTMENT,
                credit=difference if difference > 0 else Decimal("0"),
                debit=-difference if difference < 0 else Decimal("0"),
                balance=new_balance,
                description=f"Corrective balance overwrite: {reason}",
                reference_type="balance_correction",
                added_by=actor_id,
            )
            await LedgerLog.append(unit.db, entry)

        await log_event(
            unit.db,
            action=AuditAction.BALANCE_OVERWRITTEN,
            actor_id=actor_id,
            party_id=party_id,
            reference_type="balance_correction",
            reference_id=entry.id if entry else None,
            metadata={"previous": str(previous), "new": str(new_balance), "reason": reason}
        )
        return BalanceCorrection(
            party_id=party_id,
            previous_balance=previous,
            new_balance=new_balance,
            ledger_entry=entry
        )

    correction = await engine.atomic(db, work)

    logger.warning(
        "Balance of party %s overwritten by actor %s: %s -> %s",
        party_id, actor_id, correction.previous_balance, correction.new_balance
    )
    return correction

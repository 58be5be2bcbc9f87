"""
Party Store.

Holds the running balance of every ledger-bearing party. Balance changes
are single conditional UPDATE ... RETURNING statements so concurrent
transactions against the same party never compute a delta from a stale read.
"""

import logging
from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from backoffice.app.models.party import Party
from backoffice.app.models.ledger_enums import PartyType
from backoffice.app.core.exceptions import PartyNotFoundError, InsufficientBalanceError

logger = logging.getLogger("backoffice.ledger")


class PartyStore:

    @staticmethod
    async def get_party(
        db: AsyncSession,
        party_id: int,
        party_type: Optional[PartyType] = None
    ) -> Party:
        """
        Fetch a party, optionally requiring a given party type.

        Raises:
            PartyNotFoundError: If the party does not exist or has another type
        """
        party = await db.get(Party, party_id, populate_existing=True)
        if party is None or (party_type is not None and party.party_type != party_type):
            raise PartyNotFoundError(party_id, party_type.value if party_type else None)
        return party

    @staticmethod
    async def get_balance(db: AsyncSession, party_id: int) -> Decimal:
        """Current stored balance; PartyNotFoundError if the party is absent."""
        balance = await db.scalar(select(Party.balance).where(Party.id == party_id))
        if balance is None:
            raise PartyNotFoundError(party_id)
        return Decimal(balance)

    @staticmethod
    async def apply_delta(
        db: AsyncSession,
        party_id: int,
        delta: Decimal,
        allow_negative: bool = True
    ) -> Decimal:
        """
        Add `delta` to the party's balance and return the new balance.

        Must run inside the same atomic unit as the ledger append. When
        negative balances are not allowed, a debit that would cross zero
        updates nothing.

        Raises:
            PartyNotFoundError: If no such party
            InsufficientBalanceError: If the floor check rejected the debit
        """
        stmt = (
            update(Party)
            .where(Party.id == party_id)
            .values(balance=Party.balance + delta)
        )
        if not allow_negative and delta < 0:
            stmt = stmt.where(Party.balance + delta >= 0)
        stmt = stmt.returning(Party.balance).execution_options(synchronize_session=False)

        result = await db.execute(stmt)
        new_balance = result.scalar_one_or_none()

        if new_balance is None:
            current = await db.scalar(select(Party.balance).where(Party.id == party_id))
            if current is None:
                raise PartyNotFoundError(party_id)
            logger.warning("Debit of %s rejected for party %s, balance %s", -delta, party_id, current)
            raise InsufficientBalanceError(party_id, required=-delta, available=Decimal(current))

        return Decimal(new_balance)

    @staticmethod
    async def set_balance(db: AsyncSession, party_id: int, new_balance: Decimal) -> Decimal:
        """
        Overwrite the balance with an absolute value and return the previous one.

        Only the corrective overwrite flow may call this; it records the
        difference as an ADJUSTMENT ledger row in the same unit.
        """
        previous = await db.scalar(
            select(Party.balance).where(Party.id == party_id).with_for_update()
        )
        if previous is None:
            raise PartyNotFoundError(party_id)

        await db.execute(
            update(Party)
            .where(Party.id == party_id)
            .values(balance=new_balance)
            .execution_options(synchronize_session=False)
        )
        return Decimal(previous)

    @staticmethod
    async def create_party(
        db: AsyncSession,
        party_type: PartyType,
        name: str,
        initial_balance: Decimal = Decimal("0"),
        username: Optional[str] = None,
        location: Optional[str] = None,
        phone: Optional[str] = None
    ) -> Party:
        """Register a party whose balance starts at `initial_balance` (flush only)."""
        party = Party(
            party_type=party_type,
            name=name,
            username=username,
            location=location,
            phone=phone,
            initial_balance=initial_balance,
            balance=initial_balance,
            is_active=True
        )
        db.add(party)
        await db.flush()
        return party

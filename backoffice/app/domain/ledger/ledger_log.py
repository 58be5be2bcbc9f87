"""
Ledger Append Log.

Append-only per-party transaction history. No update or delete operation
is exposed.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from backoffice.app.models.ledger_entry import LedgerEntry, DESCRIPTION_MAX_LENGTH
from backoffice.app.models.party import Party
from backoffice.app.core.exceptions import PartyNotFoundError


def clip_description(description: Optional[str]) -> Optional[str]:
    """Fit a composed description into the ledger column, marking the cut."""
    if description is None or len(description) <= DESCRIPTION_MAX_LENGTH:
        return description
    return description[:DESCRIPTION_MAX_LENGTH - 3] + "..."


@dataclass
class LedgerFilters:
    """Read filters for a party ledger."""
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    search: Optional[str] = None


@dataclass
class LedgerReplay:
    """Outcome of recomputing a party's balance from its ledger."""
    party_id: int
    initial_balance: Decimal
    computed_balance: Decimal
    stored_balance: Decimal
    entry_count: int
    first_inconsistent_entry_id: Optional[int] = None

    @property
    def is_consistent(self) -> bool:
        return (
            self.first_inconsistent_entry_id is None
            and self.computed_balance == self.stored_balance
        )


class LedgerLog:

    @staticmethod
    async def append(db: AsyncSession, entry: LedgerEntry) -> LedgerEntry:
        """
        Append an entry to the current unit of work.

        The entry receives its id on flush; commit is the caller's job.
        Descriptions composed from user text are cut to the column length.
        """
        entry.description = clip_description(entry.description)
        if entry.transaction_at is None:
            entry.transaction_at = datetime.now(timezone.utc)
        db.add(entry)
        await db.flush()
        return entry

    @staticmethod
    def _filtered(query, party_id: int, filters: LedgerFilters):
        query = query.where(LedgerEntry.party_id == party_id)
        if filters.date_from:
            query = query.where(LedgerEntry.transaction_at >= filters.date_from)
        if filters.date_to:
            query = query.where(LedgerEntry.transaction_at <= filters.date_to)
        if filters.search:
            # Literal, case-insensitive substring; % and _ in the input match themselves
            query = query.where(
                func.lower(LedgerEntry.description).contains(filters.search.lower(), autoescape=True)
            )
        return query

    @staticmethod
    async def list_for_party(
        db: AsyncSession,
        party_id: int,
        filters: Optional[LedgerFilters] = None,
        page: int = 1,
        page_size: int = 50,
        ascending: bool = False
    ) -> Tuple[List[LedgerEntry], int]:
        """
        List a party's ledger entries, most recent first by default.

        Args:
            db: Database session
            party_id: Owner of the entries
            filters: Optional date range and description search
            page: 1-based page number
            page_size: Entries per page
            ascending: Oldest first when True

        Returns:
            (entries on the requested page, total matching entries)
        """
        filters = filters or LedgerFilters()

        total = await db.scalar(
            LedgerLog._filtered(select(func.count(LedgerEntry.id)), party_id, filters)
        )

        order = LedgerEntry.id.asc() if ascending else LedgerEntry.id.desc()
        query = (
            LedgerLog._filtered(select(LedgerEntry), party_id, filters)
            .order_by(order)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await db.execute(query)
        return result.scalars().all(), total or 0

    @staticmethod
    async def replay(db: AsyncSession, party_id: int) -> LedgerReplay:
        """
        Recompute the balance from `initial_balance` and every entry in order.

        Reports the first entry whose snapshot disagrees with the running sum.
        """
        party = await db.get(Party, party_id, populate_existing=True)
        if party is None:
            raise PartyNotFoundError(party_id)

        result = await db.execute(
            select(LedgerEntry)
            .where(LedgerEntry.party_id == party_id)
            .order_by(LedgerEntry.id.asc())
        )
        entries = result.scalars().all()

        running = Decimal(party.initial_balance)
        first_bad = None
        for entry in entries:
            running += Decimal(entry.credit) - Decimal(entry.debit)
            if first_bad is None and Decimal(entry.balance) != running:
                first_bad = entry.id

        return LedgerReplay(
            party_id=party_id,
            initial_balance=Decimal(party.initial_balance),
            computed_balance=running,
            stored_balance=Decimal(party.balance),
            entry_count=len(entries),
            first_inconsistent_entry_id=first_bad
        )

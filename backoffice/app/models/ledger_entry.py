"""
Ledger Entry database model.

Immutable per-party balance movements with a running-balance snapshot.
"""

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum, String, Numeric
from sqlalchemy.sql import func
from backoffice.app.db.session import Base
from backoffice.app.models.ledger_enums import LedgerEntryType, Direction

DESCRIPTION_MAX_LENGTH = 500


class LedgerEntry(Base):
    """
    Ledger Entry model.

    Immutable record of financial movement.
    Exactly one of debit/credit is non-zero; `balance` is the owner's
    balance right after this entry. NO updates or deletions allowed.
    """
    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Owner
    party_id = Column(Integer, ForeignKey('parties.id'), nullable=False, index=True)

    # Entry details
    entry_type = Column(Enum(LedgerEntryType), nullable=False)  # DEBIT or CREDIT
    direction = Column(Enum(Direction), nullable=False)

    # Financials
    debit = Column(Numeric(14, 2), nullable=False, default=0)
    credit = Column(Numeric(14, 2), nullable=False, default=0)
    balance = Column(Numeric(14, 2), nullable=False)
    description = Column(String(DESCRIPTION_MAX_LENGTH), nullable=True)

    # Originating business record
    reference_type = Column(String(50), nullable=True, index=True)
    reference_id = Column(Integer, nullable=True)
    added_by = Column(Integer, nullable=True)

    # Timestamps (Immutable - no updated_at)
    transaction_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    @property
    def signed_amount(self):
        return self.credit - self.debit

    def __repr__(self):
        return f"<LedgerEntry(id={self.id}, party_id={self.party_id}, type='{self.entry_type.value}', balance={self.balance})>"

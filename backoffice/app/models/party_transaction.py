"""
Party Transaction database model.

Shareholder and customer IN/OUT transactions.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Numeric
from sqlalchemy.sql import func
from backoffice.app.db.session import Base
from backoffice.app.models.ledger_enums import TransactionType


class PartyTransaction(Base):
    """
    Party Transaction model.

    Links the party's own ledger row and, when mirrored, the company
    account's ledger row produced by the same transfer.
    """
    __tablename__ = "party_transactions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    party_id = Column(Integer, ForeignKey('parties.id'), nullable=False, index=True)
    transaction_type = Column(Enum(TransactionType), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    description = Column(String(500), nullable=False)
    added_by = Column(Integer, nullable=False)

    ledger_entry_id = Column(Integer, ForeignKey('ledger_entries.id'), nullable=True)
    company_ledger_entry_id = Column(Integer, ForeignKey('ledger_entries.id'), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<PartyTransaction(id={self.id}, party_id={self.party_id}, type='{self.transaction_type.value}', amount={self.amount})>"

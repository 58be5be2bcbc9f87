"""
Party database model.

Any balance-holding entity: the company account, distributors,
shareholders and customers.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, Numeric
from sqlalchemy.sql import func
from backoffice.app.db.session import Base
from backoffice.app.models.ledger_enums import PartyType


class Party(Base):
    """
    Party model.

    `balance` is written only by the ledger engine (and the audited
    corrective overwrite). It always equals `initial_balance` plus the
    signed sum of the party's ledger entries.
    """
    __tablename__ = "parties"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    party_type = Column(Enum(PartyType), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    username = Column(String(100), unique=True, nullable=True)
    location = Column(String(200), nullable=True)
    phone = Column(String(50), nullable=True)

    # Financials
    initial_balance = Column(Numeric(14, 2), nullable=False, default=0)
    balance = Column(Numeric(14, 2), nullable=False, default=0)

    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Party(id={self.id}, type='{self.party_type.value}', balance={self.balance})>"

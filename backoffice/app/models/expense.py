"""
Expense database model.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric
from sqlalchemy.sql import func
from backoffice.app.db.session import Base


class Expense(Base):
    """
    Expense model.

    Money spent from a party's account. Each expense produces one OUT
    ledger entry against `party_id`.
    """
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    party_id = Column(Integer, ForeignKey('parties.id'), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=False, default="")
    image_path = Column(String(500), nullable=False, default="")
    amount = Column(Numeric(14, 2), nullable=False)
    added_by = Column(Integer, nullable=False)

    ledger_entry_id = Column(Integer, ForeignKey('ledger_entries.id'), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Expense(id={self.id}, title='{self.title}', amount={self.amount})>"

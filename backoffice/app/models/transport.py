"""
Transport database model.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Numeric
from sqlalchemy.sql import func
from backoffice.app.db.session import Base
from backoffice.app.models.ledger_enums import PaidStatus


class Transport(Base):
    """
    Transport model.

    Inland transport of a vehicle to the port. Paying it debits
    `amount_total_dollars` from the paying party.
    """
    __tablename__ = "transports"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    party_id = Column(Integer, ForeignKey('parties.id'), nullable=False, index=True)  # Payer
    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, index=True)

    date = Column(DateTime(timezone=True), nullable=False)
    delivery_date = Column(DateTime(timezone=True), nullable=True)
    port = Column(String(200), nullable=False, default="")
    company = Column(String(200), nullable=False, default="")

    # Financials
    amount = Column(Numeric(14, 2), nullable=False, default=0)
    ten_percent = Column(Numeric(14, 2), nullable=False, default=0)
    amount_total = Column(Numeric(14, 2), nullable=False, default=0)
    amount_total_dollars = Column(Numeric(14, 2), nullable=False, default=0)

    image_path = Column(String(500), nullable=False, default="")
    paid_status = Column(Enum(PaidStatus), default=PaidStatus.UNPAID, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def payable_amount(self):
        return self.amount_total_dollars

    def __repr__(self):
        return f"<Transport(id={self.id}, vehicle_id={self.vehicle_id}, paid='{self.paid_status.value}')>"

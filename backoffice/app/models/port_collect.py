"""
Port Collect database model.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Numeric
from sqlalchemy.sql import func
from backoffice.app.db.session import Base
from backoffice.app.models.ledger_enums import PaidStatus


class PortCollect(Base):
    """
    Port Collect model.

    Charges for collecting a vehicle at the destination port. Paying it
    debits `total_amount` from the paying party.
    """
    __tablename__ = "port_collects"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    party_id = Column(Integer, ForeignKey('parties.id'), nullable=False, index=True)  # Payer
    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, index=True)

    date = Column(DateTime(timezone=True), nullable=False)
    invoice_no = Column(String(100), nullable=False, index=True)

    # Financials
    freight_amount = Column(Numeric(14, 2), nullable=False, default=0)
    port_charges = Column(Numeric(14, 2), nullable=False, default=0)
    clearing_charges = Column(Numeric(14, 2), nullable=False, default=0)
    other_charges = Column(Numeric(14, 2), nullable=False, default=0)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)

    image_path = Column(String(500), nullable=False, default="")
    paid_status = Column(Enum(PaidStatus), default=PaidStatus.UNPAID, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def payable_amount(self):
        return self.total_amount

    def __repr__(self):
        return f"<PortCollect(id={self.id}, invoice_no='{self.invoice_no}', paid='{self.paid_status.value}')>"

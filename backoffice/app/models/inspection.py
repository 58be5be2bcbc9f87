"""
Inspection database model.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Numeric, UniqueConstraint
from sqlalchemy.sql import func
from backoffice.app.db.session import Base
from backoffice.app.models.ledger_enums import PaidStatus


class Inspection(Base):
    """
    Inspection model.

    Pre-shipment inspection invoice for one vehicle. Paying it
    (UNPAID -> PAID) debits `invoice_amount_dollars` from the paying party.
    """
    __tablename__ = "inspections"
    __table_args__ = (
        UniqueConstraint("invoice_no", "vehicle_id", name="uq_inspection_invoice_vehicle"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    party_id = Column(Integer, ForeignKey('parties.id'), nullable=False, index=True)  # Payer
    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, index=True)

    date = Column(DateTime(timezone=True), nullable=False)
    company = Column(String(200), nullable=False)
    invoice_no = Column(String(100), nullable=False, index=True)

    # Financials
    invoice_amount = Column(Numeric(14, 2), nullable=False, default=0)
    invoice_tax = Column(Numeric(14, 2), nullable=False, default=0)
    invoice_total = Column(Numeric(14, 2), nullable=False, default=0)
    invoice_amount_dollars = Column(Numeric(14, 2), nullable=False, default=0)

    image_path = Column(String(500), nullable=False, default="")
    paid_status = Column(Enum(PaidStatus), default=PaidStatus.UNPAID, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def payable_amount(self):
        return self.invoice_amount_dollars

    def __repr__(self):
        return f"<Inspection(id={self.id}, invoice_no='{self.invoice_no}', paid='{self.paid_status.value}')>"

"""
Purchase Invoice database model.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Numeric
from sqlalchemy.sql import func
from backoffice.app.db.session import Base
from backoffice.app.models.ledger_enums import PaidStatus


class PurchaseInvoice(Base):
    """
    Auction purchase invoice covering one or more vehicles.

    Paying it (UNPAID -> PAID) debits `amount_dollars` from the paying
    party once.
    """
    __tablename__ = "purchase_invoices"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    party_id = Column(Integer, ForeignKey('parties.id'), nullable=False, index=True)  # Payer

    invoice_no = Column(String(100), unique=True, nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False)
    auction_house = Column(String(200), nullable=False, default="")

    amount_yen = Column(Numeric(16, 2), nullable=False, default=0)
    amount_dollars = Column(Numeric(14, 2), nullable=False, default=0)

    image_path = Column(String(500), nullable=False, default="")
    paid_status = Column(Enum(PaidStatus), default=PaidStatus.UNPAID, nullable=False, index=True)
    added_by = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def payable_amount(self):
        return self.amount_dollars

    def __repr__(self):
        return f"<PurchaseInvoice(id={self.id}, invoice_no='{self.invoice_no}', paid='{self.paid_status.value}')>"

"""
Payment Request database model.

Follows an approval workflow: PENDING -> APPROVED | REJECTED.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Numeric
from sqlalchemy.sql import func
from backoffice.app.db.session import Base
from backoffice.app.models.ledger_enums import PaymentRequestStatus


class PaymentRequest(Base):
    """
    Payment Request model.

    Raised by a party (usually a distributor). Approval debits the amount
    from the requesting party's account exactly once.
    """
    __tablename__ = "payment_requests"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    party_id = Column(Integer, ForeignKey('parties.id'), nullable=False, index=True)  # Requester

    transaction_no = Column(String(100), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    img_url = Column(String(500), nullable=False, default="")

    status = Column(Enum(PaymentRequestStatus), default=PaymentRequestStatus.PENDING, nullable=False, index=True)

    # Approval Flow
    verified_by = Column(Integer, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<PaymentRequest(id={self.id}, status='{self.status.value}', amount={self.amount})>"

"""
Back-office audit trail.

One row per approval, PAID transition, sale, party creation or corrective
balance overwrite, written inside the same unit as the change.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON, Index
from sqlalchemy.sql import func
from backoffice.app.db.session import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_reference", "reference_type", "reference_id"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Back-office user; None when the change came from a script
    actor_id = Column(Integer, index=True, nullable=True)
    action = Column(String(100), nullable=False, index=True)

    party_id = Column(Integer, index=True, nullable=True)
    reference_type = Column(String(50), nullable=True)
    reference_id = Column(Integer, nullable=True)

    # Request that produced the row ("-" outside HTTP)
    correlation_id = Column(String(64), nullable=True)

    meta_data = Column(JSON, nullable=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', {self.reference_type}={self.reference_id})>"

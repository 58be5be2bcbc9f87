"""
Audit logging service for back-office actions.

Audit rows are added to the caller's session and land in the same atomic
unit as the change they describe.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from backoffice.app.models.audit_log import AuditLog
from backoffice.app.core.observability import correlation_id_var


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    PARTY_CREATED = "PARTY_CREATED"
    BALANCE_OVERWRITTEN = "BALANCE_OVERWRITTEN"

    PAYMENT_REQUEST_APPROVED = "PAYMENT_REQUEST_APPROVED"
    PAYMENT_REQUEST_REJECTED = "PAYMENT_REQUEST_REJECTED"

    INSPECTION_PAID = "INSPECTION_PAID"
    TRANSPORT_PAID = "TRANSPORT_PAID"
    PORT_COLLECT_PAID = "PORT_COLLECT_PAID"
    PURCHASE_INVOICE_PAID = "PURCHASE_INVOICE_PAID"

    CARGO_BOOKED = "CARGO_BOOKED"

    VEHICLE_SOLD = "VEHICLE_SOLD"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_id: Optional[int] = None,
    party_id: Optional[int] = None,
    reference_type: Optional[str] = None,
    reference_id: Optional[int] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Add an audit row to the current unit of work.

    Args:
        db: Database session (transaction managed by caller)
        action: Action being performed (use AuditAction constants)
        actor_id: ID of the back-office user performing the action
        party_id: Party whose balance the action touched
        reference_type: Business record family (e.g. "payment_request")
        reference_id: Business record ID
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance (flushed, not committed)
    """
    audit_log = AuditLog(
        actor_id=actor_id,
        action=action,
        party_id=party_id,
        reference_type=reference_type,
        reference_id=reference_id,
        correlation_id=correlation_id_var.get(),
        meta_data=metadata
    )

    db.add(audit_log)
    await db.flush()

    return audit_log


async def get_audit_trail(
    db: AsyncSession,
    party_id: Optional[int] = None,
    action: Optional[str] = None,
    reference_type: Optional[str] = None,
    reference_id: Optional[int] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering.

    Args:
        db: Database session
        party_id: Filter by affected party
        action: Filter by action type
        reference_type: Filter by business record family
        reference_id: Filter by business record ID (with reference_type)
        limit: Maximum number of records to return

    Returns:
        List of AuditLog instances, most recent first
    """
    query = select(AuditLog).order_by(desc(AuditLog.id))

    if party_id:
        query = query.where(AuditLog.party_id == party_id)

    if action:
        query = query.where(AuditLog.action == action)

    if reference_type:
        query = query.where(AuditLog.reference_type == reference_type)
        if reference_id is not None:
            query = query.where(AuditLog.reference_id == reference_id)

    query = query.limit(limit)

    result = await db.execute(query)
    return result.scalars().all()

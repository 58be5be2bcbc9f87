"""
Payment request adapter.

Approval workflow: PENDING -> APPROVED | REJECTED, REJECTED -> APPROVED.
Approval debits the requesting party once; an APPROVED request is final.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from backoffice.app.models.payment_request import PaymentRequest
from backoffice.app.models.ledger_enums import Direction, PaymentRequestStatus
from backoffice.app.schemas.payment_request import PaymentRequestCreate, PaymentRequestUpdate
from backoffice.app.core.exceptions import RecordNotFoundError, AlreadyApprovedError
from backoffice.app.domain.ledger.engine import BalanceEngine, TransactionRequest, TransactionResult, normalize_amount
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.adapters.policy import AdapterPolicy
from backoffice.app.services.audit import log_event, AuditAction


@dataclass
class PaymentRequestOutcome:
    payment_request: PaymentRequest
    transaction: Optional[TransactionResult] = None


class PaymentRequestAdapter:

    def __init__(self, engine: BalanceEngine, policy: AdapterPolicy):
        self.engine = engine
        self.policy = policy

    async def create(self, db: AsyncSession, payload: PaymentRequestCreate) -> PaymentRequest:
        """Raise a PENDING payment request for an existing party."""
        amount = normalize_amount(payload.amount)
        await PartyStore.get_party(db, payload.party_id)

        async def work(unit) -> PaymentRequest:
            payment_request = PaymentRequest(
                party_id=payload.party_id,
                transaction_no=payload.transaction_no,
                amount=amount,
                img_url=payload.img_url or "",
                status=PaymentRequestStatus.PENDING,
            )
            unit.db.add(payment_request)
            await unit.db.flush()
            return payment_request

        return await self.engine.atomic(db, work)

    async def get(self, db: AsyncSession, request_id: int) -> PaymentRequest:
        payment_request = await db.get(PaymentRequest, request_id, populate_existing=True)
        if not payment_request:
            raise RecordNotFoundError("Payment request", request_id)
        return payment_request

    async def list(self, db: AsyncSession, status: Optional[PaymentRequestStatus] = None,
                   party_id: Optional[int] = None) -> List[PaymentRequest]:
        query = select(PaymentRequest).order_by(PaymentRequest.id.desc())
        if status:
            query = query.where(PaymentRequest.status == status)
        if party_id:
            query = query.where(PaymentRequest.party_id == party_id)
        result = await db.execute(query)
        return result.scalars().all()

    async def update(self, db: AsyncSession, request_id: int, payload: PaymentRequestUpdate) -> PaymentRequestOutcome:
        """
        Update a payment request; moving it to APPROVED debits the requester.

        Raises:
            RecordNotFoundError: If the request does not exist
            AlreadyApprovedError: If the request is already APPROVED
            InvalidAmountError: If an approval amount is not positive
        """
        payment_request = await self.get(db, request_id)
        if payment_request.status == PaymentRequestStatus.APPROVED:
            raise AlreadyApprovedError(request_id)

        if payload.amount is not None:
            normalize_amount(payload.amount)

        async def approve(session: AsyncSession) -> PaymentRequest:
            result = await session.execute(
                update(PaymentRequest)
                .where(
                    PaymentRequest.id == request_id,
                    PaymentRequest.status != PaymentRequestStatus.APPROVED
                )
                .values(
                    status=PaymentRequestStatus.APPROVED,
                    approved_at=datetime.now(timezone.utc),
                    updated_at=datetime.now(timezone.utc)
                )
                .returning(PaymentRequest.id)
                .execution_options(synchronize_session=False)
            )
            if result.scalar_one_or_none() is None:
                raise AlreadyApprovedError(request_id)
            await session.refresh(payment_request)
            return payment_request

        async def work(unit) -> PaymentRequestOutcome:
            if payload.transaction_no:
                payment_request.transaction_no = payload.transaction_no
            if payload.img_url:
                payment_request.img_url = payload.img_url
            if payload.amount is not None:
                payment_request.amount = normalize_amount(payload.amount)
            if payload.verified_by is not None:
                payment_request.verified_by = payload.verified_by
            await unit.db.flush()

            if payload.status != PaymentRequestStatus.APPROVED:
                if payload.status is not None:
                    payment_request.status = payload.status
                    await unit.db.flush()
                    if payload.status == PaymentRequestStatus.REJECTED:
                        await log_event(
                            unit.db,
                            action=AuditAction.PAYMENT_REQUEST_REJECTED,
                            actor_id=payload.verified_by,
                            party_id=payment_request.party_id,
                            reference_type="payment_request",
                            reference_id=payment_request.id
                        )
                return PaymentRequestOutcome(payment_request=payment_request)

            result = await unit.post(TransactionRequest(
                party_id=payment_request.party_id,
                direction=Direction.OUT,
                amount=payment_request.amount,
                description=f"Payment request #{payment_request.id} approved ({payment_request.transaction_no})",
                allow_negative=self.policy.allow_negative,
                reference_type="payment_request",
                reference_id=payment_request.id,
                added_by=payload.verified_by,
                related_record_mutation=approve,
            ))
            await log_event(
                unit.db,
                action=AuditAction.PAYMENT_REQUEST_APPROVED,
                actor_id=payload.verified_by,
                party_id=payment_request.party_id,
                reference_type="payment_request",
                reference_id=payment_request.id,
                metadata={"amount": str(result.amount), "ledger_entry_id": result.ledger_entry.id}
            )
            return PaymentRequestOutcome(payment_request=payment_request, transaction=result)

        return await self.engine.atomic(db, work)

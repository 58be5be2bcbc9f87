"""
Shareholder and customer ledger adapter.

A direct IN/OUT against the party. Shareholder transactions are mirrored
on the company account (IN -> company CREDIT, OUT -> company DEBIT);
customer transactions, when mirroring is enabled, are mirrored inversely
(customer IN -> company DEBIT, customer OUT -> company CREDIT). Both rows
land in one atomic unit.
"""

from dataclasses import dataclass
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from backoffice.app.models.party_transaction import PartyTransaction
from backoffice.app.models.party import Party
from backoffice.app.models.ledger_enums import Direction, PartyType, TransactionType
from backoffice.app.schemas.party_ledger import PartyTransactionCreate
from backoffice.app.domain.ledger.engine import BalanceEngine, TransactionRequest, TransactionResult, normalize_amount
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.adapters.policy import AdapterPolicy


@dataclass
class PartyTransactionOutcome:
    transaction: PartyTransaction
    party_result: TransactionResult
    company_result: Optional[TransactionResult] = None


class PartyLedgerAdapter:
    """
    Ledger transactions for one party type.

    `inverse_mirror` selects the customer convention where money the
    customer receives leaves the company account.
    """

    def __init__(self, engine: BalanceEngine, policy: AdapterPolicy,
                 party_type: PartyType, inverse_mirror: bool = False):
        self.engine = engine
        self.policy = policy
        self.party_type = party_type
        self.inverse_mirror = inverse_mirror

    def _label(self) -> str:
        return "ShareHolder" if self.party_type == PartyType.SHAREHOLDER else "Customer"

    def _mirror_direction(self, transaction_type: TransactionType) -> Direction:
        incoming = transaction_type == TransactionType.IN
        if self.inverse_mirror:
            incoming = not incoming
        return Direction.CREDIT if incoming else Direction.DEBIT

    async def record(self, db: AsyncSession, payload: PartyTransactionCreate) -> PartyTransactionOutcome:
        """
        Post an IN/OUT transaction for the party and its company mirror.

        Raises:
            InvalidAmountError: If amount is not positive
            PartyNotFoundError: If the party is missing or of another type
            InsufficientBalanceError: If either side's floor rejects the debit
        """
        amount = normalize_amount(payload.amount)
        await PartyStore.get_party(db, payload.party_id, self.party_type)
        if self.policy.mirror_company:
            await PartyStore.get_party(db, self.policy.company_party_id)

        direction = Direction.IN if payload.type == TransactionType.IN else Direction.OUT

        async def create_transaction(session: AsyncSession) -> PartyTransaction:
            transaction = PartyTransaction(
                party_id=payload.party_id,
                transaction_type=payload.type,
                amount=amount,
                description=payload.description,
                added_by=payload.added_by,
            )
            session.add(transaction)
            await session.flush()
            return transaction

        async def work(unit) -> PartyTransactionOutcome:
            party_result = await unit.post(TransactionRequest(
                party_id=payload.party_id,
                direction=direction,
                amount=amount,
                description=payload.description,
                allow_negative=self.policy.allow_negative,
                reference_type="party_transaction",
                added_by=payload.added_by,
                related_record_mutation=create_transaction,
            ))
            transaction = party_result.related_record
            transaction.ledger_entry_id = party_result.ledger_entry.id

            company_result = None
            if self.policy.mirror_company:
                company_result = await unit.post(TransactionRequest(
                    party_id=self.policy.company_party_id,
                    direction=self._mirror_direction(payload.type),
                    amount=amount,
                    description=f"{self._label()} Transaction ({payload.type.value}): {payload.description}",
                    allow_negative=self.policy.mirror_allow_negative,
                    reference_type="party_transaction",
                    reference_id=transaction.id,
                    added_by=payload.added_by,
                ))
                transaction.company_ledger_entry_id = company_result.ledger_entry.id

            await unit.db.flush()
            return PartyTransactionOutcome(
                transaction=transaction,
                party_result=party_result,
                company_result=company_result
            )

        return await self.engine.atomic(db, work)

    async def list(self, db: AsyncSession, party_id: Optional[int] = None) -> List[PartyTransaction]:
        """Transactions of this party type, newest first."""
        query = (
            select(PartyTransaction)
            .join(Party, Party.id == PartyTransaction.party_id)
            .where(Party.party_type == self.party_type)
            .order_by(PartyTransaction.id.desc())
        )
        if party_id:
            query = query.where(PartyTransaction.party_id == party_id)
        result = await db.execute(query)
        return result.scalars().all()

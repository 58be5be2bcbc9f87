"""
Expense adapter.

An expense is one OUT against the spending party (the company account
unless another party is named) plus the Expense record.
"""

from dataclasses import dataclass
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.app.models.expense import Expense
from backoffice.app.models.ledger_enums import Direction
from backoffice.app.schemas.transactions import ExpenseCreate
from backoffice.app.domain.ledger.engine import BalanceEngine, TransactionRequest, TransactionResult, normalize_amount
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.adapters.policy import AdapterPolicy


@dataclass
class ExpenseOutcome:
    expense: Expense
    transaction: TransactionResult


class ExpenseAdapter:

    def __init__(self, engine: BalanceEngine, policy: AdapterPolicy):
        self.engine = engine
        self.policy = policy

    async def record_expense(self, db: AsyncSession, payload: ExpenseCreate) -> ExpenseOutcome:
        """
        Record an expense and debit it from the spending party.

        Raises:
            InvalidAmountError: If amount is not positive
            PartyNotFoundError: If the spending party or `added_by` is missing
            InsufficientBalanceError: If the expense policy forbids negatives
        """
        amount = normalize_amount(payload.amount)
        party_id = payload.party_id or self.policy.company_party_id
        await PartyStore.get_party(db, party_id)

        async def create_expense(session: AsyncSession) -> Expense:
            expense = Expense(
                party_id=party_id,
                title=payload.title,
                description=payload.description or "",
                image_path=payload.image_path or "",
                amount=amount,
                added_by=payload.added_by,
            )
            session.add(expense)
            await session.flush()
            return expense

        async def work(unit) -> ExpenseOutcome:
            result = await unit.post(TransactionRequest(
                party_id=party_id,
                direction=Direction.OUT,
                amount=amount,
                description=f"Expense: {payload.title}",
                allow_negative=self.policy.allow_negative,
                reference_type="expense",
                added_by=payload.added_by,
                related_record_mutation=create_expense,
            ))
            expense = result.related_record
            expense.ledger_entry_id = result.ledger_entry.id
            await unit.db.flush()
            return ExpenseOutcome(expense=expense, transaction=result)

        return await self.engine.atomic(db, work)

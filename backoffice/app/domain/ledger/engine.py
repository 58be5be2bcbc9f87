"""
Balance Transaction Engine (Domain Logic).

Turns a normalized TransactionRequest into one balance mutation plus one
immutable ledger row, together with the business record mutation that
caused it. Everything posted through one AtomicUnit commits together or
rolls back together.
"""

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Awaitable, Callable, List, Optional, TypeVar
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from backoffice.app.core.config import settings
from backoffice.app.core.exceptions import (
    AppException,
    InvalidAmountError,
    ConstraintConflictError,
    StoreUnavailableError,
)
from backoffice.app.models.ledger_entry import LedgerEntry
from backoffice.app.models.ledger_enums import Direction, LedgerEntryType
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.ledger.ledger_log import LedgerLog

logger = logging.getLogger("backoffice.ledger")

T = TypeVar("T")

CENT = Decimal("0.01")

RelatedMutation = Callable[[AsyncSession], Awaitable[Any]]


def normalize_amount(value: Any) -> Decimal:
    """
    Coerce an amount to a 2-decimal Decimal.

    Raises:
        InvalidAmountError: If the value is not a positive finite number
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmountError(value)
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(value)
    if not amount.is_finite():
        raise InvalidAmountError(value)
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise InvalidAmountError(value)
    return amount


@dataclass
class TransactionRequest:
    """Normalized balance transaction produced by a business event adapter."""
    party_id: int
    direction: Direction
    amount: Any
    description: str
    allow_negative: bool = True
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    added_by: Optional[int] = None
    related_record_mutation: Optional[RelatedMutation] = None


@dataclass
class TransactionResult:
    """Outcome of one posted TransactionRequest."""
    party_id: int
    direction: Direction
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    ledger_entry: LedgerEntry
    related_record: Any = None


class AtomicUnit:
    """
    One open unit of work against the store.

    Adapters receive it from BalanceEngine.atomic() and post any number of
    requests; nothing is committed until the adapter's coroutine returns.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.results: List[TransactionResult] = []

    async def post(self, request: TransactionRequest) -> TransactionResult:
        """
        Validate and apply one request.

        Flow:
        1. Validate amount
        2. Run the related record mutation
        3. Apply the signed delta (floor check when negatives are disallowed)
        4. Append the ledger entry with the post-movement balance
        """
        if request.direction == Direction.ADJUSTMENT:
            raise ValueError("ADJUSTMENT entries are written by the corrective overwrite only")

        # 1. Validation happens before any write
        amount = normalize_amount(request.amount)

        # 2. Business record mutation
        related = None
        if request.related_record_mutation is not None:
            related = await request.related_record_mutation(self.db)

        reference_id = request.reference_id
        if reference_id is None and related is not None:
            reference_id = getattr(related, "id", None)

        # 3. Balance
        delta = amount if request.direction.is_credit else -amount
        new_balance = await PartyStore.apply_delta(
            self.db, request.party_id, delta, allow_negative=request.allow_negative
        )

        # 4. Ledger
        entry = LedgerEntry(
            party_id=request.party_id,
            entry_type=LedgerEntryType.CREDIT if request.direction.is_credit else LedgerEntryType.DEBIT,
            direction=request.direction,
            credit=amount if request.direction.is_credit else Decimal("0"),
            debit=Decimal("0") if request.direction.is_credit else amount,
            balance=new_balance,
            description=request.description,
            reference_type=request.reference_type,
            reference_id=reference_id,
            added_by=request.added_by,
        )
        await LedgerLog.append(self.db, entry)

        logger.info(
            "Ledger entry %s posted: party %s %s %s, balance %s",
            entry.id, request.party_id, request.direction.value, amount, new_balance
        )

        result = TransactionResult(
            party_id=request.party_id,
            direction=request.direction,
            amount=amount,
            previous_balance=new_balance - delta,
            new_balance=new_balance,
            ledger_entry=entry,
            related_record=related,
        )
        self.results.append(result)
        return result


class BalanceEngine:
    """
    Sole writer of party balances and ledger rows.

    Each atomic unit runs against the caller's session. The body is bounded
    by `timeout_seconds`; commit is never interrupted once started.
    """

    def __init__(self, timeout_seconds: Optional[float] = None):
        self.timeout_seconds = timeout_seconds or settings.transaction_timeout_seconds

    async def atomic(self, db: AsyncSession, work: Callable[[AtomicUnit], Awaitable[T]]) -> T:
        """
        Run `work` inside one atomic unit and commit it.

        Raises:
            AppException: Domain errors raised by `work`, after rollback
            ConstraintConflictError: On unique / foreign key violations
            StoreUnavailableError: On timeout or store failure
        """
        unit = AtomicUnit(db)
        try:
            outcome = await asyncio.wait_for(work(unit), timeout=self.timeout_seconds)
            await db.commit()
        except AppException:
            await db.rollback()
            raise
        except asyncio.TimeoutError:
            await db.rollback()
            logger.error("Atomic unit timed out after %ss", self.timeout_seconds)
            raise StoreUnavailableError(
                "Transaction timed out, no changes were applied",
                details={"timeout_seconds": self.timeout_seconds}
            )
        except IntegrityError as exc:
            await db.rollback()
            logger.warning("Atomic unit violated a constraint: %s", exc.orig)
            raise ConstraintConflictError(details={"reason": str(exc.orig)})
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("Atomic unit failed against the store: %s", exc)
            raise StoreUnavailableError(details={"reason": type(exc).__name__})
        except Exception:
            await db.rollback()
            raise

        return outcome

    async def execute(self, db: AsyncSession, request: TransactionRequest) -> TransactionResult:
        """Post a single request in its own atomic unit."""
        return await self.atomic(db, lambda unit: unit.post(request))

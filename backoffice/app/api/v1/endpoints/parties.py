"""
Party API Endpoints.

Registration of balance-holding parties, balance and ledger reads, ledger
verification and the corrective balance overwrite.
"""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backoffice.app.db.session import get_db
from backoffice.app.models.party import Party
from backoffice.app.models.ledger_enums import PartyType
from backoffice.app.schemas.common import ApiResponse
from backoffice.app.schemas.party import (
    PartyCreate,
    PartyResponse,
    BalanceResponse,
    BalanceOverwrite,
    BalanceOverwriteResponse,
    AuditLogResponse,
)
from backoffice.app.schemas.ledger import LedgerEntryResponse, LedgerListResponse, LedgerVerifyResponse
from backoffice.app.core.dependencies import get_balance_engine
from backoffice.app.domain.ledger.engine import BalanceEngine
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.domain.ledger.ledger_log import LedgerLog, LedgerFilters
from backoffice.app.domain.adapters.balance_correction import overwrite_balance
from backoffice.app.services.audit import log_event, get_audit_trail, AuditAction

router = APIRouter(prefix="/parties", tags=["Parties"])


@router.post("", response_model=ApiResponse[PartyResponse], status_code=status.HTTP_201_CREATED)
async def create_party(
    party_data: PartyCreate,
    db: AsyncSession = Depends(get_db),
    engine: BalanceEngine = Depends(get_balance_engine)
):
    """
    Register a party with its opening balance.

    The opening balance is the replay origin of the party's ledger.
    """
    async def work(unit) -> Party:
        party = await PartyStore.create_party(
            unit.db,
            party_type=party_data.party_type,
            name=party_data.name,
            initial_balance=party_data.initial_balance,
            username=party_data.username,
            location=party_data.location,
            phone=party_data.phone,
        )
        await log_event(
            unit.db,
            action=AuditAction.PARTY_CREATED,
            actor_id=party_data.added_by,
            party_id=party.id,
            reference_type="party",
            reference_id=party.id,
            metadata={"party_type": party.party_type.value, "initial_balance": str(party.initial_balance)}
        )
        return party

    party = await engine.atomic(db, work)
    await db.refresh(party)

    return ApiResponse(message="Party created successfully", data=PartyResponse.model_validate(party))


@router.get("", response_model=ApiResponse[List[PartyResponse]])
async def list_parties(
    party_type: Optional[PartyType] = Query(None, description="Filter by party type"),
    db: AsyncSession = Depends(get_db)
):
    query = select(Party).order_by(Party.id.asc())
    if party_type:
        query = query.where(Party.party_type == party_type)
    result = await db.execute(query)
    parties = result.scalars().all()

    return ApiResponse(
        message="Parties retrieved successfully",
        data=[PartyResponse.model_validate(party) for party in parties]
    )


@router.get("/{party_id}", response_model=ApiResponse[PartyResponse])
async def get_party(party_id: int, db: AsyncSession = Depends(get_db)):
    party = await PartyStore.get_party(db, party_id)
    return ApiResponse(message="Party retrieved successfully", data=PartyResponse.model_validate(party))


@router.get("/{party_id}/balance", response_model=ApiResponse[BalanceResponse])
async def get_balance(party_id: int, db: AsyncSession = Depends(get_db)):
    balance = await PartyStore.get_balance(db, party_id)
    return ApiResponse(
        message="Balance retrieved successfully",
        data=BalanceResponse(party_id=party_id, balance=balance)
    )


@router.get("/{party_id}/ledger", response_model=ApiResponse[LedgerListResponse])
async def list_ledger(
    party_id: int,
    date_from: Optional[datetime] = Query(None, description="Entries on or after"),
    date_to: Optional[datetime] = Query(None, description="Entries on or before"),
    search: Optional[str] = Query(None, max_length=200, description="Description contains"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=200, description="Items per page"),
    ascending: bool = Query(False, description="Oldest first"),
    db: AsyncSession = Depends(get_db)
):
    """
    Paginated ledger of a party, most recent first.
    """
    await PartyStore.get_party(db, party_id)

    entries, total = await LedgerLog.list_for_party(
        db,
        party_id,
        LedgerFilters(date_from=date_from, date_to=date_to, search=search),
        page=page,
        page_size=page_size,
        ascending=ascending
    )

    return ApiResponse(
        message="Ledger retrieved successfully",
        data=LedgerListResponse(
            entries=[LedgerEntryResponse.model_validate(entry) for entry in entries],
            total=total,
            page=page,
            page_size=page_size
        )
    )


@router.get("/{party_id}/ledger/verify", response_model=ApiResponse[LedgerVerifyResponse])
async def verify_ledger(party_id: int, db: AsyncSession = Depends(get_db)):
    """
    Replay the ledger from the opening balance and compare with the stored balance.
    """
    replay = await LedgerLog.replay(db, party_id)
    message = "Ledger is consistent" if replay.is_consistent else "Ledger drift detected"
    return ApiResponse(message=message, data=LedgerVerifyResponse.model_validate(replay))


@router.put("/{party_id}/balance", response_model=ApiResponse[BalanceOverwriteResponse])
async def overwrite_party_balance(
    party_id: int,
    overwrite: BalanceOverwrite,
    db: AsyncSession = Depends(get_db),
    engine: BalanceEngine = Depends(get_balance_engine)
):
    """
    Corrective overwrite of a party balance.

    Administrative only. The difference is recorded as an ADJUSTMENT ledger
    row and an audit entry so the ledger still replays to the new balance.
    """
    correction = await overwrite_balance(
        engine,
        db,
        party_id=party_id,
        new_balance=overwrite.balance,
        actor_id=overwrite.actor_id,
        reason=overwrite.reason
    )
    return ApiResponse(
        message="Balance overwritten",
        data=BalanceOverwriteResponse.model_validate(correction)
    )


@router.get("/{party_id}/audit", response_model=ApiResponse[List[AuditLogResponse]])
async def get_party_audit(
    party_id: int,
    action: Optional[str] = Query(None, description="Filter by audit action"),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db)
):
    await PartyStore.get_party(db, party_id)
    logs = await get_audit_trail(db, party_id=party_id, action=action, limit=limit)
    return ApiResponse(
        message="Audit trail retrieved successfully",
        data=[AuditLogResponse.model_validate(log) for log in logs]
    )

"""
FastAPI application for the Vehicle Back-Office Ledger service.

Routes live under `/v1`; every balance-moving route goes through
`BalanceEngine.atomic` so the balance, the ledger row and the business
record are committed together.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Depends
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.app.core.config import settings
from backoffice.app.api.v1.router import router as api_v1_router
from backoffice.app.db.session import engine, Base, get_db
from backoffice.app.core.observability import ObservabilityMiddleware, configure_logging
from backoffice.app.core.exceptions import (
    AppException,
    StoreUnavailableError,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Table registration for create_all
from backoffice.app.models.party import Party  # noqa: F401
from backoffice.app.models.ledger_entry import LedgerEntry  # noqa: F401
from backoffice.app.models.audit_log import AuditLog  # noqa: F401
from backoffice.app.models.vehicle import Vehicle  # noqa: F401
from backoffice.app.models.purchase_invoice import PurchaseInvoice  # noqa: F401
from backoffice.app.models.cargo_booking import CargoBooking  # noqa: F401
from backoffice.app.models.expense import Expense  # noqa: F401
from backoffice.app.models.sale import Sale  # noqa: F401
from backoffice.app.models.inspection import Inspection  # noqa: F401
from backoffice.app.models.transport import Transport  # noqa: F401
from backoffice.app.models.port_collect import PortCollect  # noqa: F401
from backoffice.app.models.payment_request import PaymentRequest  # noqa: F401
from backoffice.app.models.party_transaction import PartyTransaction  # noqa: F401

logger = logging.getLogger("backoffice")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Ledger tables ready (company party id %s)", settings.company_party_id)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Back-office balance ledger for vehicle trading",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Liveness plus a round trip to the ledger store.

    Raises:
        StoreUnavailableError: If the database does not answer
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Health check could not reach the store: %s", exc)
        raise StoreUnavailableError("Ledger store is unreachable")

    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "database": "ok",
    }


app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Welcome to the Vehicle Back-Office Ledger API",
        "docs": "/docs",
        "health": "/health",
        "ledger": f"/{settings.api_version}/parties/{{party_id}}/ledger",
    }

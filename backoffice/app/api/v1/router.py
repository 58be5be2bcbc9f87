"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backoffice.app.api.v1.endpoints import (
    parties, vehicles, transactions, payables,
    payment_requests, party_ledgers, purchasing
)

router = APIRouter()

# Parties, balances and ledgers
router.include_router(parties.router)

# Vehicles and stage moves
router.include_router(vehicles.router)

# Expense and sale events
router.include_router(transactions.router)

# Auction purchases and shipments
router.include_router(purchasing.purchase_invoice_router)
router.include_router(purchasing.cargo_router)

# Payable records
router.include_router(payables.inspection_router)
router.include_router(payables.transport_router)
router.include_router(payables.port_collect_router)

# Payment request approval
router.include_router(payment_requests.router)

# Shareholder / customer ledgers
router.include_router(party_ledgers.shareholder_router)
router.include_router(party_ledgers.customer_router)

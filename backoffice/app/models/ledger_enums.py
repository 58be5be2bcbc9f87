"""
Ledger and vehicle lifecycle enumerations.
"""

import enum


class PartyType(str, enum.Enum):
    """Balance-holding party type enumeration."""
    ADMIN = "ADMIN"  # Company account
    DISTRIBUTOR = "DISTRIBUTOR"
    SHAREHOLDER = "SHAREHOLDER"
    CUSTOMER = "CUSTOMER"


class Direction(str, enum.Enum):
    """Requested direction of a balance transaction."""
    IN = "IN"
    OUT = "OUT"
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    ADJUSTMENT = "ADJUSTMENT"  # Corrective overwrite, never submitted by adapters

    @property
    def is_credit(self) -> bool:
        return self in (Direction.IN, Direction.CREDIT)


class LedgerEntryType(str, enum.Enum):
    """Ledger entry type enumeration."""
    DEBIT = "DEBIT"  # Money leaving the account
    CREDIT = "CREDIT"  # Money entering the account


class PaidStatus(str, enum.Enum):
    """Payment status of purchase invoice, inspection, transport and port collection records."""
    PAID = "PAID"
    UNPAID = "UNPAID"


class PaymentRequestStatus(str, enum.Enum):
    """Payment request status enumeration."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class TransactionType(str, enum.Enum):
    """Shareholder / customer ledger transaction type."""
    IN = "IN"
    OUT = "OUT"


class VehicleStage(str, enum.Enum):
    """Logistics stage of a vehicle."""
    PENDING = "PENDING"
    INSPECTION = "INSPECTION"
    TRANSPORT = "TRANSPORT"
    COLLECT = "COLLECT"
    SHOWROOM = "SHOWROOM"
    SHIPPED = "SHIPPED"


class FreightTerm(str, enum.Enum):
    """Who pays ocean freight on a cargo booking."""
    PRE_PAID = "PRE_PAID"  # Company pays the net total up front
    COLLECT = "COLLECT"  # Charges are collected on behalf of the consignee


class SaleStatus(str, enum.Enum):
    """Sale status of a vehicle."""
    PENDING = "PENDING"
    SOLD = "SOLD"

"""
Engine and adapter dependencies for FastAPI.

Adapters are built per request from settings, so the company account and
the negative-balance policy are never hardcoded in a route.
"""

from backoffice.app.core.config import settings
from backoffice.app.domain.ledger.engine import BalanceEngine
from backoffice.app.domain.adapters.policy import policy_for
from backoffice.app.domain.adapters.expense import ExpenseAdapter
from backoffice.app.domain.adapters.sale import SaleAdapter
from backoffice.app.domain.adapters.payables import InspectionAdapter, TransportAdapter, PortCollectAdapter
from backoffice.app.domain.adapters.payment_request import PaymentRequestAdapter
from backoffice.app.domain.adapters.party_ledger import PartyLedgerAdapter
from backoffice.app.domain.adapters.purchasing import PurchaseInvoiceAdapter, CargoBookingAdapter
from backoffice.app.models.ledger_enums import PartyType


def get_balance_engine() -> BalanceEngine:
    """FastAPI dependency providing the balance engine."""
    return BalanceEngine(timeout_seconds=settings.transaction_timeout_seconds)


def get_expense_adapter() -> ExpenseAdapter:
    return ExpenseAdapter(get_balance_engine(), policy_for("expense"))


def get_sale_adapter() -> SaleAdapter:
    return SaleAdapter(get_balance_engine(), policy_for("sale"))


def get_inspection_adapter() -> InspectionAdapter:
    return InspectionAdapter(get_balance_engine(), policy_for("inspection"))


def get_transport_adapter() -> TransportAdapter:
    return TransportAdapter(get_balance_engine(), policy_for("transport"))


def get_port_collect_adapter() -> PortCollectAdapter:
    return PortCollectAdapter(get_balance_engine(), policy_for("port_collect"))


def get_payment_request_adapter() -> PaymentRequestAdapter:
    return PaymentRequestAdapter(get_balance_engine(), policy_for("payment_request"))


def get_purchase_invoice_adapter() -> PurchaseInvoiceAdapter:
    return PurchaseInvoiceAdapter(get_balance_engine(), policy_for("purchase_invoice"))


def get_cargo_booking_adapter() -> CargoBookingAdapter:
    return CargoBookingAdapter(get_balance_engine(), policy_for("cargo"))


def get_shareholder_ledger_adapter() -> PartyLedgerAdapter:
    return PartyLedgerAdapter(get_balance_engine(), policy_for("shareholder"), PartyType.SHAREHOLDER)


def get_customer_ledger_adapter() -> PartyLedgerAdapter:
    return PartyLedgerAdapter(
        get_balance_engine(),
        policy_for("customer"),
        PartyType.CUSTOMER,
        inverse_mirror=True
    )

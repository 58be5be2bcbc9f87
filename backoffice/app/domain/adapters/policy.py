"""
Per-event adapter policy.

The company account id and the negative-balance floor are configuration,
not literals, so each deployment decides them per business event.
"""

from dataclasses import dataclass

from backoffice.app.core.config import settings


@dataclass(frozen=True)
class AdapterPolicy:
    """Configuration handed to a business event adapter."""
    company_party_id: int
    allow_negative: bool = True
    mirror_company: bool = False
    mirror_allow_negative: bool = True


def policy_for(event: str) -> AdapterPolicy:
    """
    Build the policy for a business event from settings.

    Args:
        event: One of expense, sale, inspection, transport, port_collect,
            payment_request, purchase_invoice, cargo, shareholder,
            customer

    Returns:
        AdapterPolicy for the event
    """
    allow_negative = getattr(settings, f"{event}_allow_negative")
    mirror_company = {
        "shareholder": True,
        "customer": settings.customer_mirror_company,
    }.get(event, False)

    return AdapterPolicy(
        company_party_id=settings.company_party_id,
        allow_negative=allow_negative,
        mirror_company=mirror_company,
        mirror_allow_negative=getattr(settings, f"{event}_mirror_allow_negative", True),
    )

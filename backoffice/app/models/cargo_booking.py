"""
Cargo Booking database model.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Numeric
from sqlalchemy.sql import func
from backoffice.app.db.session import Base
from backoffice.app.models.ledger_enums import FreightTerm


class CargoBooking(Base):
    """
    Ocean shipment of a batch of vehicles.

    Booking is a single posting against the paying party: PRE_PAID takes
    `net_total_amount_dollars` out, COLLECT books `total_amount_dollars` in.
    Booked vehicles point back here through `Vehicle.cargo_booking_id`.
    """
    __tablename__ = "cargo_bookings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    party_id = Column(Integer, ForeignKey('parties.id'), nullable=False, index=True)
    booking_no = Column(String(100), unique=True, nullable=False, index=True)

    # Voyage
    carrier = Column(String(200), nullable=False, default="")
    vessel = Column(String(200), nullable=False, default="")
    port_of_loading = Column(String(200), nullable=False, default="")
    port_of_discharge = Column(String(200), nullable=False, default="")
    etd = Column(DateTime(timezone=True), nullable=True)
    eta = Column(DateTime(timezone=True), nullable=True)
    consignee = Column(String(200), nullable=False, default="")

    freight_term = Column(Enum(FreightTerm), nullable=False)

    # Financials
    freight_amount_dollars = Column(Numeric(14, 2), nullable=False, default=0)
    total_amount_dollars = Column(Numeric(14, 2), nullable=False, default=0)
    net_total_amount_dollars = Column(Numeric(14, 2), nullable=False, default=0)

    image_path = Column(String(500), nullable=False, default="")
    added_by = Column(Integer, nullable=True)
    ledger_entry_id = Column(Integer, ForeignKey('ledger_entries.id'), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def posted_amount(self):
        if self.freight_term == FreightTerm.PRE_PAID:
            return self.net_total_amount_dollars
        return self.total_amount_dollars

    def __repr__(self):
        return f"<CargoBooking(id={self.id}, booking_no='{self.booking_no}', term='{self.freight_term.value}')>"

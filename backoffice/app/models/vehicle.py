"""
Vehicle database model.

Tracks the logistics stage and the sale status of a traded vehicle.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum
from sqlalchemy.sql import func
from backoffice.app.db.session import Base
from backoffice.app.models.ledger_enums import VehicleStage, SaleStatus


class Vehicle(Base):
    """
    Vehicle model.

    `stage` moves through inspection, transport, shipment, port collection
    and showroom. `sale_status` flips PENDING -> SOLD exactly once.
    """
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    chassis_no = Column(String(100), unique=True, nullable=False, index=True)
    maker = Column(String(100), nullable=True)
    year = Column(Integer, nullable=True)
    color = Column(String(50), nullable=True)

    # Account the vehicle is booked against
    owner_party_id = Column(Integer, ForeignKey('parties.id'), nullable=True, index=True)

    # Auction purchase and ocean shipment it belongs to
    purchase_invoice_id = Column(Integer, ForeignKey('purchase_invoices.id'), nullable=True, index=True)
    cargo_booking_id = Column(Integer, ForeignKey('cargo_bookings.id'), nullable=True, index=True)

    stage = Column(Enum(VehicleStage), default=VehicleStage.PENDING, nullable=False, index=True)
    sale_status = Column(Enum(SaleStatus), default=SaleStatus.PENDING, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Vehicle(id={self.id}, chassis_no='{self.chassis_no}', stage='{self.stage.value}', sale='{self.sale_status.value}')>"

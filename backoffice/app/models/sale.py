"""
Sale database model.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric
from sqlalchemy.sql import func
from backoffice.app.db.session import Base


class Sale(Base):
    """
    Sale model.

    One sale per vehicle. The seller is credited the sale price and
    debited commission plus other charges.
    """
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    party_id = Column(Integer, ForeignKey('parties.id'), nullable=False, index=True)  # Seller
    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, unique=True, index=True)

    date = Column(DateTime(timezone=True), nullable=False)

    # Financials
    sale_price = Column(Numeric(14, 2), nullable=False)
    commission_amount = Column(Numeric(14, 2), nullable=False, default=0)
    other_charges = Column(Numeric(14, 2), nullable=False, default=0)

    # Buyer
    fullname = Column(String(200), nullable=False, default="")
    mobile_no = Column(String(50), nullable=False, default="")
    passport_no = Column(String(50), nullable=False, default="")
    details = Column(String(1000), nullable=False, default="")
    image_path = Column(String(500), nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def total_charges(self):
        return self.commission_amount + self.other_charges

    def __repr__(self):
        return f"<Sale(id={self.id}, vehicle_id={self.vehicle_id}, price={self.sale_price})>"

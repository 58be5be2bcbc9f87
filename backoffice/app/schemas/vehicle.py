"""
Vehicle Schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from backoffice.app.models.ledger_enums import VehicleStage, SaleStatus


class VehicleCreate(BaseModel):
    """Schema for registering a vehicle."""
    chassis_no: str = Field(..., min_length=1, max_length=100)
    maker: Optional[str] = Field(None, max_length=100)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    color: Optional[str] = Field(None, max_length=50)
    owner_party_id: Optional[int] = None

    class Config:
        extra = "forbid"


class VehicleStageUpdate(BaseModel):
    """Move a vehicle to another logistics stage (e.g. SHOWROOM)."""
    stage: VehicleStage

    class Config:
        extra = "forbid"


class VehicleResponse(BaseModel):
    """Schema for displaying a vehicle."""
    id: int
    chassis_no: str
    maker: Optional[str]
    year: Optional[int]
    color: Optional[str]
    owner_party_id: Optional[int]
    stage: VehicleStage
    sale_status: SaleStatus
    created_at: datetime

    class Config:
        from_attributes = True

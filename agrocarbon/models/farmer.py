"""
Farmer and farm-input models - the registry side of a carbon credit.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from agrocarbon.models.credit import CarbonCreditRead
from agrocarbon.utils.time import utc_now


class FarmerBase(SQLModel):
    """Base farmer schema."""
    name: str = Field(..., min_length=1, description="Farmer display name")
    location: str = Field(..., description="Region or district, display only")
    crop_type: str = Field(..., description="Primary crop, e.g. 'Rice'")
    land_area: float = Field(..., gt=0, description="Farm land area in acres")
    contact: Optional[str] = Field(default=None, description="Phone or e-mail")


class Farmer(FarmerBase, table=True):
    """Farmer database table."""
    __tablename__ = "farmers"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)


class FarmerRead(FarmerBase):
    """Schema for reading a farmer."""
    id: int
    created_at: datetime


class FarmInputBase(SQLModel):
    """Practices reported by a farmer, stored as submitted."""
    farmer_id: int = Field(..., foreign_key="farmers.id")
    fertilizer_use: str = Field(default="", description="Fertilizer choice")
    irrigation_method: str = Field(default="", description="Irrigation method")
    seed_type: str = Field(default="", description="Seed type")
    soil_health: str = Field(default="", description="Soil-health rating")


class FarmInput(FarmInputBase, table=True):
    """Farm inputs database table."""
    __tablename__ = "farm_inputs"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)


class FarmInputRead(FarmInputBase):
    id: int
    created_at: datetime


class FarmerRegistration(SQLModel):
    """Request body for registering a farmer with their practices."""
    name: str = Field(..., min_length=1)
    location: str
    crop_type: str
    land_area: float = Field(..., gt=0, description="Farm land area in acres")
    contact: Optional[str] = None
    fertilizer: str = ""
    irrigation: str = ""
    seed_type: str = ""
    soil_health: str = ""


class FarmerRegistrationRead(SQLModel):
    """Everything created by a registration."""
    farmer: FarmerRead
    farm_inputs: FarmInputRead
    credit: CarbonCreditRead

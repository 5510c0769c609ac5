"""
Carbon credit model - one estimated credit per registration, updated in
place when it is verified.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from agrocarbon.utils.time import utc_now


class CreditStatus(str, Enum):
    """Carbon credit status lifecycle."""
    PENDING = "Pending"
    VERIFIED = "Verified"
    REJECTED = "Rejected"


class CarbonCreditBase(SQLModel):
    """Base carbon credit schema."""
    farmer_id: int = Field(..., foreign_key="farmers.id")
    credit_value: float = Field(..., ge=0, description="Estimated carbon credits")
    status: CreditStatus = Field(default=CreditStatus.PENDING)

    # Latest verification, copied from the VerificationResult
    verification_date: Optional[datetime] = Field(default=None)
    ndvi_value: Optional[float] = Field(default=None, ge=0, le=1)
    satellite_land_area: Optional[float] = Field(default=None, ge=0, description="Detected area in acres")
    verification_source: Optional[str] = Field(default=None)
    verification_confidence: Optional[float] = Field(default=None, ge=0, le=100)


class CarbonCredit(CarbonCreditBase, table=True):
    """Carbon credit database table."""
    __tablename__ = "carbon_credits"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CarbonCreditRead(CarbonCreditBase):
    """Schema for reading a carbon credit."""
    id: int
    created_at: datetime
    updated_at: datetime

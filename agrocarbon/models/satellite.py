"""
Satellite verification detail - one row per verification run of a credit.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from agrocarbon.utils.time import utc_now


class SatelliteVerificationBase(SQLModel):
    """Base satellite verification schema."""
    carbon_credit_id: int = Field(..., foreign_key="carbon_credits.id")
    verification_date: datetime = Field(..., description="Timestamp of the verification run")
    ndvi_value: float = Field(..., ge=0, le=1)
    ndvi_change: Optional[float] = Field(default=None, description="Change from the previous NDVI")
    vegetation_health_score: Optional[float] = Field(default=None, ge=0, le=100)
    carbon_sequestration_rate: Optional[float] = Field(default=None, description="tCO2 per year")
    satellite_source: str
    image_resolution_meters: Optional[float] = None
    cloud_coverage_percent: Optional[float] = Field(default=None, ge=0, le=100)
    verification_algorithm: str
    quality_flags: Optional[str] = Field(
        default=None,
        description="JSON string of threshold checks and defaulted inputs"
    )


class SatelliteVerification(SatelliteVerificationBase, table=True):
    """Satellite verification database table - append-only."""
    __tablename__ = "satellite_verifications"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)


class SatelliteVerificationRead(SatelliteVerificationBase):
    """Schema for reading a satellite verification."""
    id: int
    created_at: datetime

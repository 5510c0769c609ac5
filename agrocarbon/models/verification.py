"""
Verification result - the immutable output of one NDVI verification run.
"""

from datetime import datetime
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, Field

from agrocarbon.models.practices import VALUE_MODEL_CONFIG


class HealthStatus(str, Enum):
    """Vegetation health, ordered from worst to best."""
    POOR = "Poor"
    MODERATE = "Moderate"
    GOOD = "Good"
    EXCELLENT = "Excellent"


class DataSource(str, Enum):
    """Imagery source label attached to a verification."""
    SENTINEL_2 = "Sentinel-2 ESA"
    LANDSAT_8 = "Landsat-8 NASA"


class NDVIData(BaseModel):
    model_config = VALUE_MODEL_CONFIG

    value: float = Field(..., ge=0.10, le=0.95, description="Current NDVI, 3 decimals")
    change: float = Field(..., description="Change against the previous NDVI, 3 decimals")
    health_score: int = Field(..., ge=0, le=100, description="NDVI as a share of the 0.95 ceiling")
    date: datetime


class LandAreaVerification(BaseModel):
    model_config = VALUE_MODEL_CONFIG

    reported_area: float = Field(..., gt=0, description="Area reported by the farmer (acres)")
    satellite_detected_area: float = Field(..., description="Estimated area (acres), 2 decimals")
    accuracy: float = Field(..., ge=0, le=100, description="Area agreement in percent, 1 decimal")


class VegetationAnalysis(BaseModel):
    model_config = VALUE_MODEL_CONFIG

    crop_type: str
    health_status: HealthStatus
    sequestration_rate: float = Field(..., description="Estimated tCO2 per year for the whole plot")


class VerificationResult(BaseModel):
    """
    Outcome of a verification run.

    Serializes by alias to the camelCase contract (``isVerified``,
    ``ndviData`` ...). ``fallbacks`` names every input field that was
    scored through a fallback rule, so defaulted results can be told
    apart from fully recognised ones.
    """

    model_config = VALUE_MODEL_CONFIG

    is_verified: bool
    confidence: int = Field(..., ge=0, le=100)
    ndvi_data: NDVIData
    land_area_verification: LandAreaVerification
    vegetation_analysis: VegetationAnalysis
    source: DataSource
    image_resolution: float = Field(..., description="Ground resolution in metres")
    cloud_coverage: float = Field(..., ge=0, le=15)
    verification_date: datetime
    fallbacks: Tuple[str, ...] = ()

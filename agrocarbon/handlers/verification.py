"""
NDVI-based verification engine for farm carbon credits.

Converts a farmer's self-reported practices into an NDVI estimate, a
land-area plausibility check, a confidence score, a verdict and a
sequestration estimate. The model is a stand-in for remote sensing:
the "satellite" figures are drawn from an injected random source.
"""

import math
import random
from datetime import datetime
from typing import Callable, List, Optional, Protocol, Sequence, Tuple, TypeVar

from agrocarbon.core.constants import (
    AREA_ACCURACY_FACTOR,
    CONFIDENCE_AREA_WEIGHT,
    CONFIDENCE_NDVI_REFERENCE,
    CONFIDENCE_NDVI_WEIGHT,
    CROP_NDVI_BASELINE,
    DATA_SOURCES,
    DEFAULT_CROP_TYPE,
    DEFAULT_PRACTICE_BONUS,
    DEFAULT_SEQUESTRATION_RATE,
    DEFAULT_SOIL_HEALTH_BONUS,
    FERTILIZER_BONUS,
    IMAGE_RESOLUTION_M,
    IRRIGATION_BONUS,
    MAX_CLOUD_COVERAGE,
    MIN_AREA_ACCURACY,
    NDVI_EXCELLENT_MIN,
    NDVI_HEALTHY_MIN,
    NDVI_MAX,
    NDVI_MIN,
    NDVI_MODERATE_MIN,
    PREVIOUS_NDVI_RATIO,
    SEASONAL_VARIATION,
    SEED_TYPE_BONUS,
    SEQUESTRATION_HIGH_NDVI,
    SEQUESTRATION_MID_NDVI,
    SEQUESTRATION_MULTIPLIERS,
    SEQUESTRATION_RATES,
    SOIL_HEALTH_BONUS,
    CropBaseline,
)
from agrocarbon.core.logger import get_logger
from agrocarbon.models.practices import (
    CropType,
    FarmerPractices,
    Fertilizer,
    Irrigation,
    PracticeSet,
    SeedType,
    SoilHealth,
    is_known,
)
from agrocarbon.models.verification import (
    HealthStatus,
    LandAreaVerification,
    NDVIData,
    VegetationAnalysis,
    VerificationResult,
)
from agrocarbon.utils.time import utc_now

logger = get_logger("verification")

T = TypeVar("T")


class RandomSource(Protocol):
    """The subset of ``random.Random`` the engine draws from."""

    def uniform(self, a: float, b: float) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...


Clock = Callable[[], datetime]


class InvalidInputError(ValueError):
    """Raised when a verification request cannot be scored at all."""


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def resolve_baseline(crop_type: str) -> Tuple[CropBaseline, bool]:
    """
    Look up the NDVI baseline for a crop.

    Returns:
        (baseline, used_fallback). Unknown crops resolve to the default
        crop's entry.
    """
    baseline = CROP_NDVI_BASELINE.get(crop_type)
    if baseline is None:
        return CROP_NDVI_BASELINE[DEFAULT_CROP_TYPE], True
    return baseline, False


def calculate_practice_bonus(practices: PracticeSet) -> float:
    """
    Sum the four independent practice contributions.

    Unlisted fertilizer, irrigation and seed values contribute nothing;
    any soil rating below Average (or missing) costs 0.02.
    """
    return (
        FERTILIZER_BONUS.get(practices.fertilizer, DEFAULT_PRACTICE_BONUS)
        + IRRIGATION_BONUS.get(practices.irrigation, DEFAULT_PRACTICE_BONUS)
        + SEED_TYPE_BONUS.get(practices.seed_type, DEFAULT_PRACTICE_BONUS)
        + SOIL_HEALTH_BONUS.get(practices.soil_health, DEFAULT_SOIL_HEALTH_BONUS)
    )


def classify_health(ndvi: float) -> HealthStatus:
    """Map NDVI to a health category; lower bounds are inclusive."""
    if ndvi >= NDVI_EXCELLENT_MIN:
        return HealthStatus.EXCELLENT
    if ndvi >= NDVI_HEALTHY_MIN:
        return HealthStatus.GOOD
    if ndvi >= NDVI_MODERATE_MIN:
        return HealthStatus.MODERATE
    return HealthStatus.POOR


def sequestration_multiplier(ndvi: float) -> float:
    high, mid, low = SEQUESTRATION_MULTIPLIERS
    if ndvi >= SEQUESTRATION_HIGH_NDVI:
        return high
    if ndvi >= SEQUESTRATION_MID_NDVI:
        return mid
    return low


def calculate_confidence(ndvi: float, area_accuracy: float) -> int:
    """
    Confidence score out of 100.

    NDVI is worth up to 60 points relative to a 0.85 reference and area
    accuracy up to 40. The NDVI part can exceed 60 for very green plots,
    so the sum, rounded with halves up, is clamped to 100.
    """
    ndvi_confidence = min(100.0, (ndvi / CONFIDENCE_NDVI_REFERENCE) * CONFIDENCE_NDVI_WEIGHT)
    area_confidence = area_accuracy * CONFIDENCE_AREA_WEIGHT
    return clamp(round_half_up(ndvi_confidence + area_confidence), 0, 100)


def calculate_area_accuracy(reported_area: float, estimated_area: float) -> float:
    """Percent agreement between reported and estimated area, in [0, 100]."""
    deviation = abs(estimated_area - reported_area) / reported_area
    return clamp((1 - deviation) * 100, 0.0, 100.0)


def find_fallbacks(practices: FarmerPractices) -> List[str]:
    """Names of the input fields whose value is outside its known set."""
    checks = (
        ("crop_type", practices.crop_type, CropType),
        ("fertilizer", practices.practices.fertilizer, Fertilizer),
        ("irrigation", practices.practices.irrigation, Irrigation),
        ("seed_type", practices.practices.seed_type, SeedType),
        ("soil_health", practices.practices.soil_health, SoilHealth),
    )
    fallbacks = []
    for field, value, choices in checks:
        if not is_known(value, choices):
            logger.warning(
                f"Unrecognised {field} '{value}', scoring with fallback",
                extra={"field": field, "value": value},
            )
            fallbacks.append(field)
    return fallbacks


def _validate_land_area(land_area: Optional[float]) -> float:
    if land_area is None:
        raise InvalidInputError("Land area is required")
    if not math.isfinite(land_area) or land_area <= 0:
        raise InvalidInputError(f"Land area must be a positive number, got {land_area}")
    return land_area


def verify(
    practices: FarmerPractices,
    rng: Optional[RandomSource] = None,
    clock: Clock = utc_now,
) -> VerificationResult:
    """
    Verify a farmer's submission against the NDVI model.

    Steps:
    1. Resolve the crop's NDVI baseline (default crop if unknown)
    2. Add the practice bonus and seasonal noise, clamp to [0.10, 0.95]
    3. Compare with a "previous" NDVI drawn at 85-100% of baseline
    4. Estimate the plot area at 95-105% of the reported area
    5. Verified iff NDVI >= 0.65 and area accuracy >= 90%
    6. Derive confidence, health status and sequestration rate

    Random draws happen in a fixed order: seasonal noise, previous-NDVI
    ratio, area factor, data source, cloud coverage.

    Args:
        practices: Farmer submission
        rng: Random source, a fresh ``random.Random`` when omitted
        clock: Returns the timestamp stamped on the result

    Returns:
        A new VerificationResult

    Raises:
        InvalidInputError: land area missing, non-positive or not finite
    """
    land_area = _validate_land_area(practices.land_area)
    rng = rng or random.Random()

    fallbacks = find_fallbacks(practices)
    crop_config, _ = resolve_baseline(practices.crop_type)

    # NDVI
    bonus = calculate_practice_bonus(practices.practices)
    seasonal_variation = rng.uniform(-SEASONAL_VARIATION, SEASONAL_VARIATION)
    current_ndvi = clamp(crop_config.baseline + bonus + seasonal_variation, NDVI_MIN, NDVI_MAX)

    previous_ndvi = crop_config.baseline * rng.uniform(*PREVIOUS_NDVI_RATIO)
    ndvi_change = current_ndvi - previous_ndvi

    # Land area
    estimated_area = land_area * rng.uniform(*AREA_ACCURACY_FACTOR)
    area_accuracy = calculate_area_accuracy(land_area, estimated_area)

    # Verdict
    is_healthy = current_ndvi >= NDVI_HEALTHY_MIN
    is_area_accurate = area_accuracy >= MIN_AREA_ACCURACY
    is_verified = is_healthy and is_area_accurate

    confidence = calculate_confidence(current_ndvi, area_accuracy)
    health_status = classify_health(current_ndvi)

    base_rate = SEQUESTRATION_RATES.get(practices.crop_type, DEFAULT_SEQUESTRATION_RATE)
    sequestration_rate = base_rate * sequestration_multiplier(current_ndvi) * land_area

    # Imagery metadata
    source = rng.choice(DATA_SOURCES)
    cloud_coverage = rng.uniform(0.0, MAX_CLOUD_COVERAGE)

    verified_at = clock()

    logger.info(
        f"Verified {practices.crop_type or '<none>'}: ndvi={current_ndvi:.3f} "
        f"accuracy={area_accuracy:.1f}% verified={is_verified}",
        extra={"crop_type": practices.crop_type},
    )

    return VerificationResult(
        is_verified=is_verified,
        confidence=confidence,
        ndvi_data=NDVIData(
            value=round(current_ndvi, 3),
            change=round(ndvi_change, 3),
            health_score=round_half_up((current_ndvi / NDVI_MAX) * 100),
            date=verified_at,
        ),
        land_area_verification=LandAreaVerification(
            reported_area=land_area,
            satellite_detected_area=round(estimated_area, 2),
            accuracy=round(area_accuracy, 1),
        ),
        vegetation_analysis=VegetationAnalysis(
            crop_type=practices.crop_type,
            health_status=health_status,
            sequestration_rate=round(sequestration_rate, 2),
        ),
        source=source,
        image_resolution=IMAGE_RESOLUTION_M[source.value],
        cloud_coverage=round(cloud_coverage, 1),
        verification_date=verified_at,
        fallbacks=tuple(fallbacks),
    )

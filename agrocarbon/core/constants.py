"""
Scoring tables and thresholds for the NDVI verification model.

Every table is keyed by the plain string value of its enumeration so that
lookups work for raw request strings as well as enum members.
"""

from typing import Dict, NamedTuple

from agrocarbon.models.practices import CropType, Fertilizer, Irrigation, SeedType, SoilHealth
from agrocarbon.models.verification import DataSource


class CropBaseline(NamedTuple):
    """Reference NDVI for a crop absent any practice bonus or noise."""
    baseline: float
    variance: float


# Crop NDVI baselines
CROP_NDVI_BASELINE: Dict[str, CropBaseline] = {
    CropType.RICE.value: CropBaseline(0.75, 0.15),
    CropType.WHEAT.value: CropBaseline(0.70, 0.12),
    CropType.MAIZE.value: CropBaseline(0.78, 0.14),
    CropType.SUGARCANE.value: CropBaseline(0.82, 0.10),
    CropType.COTTON.value: CropBaseline(0.68, 0.16),
    CropType.AGROFORESTRY.value: CropBaseline(0.85, 0.08),
    CropType.ORGANIC_VEGETABLES.value: CropBaseline(0.72, 0.13),
    CropType.MILLETS.value: CropBaseline(0.65, 0.18),
    CropType.PULSES.value: CropBaseline(0.67, 0.15),
    CropType.SOYBEAN.value: CropBaseline(0.71, 0.14),
}
DEFAULT_CROP_TYPE = CropType.RICE.value

# Sequestration: tonnes CO2 per acre per year
SEQUESTRATION_RATES: Dict[str, float] = {
    CropType.AGROFORESTRY.value: 2.5,
    CropType.RICE.value: 1.2,
    CropType.ORGANIC_VEGETABLES.value: 1.8,
    CropType.WHEAT.value: 1.0,
    CropType.MAIZE.value: 1.1,
    CropType.SUGARCANE.value: 1.4,
    CropType.COTTON.value: 0.9,
    CropType.PULSES.value: 1.6,
    CropType.MILLETS.value: 1.3,
    CropType.SOYBEAN.value: 1.5,
}
DEFAULT_SEQUESTRATION_RATE = 1.0

# Practice bonuses (added to the crop baseline NDVI)
FERTILIZER_BONUS: Dict[str, float] = {
    Fertilizer.ORGANIC_MANURE.value: 0.08,
    Fertilizer.COMPOST.value: 0.07,
    Fertilizer.BIO_FERTILIZER.value: 0.06,
    Fertilizer.GREEN_MANURE.value: 0.05,
    Fertilizer.REDUCED_CHEMICAL.value: 0.02,
}
IRRIGATION_BONUS: Dict[str, float] = {
    Irrigation.RAINWATER_HARVESTING.value: 0.06,
    Irrigation.DRIP.value: 0.05,
    Irrigation.ALTERNATE_WETTING_DRYING.value: 0.04,
    Irrigation.SPRINKLER.value: 0.03,
}
SEED_TYPE_BONUS: Dict[str, float] = {
    SeedType.DROUGHT_RESISTANT.value: 0.04,
    SeedType.ORGANIC_SEEDS.value: 0.03,
    SeedType.HIGH_YIELD_VARIETY.value: 0.02,
}
SOIL_HEALTH_BONUS: Dict[str, float] = {
    SoilHealth.EXCELLENT.value: 0.06,
    SoilHealth.GOOD.value: 0.04,
    SoilHealth.AVERAGE.value: 0.02,
}
DEFAULT_PRACTICE_BONUS = 0.0
# Any soil rating outside the table, including an empty one, is penalised
DEFAULT_SOIL_HEALTH_BONUS = -0.02

# NDVI bounds and noise model
NDVI_MIN = 0.10
NDVI_MAX = 0.95
SEASONAL_VARIATION = 0.05  # symmetric: [-0.05, +0.05]
PREVIOUS_NDVI_RATIO = (0.85, 1.00)
AREA_ACCURACY_FACTOR = (0.95, 1.05)
MAX_CLOUD_COVERAGE = 15.0

# Verdict thresholds
NDVI_HEALTHY_MIN = 0.65
NDVI_EXCELLENT_MIN = 0.80
NDVI_MODERATE_MIN = 0.45
MIN_AREA_ACCURACY = 90.0

# Confidence model: NDVI contributes up to 60 points, area accuracy up to 40
CONFIDENCE_NDVI_REFERENCE = 0.85
CONFIDENCE_NDVI_WEIGHT = 60.0
CONFIDENCE_AREA_WEIGHT = 0.4

# Sequestration multipliers by vegetation health
SEQUESTRATION_HIGH_NDVI = 0.75
SEQUESTRATION_MID_NDVI = 0.60
SEQUESTRATION_MULTIPLIERS = (1.2, 1.0, 0.8)

# Imagery sources and their ground resolution in metres
DATA_SOURCES = (DataSource.SENTINEL_2, DataSource.LANDSAT_8)
IMAGE_RESOLUTION_M: Dict[str, float] = {
    DataSource.SENTINEL_2.value: 10.0,
    DataSource.LANDSAT_8.value: 30.0,
}

VERIFICATION_ALGORITHM = "NDVI-Enhanced Carbon Assessment v2.1"

# Registration-time credit estimate
BASE_CREDITS_PER_ACRE = 0.5
CREDIT_ESTIMATE_MULTIPLIERS: Dict[str, Dict[str, float]] = {
    "fertilizer": {Fertilizer.ORGANIC_MANURE.value: 1.3},
    "irrigation": {Irrigation.DRIP.value: 1.2},
    "crop_type": {CropType.AGROFORESTRY.value: 1.5},
    "seed_type": {SeedType.ORGANIC_SEEDS.value: 1.1},
}

# Practices assumed for a stored credit whose farmer never submitted farm inputs
DEFAULT_STORED_PRACTICES = {
    "fertilizer": Fertilizer.ORGANIC_MANURE.value,
    "irrigation": Irrigation.DRIP.value,
    "seed_type": SeedType.HIGH_YIELD_VARIETY.value,
    "soil_health": SoilHealth.GOOD.value,
}

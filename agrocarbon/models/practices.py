"""
Farmer practice input - the self-reported data a verification runs on.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# Immutable value objects that accept camelCase or snake_case keys
VALUE_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    str_strip_whitespace=True,
)


class CropType(str, Enum):
    """Crops with a known NDVI baseline."""
    RICE = "Rice"
    WHEAT = "Wheat"
    MAIZE = "Maize"
    SUGARCANE = "Sugarcane"
    COTTON = "Cotton"
    PULSES = "Pulses"
    AGROFORESTRY = "Agroforestry"
    ORGANIC_VEGETABLES = "Organic Vegetables"
    MILLETS = "Millets"
    SOYBEAN = "Soybean"


class Fertilizer(str, Enum):
    ORGANIC_MANURE = "Organic Manure"
    BIO_FERTILIZER = "Bio-fertilizer"
    COMPOST = "Compost"
    GREEN_MANURE = "Green Manure"
    REDUCED_CHEMICAL = "Reduced Chemical"


class Irrigation(str, Enum):
    DRIP = "Drip Irrigation"
    SPRINKLER = "Sprinkler"
    ALTERNATE_WETTING_DRYING = "Alternate Wetting/Drying"
    RAINWATER_HARVESTING = "Rainwater Harvesting"
    TRADITIONAL = "Traditional"


class SeedType(str, Enum):
    HIGH_YIELD_VARIETY = "High Yield Variety"
    DROUGHT_RESISTANT = "Drought Resistant"
    ORGANIC_SEEDS = "Organic Seeds"
    LOCAL_VARIETY = "Local Variety"
    HYBRID = "Hybrid"


class SoilHealth(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    NEEDS_IMPROVEMENT = "Needs Improvement"
    POOR = "Poor"


def is_known(value: str, choices: type[Enum]) -> bool:
    """Whether ``value`` is one of the enumeration's string values."""
    return value in {member.value for member in choices}


def as_choice(value: Any) -> str:
    """Unspecified (None) becomes an empty choice, anything else its text form."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class PracticeSet(BaseModel):
    """
    Farming practices reported by the farmer.

    Values are kept as plain strings: anything outside the known
    enumerations is scored through the fallback rules instead of
    being rejected.
    """

    model_config = VALUE_MODEL_CONFIG

    fertilizer: str = Field(default="", description="Fertilizer choice, e.g. 'Compost'")
    irrigation: str = Field(default="", description="Irrigation method, e.g. 'Drip Irrigation'")
    seed_type: str = Field(default="", description="Seed type, e.g. 'Organic Seeds'")
    soil_health: str = Field(default="", description="Soil-health rating, e.g. 'Good'")

    @field_validator("fertilizer", "irrigation", "seed_type", "soil_health", mode="before")
    @classmethod
    def convert_to_str(cls, v: Any) -> str:
        return as_choice(v)


class FarmerPractices(BaseModel):
    """Input to a single verification run."""

    model_config = VALUE_MODEL_CONFIG

    crop_type: str = Field(default="", description="Crop name, see CropType")
    land_area: Optional[float] = Field(default=None, description="Reported land area in acres")
    location: str = Field(default="", description="Free-text location, display only")
    practices: PracticeSet = Field(default_factory=PracticeSet)

    @field_validator("crop_type", "location", mode="before")
    @classmethod
    def convert_to_str(cls, v: Any) -> str:
        return as_choice(v)

    @field_validator("practices", mode="before")
    @classmethod
    def default_practices(cls, v: Any) -> Any:
        """A null practices block is scored like an empty one."""
        return PracticeSet() if v is None else v

"""Tests for the NDVI verification engine.

Baseline lookup, practice bonus, noise, verdict, confidence, health
classification and sequestration, with scripted randomness.
"""

import logging
import math
import random

import pytest
from pydantic import ValidationError

from agrocarbon.core.constants import CROP_NDVI_BASELINE, DEFAULT_CROP_TYPE
from agrocarbon.handlers.verification import (
    InvalidInputError,
    calculate_area_accuracy,
    calculate_confidence,
    calculate_practice_bonus,
    classify_health,
    resolve_baseline,
    round_half_up,
    sequestration_multiplier,
    verify,
)
from agrocarbon.models.practices import Fertilizer, FarmerPractices, PracticeSet, SoilHealth
from agrocarbon.models.verification import DataSource, HealthStatus

# ─── Helpers ──────────────────────────────────────────────────────────────────


def _practices(crop="Rice", area=5.0, **practice_overrides) -> FarmerPractices:
    """Build a FarmerPractices with low-bonus defaults (+0.04 total), override any practice."""
    defaults = dict(
        fertilizer="Reduced Chemical",
        irrigation="Traditional",
        seed_type="Local Variety",
        soil_health="Average",
    )
    defaults.update(practice_overrides)
    return FarmerPractices(
        crop_type=crop,
        land_area=area,
        location="Punjab",
        practices=PracticeSet(**defaults),
    )


BEST_PRACTICES = dict(
    fertilizer="Organic Manure",
    irrigation="Drip Irrigation",
    seed_type="Organic Seeds",
    soil_health="Excellent",
)


# ─── Lookup tables ────────────────────────────────────────────────────────────


class TestResolveBaseline:
    def test_known_crop(self):
        baseline, used_fallback = resolve_baseline("Sugarcane")
        assert baseline.baseline == 0.82
        assert baseline.variance == 0.10
        assert used_fallback is False

    def test_unknown_crop_uses_default(self):
        baseline, used_fallback = resolve_baseline("Quinoa")
        assert baseline == CROP_NDVI_BASELINE[DEFAULT_CROP_TYPE]
        assert used_fallback is True

    def test_lookup_is_case_sensitive(self):
        _, used_fallback = resolve_baseline("rice")
        assert used_fallback is True


class TestPracticeBonus:
    def test_best_practices(self):
        bonus = calculate_practice_bonus(PracticeSet(**BEST_PRACTICES))
        assert bonus == pytest.approx(0.22)

    def test_maximum_bonus(self):
        bonus = calculate_practice_bonus(PracticeSet(
            fertilizer="Organic Manure",
            irrigation="Rainwater Harvesting",
            seed_type="Drought Resistant",
            soil_health="Excellent",
        ))
        assert bonus == pytest.approx(0.24)

    def test_unknown_values_contribute_nothing_except_soil(self):
        bonus = calculate_practice_bonus(PracticeSet(
            fertilizer="Urea",
            irrigation="Flood",
            seed_type="Saved Seed",
            soil_health="Unknown",
        ))
        assert bonus == pytest.approx(-0.02)

    def test_empty_practices(self):
        assert calculate_practice_bonus(PracticeSet()) == pytest.approx(-0.02)

    @pytest.mark.parametrize("fertilizer,expected", [
        ("Organic Manure", 0.08),
        ("Compost", 0.07),
        ("Bio-fertilizer", 0.06),
        ("Green Manure", 0.05),
        ("Reduced Chemical", 0.02),
    ])
    def test_fertilizer_table(self, fertilizer, expected):
        bonus = calculate_practice_bonus(PracticeSet(fertilizer=fertilizer, soil_health="Average"))
        assert bonus == pytest.approx(expected + 0.02)

    def test_soil_health_is_monotonic(self):
        ordered = [
            SoilHealth.POOR,
            SoilHealth.NEEDS_IMPROVEMENT,
            SoilHealth.AVERAGE,
            SoilHealth.GOOD,
            SoilHealth.EXCELLENT,
        ]
        bonuses = [calculate_practice_bonus(PracticeSet(soil_health=s.value)) for s in ordered]
        assert bonuses == sorted(bonuses)
        assert bonuses[0] == bonuses[1] == pytest.approx(-0.02)


# ─── Thresholds ───────────────────────────────────────────────────────────────


class TestClassifyHealth:
    @pytest.mark.parametrize("ndvi,expected", [
        (0.95, HealthStatus.EXCELLENT),
        (0.80, HealthStatus.EXCELLENT),
        (0.7999, HealthStatus.GOOD),
        (0.65, HealthStatus.GOOD),
        (0.6499, HealthStatus.MODERATE),
        (0.45, HealthStatus.MODERATE),
        (0.4499, HealthStatus.POOR),
        (0.10, HealthStatus.POOR),
    ])
    def test_inclusive_lower_bounds(self, ndvi, expected):
        assert classify_health(ndvi) == expected


class TestSequestrationMultiplier:
    @pytest.mark.parametrize("ndvi,expected", [
        (0.75, 1.2),
        (0.7499, 1.0),
        (0.60, 1.0),
        (0.5999, 0.8),
    ])
    def test_bands(self, ndvi, expected):
        assert sequestration_multiplier(ndvi) == expected


class TestConfidence:
    def test_clamped_to_100(self):
        # 0.95 / 0.85 * 60 + 100 * 0.4 = 107
        assert calculate_confidence(0.95, 100.0) == 100

    def test_weighted_sum(self):
        # 0.5 / 0.85 * 60 = 35.29, 95 * 0.4 = 38
        assert calculate_confidence(0.5, 95.0) == 73

    def test_floor(self):
        assert calculate_confidence(0.10, 0.0) == 7

    def test_half_points_round_up(self):
        # 0.85 / 0.85 * 60 + 1.25 * 0.4 = 60.5
        assert calculate_confidence(0.85, 1.25) == 61


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [
        (0.5, 1),
        (2.5, 3),
        (72.5, 73),
        (72.49, 72),
        (-2.5, -2),
    ])
    def test_halves_go_up(self, value, expected):
        assert round_half_up(value) == expected


class TestAreaAccuracy:
    def test_exact_match(self):
        assert calculate_area_accuracy(10.0, 10.0) == 100.0

    def test_symmetric_deviation(self):
        assert calculate_area_accuracy(10.0, 10.5) == pytest.approx(95.0)
        assert calculate_area_accuracy(10.0, 9.5) == pytest.approx(95.0)

    def test_below_verdict_threshold(self):
        assert calculate_area_accuracy(10.0, 8.5) == pytest.approx(85.0)

    def test_clamped_at_zero(self):
        assert calculate_area_accuracy(10.0, 25.0) == 0.0


# ─── verify ───────────────────────────────────────────────────────────────────


class TestVerifyScenarios:
    def test_agroforestry_best_practices(self, scripted, clock):
        result = verify(_practices("Agroforestry", 10, **BEST_PRACTICES), rng=scripted(), clock=clock)

        # 0.85 + 0.22 clamps to 0.95
        assert result.ndvi_data.value == 0.95
        assert result.ndvi_data.change == pytest.approx(0.185)
        assert result.ndvi_data.health_score == 100
        assert result.vegetation_analysis.health_status == HealthStatus.EXCELLENT
        assert result.land_area_verification.accuracy == 100.0
        assert result.land_area_verification.satellite_detected_area == 10.0
        assert result.is_verified is True
        assert result.confidence == 100
        # 2.5 t/acre * 1.2 * 10 acres
        assert result.vegetation_analysis.sequestration_rate == pytest.approx(30.0)
        assert result.fallbacks == ()

    def test_rice_with_poor_soil(self, scripted, clock):
        result = verify(
            _practices("Rice", 5, fertilizer="Urea", soil_health="Poor"),
            rng=scripted(),
            clock=clock,
        )

        # 0.75 - 0.02
        assert result.ndvi_data.value == pytest.approx(0.73)
        assert result.vegetation_analysis.health_status == HealthStatus.GOOD
        assert result.is_verified is True
        assert result.confidence == 92
        assert result.vegetation_analysis.sequestration_rate == pytest.approx(6.0)
        assert result.fallbacks == ("fertilizer",)

    def test_low_ndvi_is_not_verified(self, scripted, clock):
        result = verify(
            _practices("Millets", 3, soil_health="Poor"),
            rng=scripted(noise=-0.05),
            clock=clock,
        )

        # 0.65 + 0.02 - 0.02 - 0.05
        assert result.ndvi_data.value == pytest.approx(0.60)
        assert result.vegetation_analysis.health_status == HealthStatus.MODERATE
        assert result.is_verified is False

    def test_ndvi_floor(self, scripted, clock):
        result = verify(_practices("Millets", 1, soil_health="Poor"), rng=scripted(noise=-0.05), clock=clock)
        assert result.ndvi_data.value >= 0.10

    def test_source_metadata(self, scripted, clock):
        result = verify(_practices(), rng=scripted(source_index=1, cloud_coverage=12.34), clock=clock)
        assert result.source == DataSource.LANDSAT_8
        assert result.image_resolution == 30.0
        assert result.cloud_coverage == 12.3

    def test_timestamps_come_from_clock(self, scripted, clock):
        result = verify(_practices(), rng=scripted(), clock=clock)
        assert result.verification_date == clock()
        assert result.ndvi_data.date == clock()

    def test_area_rounding(self, scripted, clock):
        result = verify(_practices(area=7.0), rng=scripted(area_factor=1.0333), clock=clock)
        assert result.land_area_verification.reported_area == 7.0
        assert result.land_area_verification.satellite_detected_area == 7.23
        assert result.land_area_verification.accuracy == 96.7


class TestVerifyFallbacks:
    def test_unknown_crop_matches_default_crop(self, scripted, clock):
        unknown = verify(_practices("Quinoa"), rng=scripted(noise=0.01), clock=clock)
        default = verify(_practices(DEFAULT_CROP_TYPE), rng=scripted(noise=0.01), clock=clock)

        assert unknown.ndvi_data == default.ndvi_data
        assert unknown.vegetation_analysis.health_status == default.vegetation_analysis.health_status
        assert unknown.is_verified == default.is_verified
        assert "crop_type" in unknown.fallbacks
        assert "crop_type" not in default.fallbacks

    def test_unknown_crop_uses_flat_sequestration_rate(self, scripted, clock):
        result = verify(_practices("Quinoa", area=5), rng=scripted(), clock=clock)
        # 0.75 + 0.04 = 0.79 → multiplier 1.2, flat 1.0 t/acre
        assert result.vegetation_analysis.sequestration_rate == pytest.approx(6.0)

    def test_all_fallbacks_listed(self, scripted, clock):
        practices = FarmerPractices(crop_type="Teff", land_area=2.0)
        result = verify(practices, rng=scripted(), clock=clock)
        assert result.fallbacks == ("crop_type", "fertilizer", "irrigation", "seed_type", "soil_health")

    def test_fallback_is_logged(self, scripted, clock, caplog):
        with caplog.at_level(logging.WARNING, logger="agrocarbon"):
            verify(_practices("Quinoa"), rng=scripted(), clock=clock)
        fields = [getattr(record, "field", None) for record in caplog.records]
        assert "crop_type" in fields


class TestVerifyInvalidInput:
    @pytest.mark.parametrize("area", [None, 0, -3.5, math.nan, math.inf])
    def test_rejects_bad_land_area(self, area, scripted):
        with pytest.raises(InvalidInputError):
            verify(_practices(area=area), rng=scripted())

    def test_is_a_value_error(self):
        assert issubclass(InvalidInputError, ValueError)


class TestVerifyProperties:
    CROPS = list(CROP_NDVI_BASELINE) + ["Quinoa", ""]
    FERTILIZERS = ["Organic Manure", "Compost", "Bio-fertilizer", "Green Manure", "Reduced Chemical", "Urea"]
    IRRIGATION = ["Rainwater Harvesting", "Drip Irrigation", "Alternate Wetting/Drying", "Sprinkler", "Traditional"]
    SEEDS = ["Drought Resistant", "Organic Seeds", "High Yield Variety", "Hybrid", ""]
    SOILS = [s.value for s in SoilHealth] + ["Unknown"]

    def _random_practices(self, picker: random.Random) -> FarmerPractices:
        return FarmerPractices(
            crop_type=picker.choice(self.CROPS),
            land_area=picker.uniform(0.1, 500),
            practices=PracticeSet(
                fertilizer=picker.choice(self.FERTILIZERS),
                irrigation=picker.choice(self.IRRIGATION),
                seed_type=picker.choice(self.SEEDS),
                soil_health=picker.choice(self.SOILS),
            ),
        )

    def test_invariants_hold_for_seeded_samples(self, clock):
        for seed in range(300):
            picker = random.Random(seed)
            result = verify(self._random_practices(picker), rng=random.Random(seed + 10_000), clock=clock)

            assert 0.10 <= result.ndvi_data.value <= 0.95
            assert 0 <= result.confidence <= 100
            assert 0 <= result.land_area_verification.accuracy <= 100
            assert 0 <= result.cloud_coverage <= 15
            assert 0 <= result.ndvi_data.health_score <= 100

            healthy = result.vegetation_analysis.health_status in (HealthStatus.GOOD, HealthStatus.EXCELLENT)
            area_ok = result.land_area_verification.accuracy >= 90
            assert result.is_verified == (healthy and area_ok)

    def test_better_soil_never_lowers_ndvi(self, scripted, clock):
        for crop in CROP_NDVI_BASELINE:
            for noise in (-0.05, 0.0, 0.05):
                poor = verify(_practices(crop, soil_health="Poor"), rng=scripted(noise=noise), clock=clock)
                excellent = verify(_practices(crop, soil_health="Excellent"), rng=scripted(noise=noise), clock=clock)
                assert excellent.ndvi_data.value >= poor.ndvi_data.value

    def test_same_seed_same_result(self, clock):
        practices = _practices("Cotton", 12.5, **BEST_PRACTICES)
        first = verify(practices, rng=random.Random(42), clock=clock)
        second = verify(practices, rng=random.Random(42), clock=clock)
        assert first == second


class TestVerificationResultModel:
    def test_result_is_frozen(self, scripted, clock):
        result = verify(_practices(), rng=scripted(), clock=clock)
        with pytest.raises(ValidationError):
            result.confidence = 5

    def test_serializes_to_camel_case(self, scripted, clock):
        result = verify(_practices("Agroforestry", 10, **BEST_PRACTICES), rng=scripted(), clock=clock)
        data = result.model_dump(mode="json", by_alias=True)

        assert data["isVerified"] is True
        assert data["ndviData"]["healthScore"] == 100
        assert data["landAreaVerification"]["satelliteDetectedArea"] == 10.0
        assert data["vegetationAnalysis"]["healthStatus"] == "Excellent"
        assert data["source"] == "Sentinel-2 ESA"
        assert data["fallbacks"] == []

    def test_practices_accept_camel_case(self):
        practices = FarmerPractices.model_validate({
            "cropType": "Wheat",
            "landArea": 4,
            "location": "Haryana",
            "practices": {"fertilizer": "Compost", "seedType": "Hybrid", "soilHealth": " Good "},
        })
        assert practices.crop_type == "Wheat"
        assert practices.practices.seed_type == "Hybrid"
        assert practices.practices.soil_health == "Good"


class TestUnspecifiedValues:
    def test_null_soil_health_is_penalised(self, scripted, clock):
        practices = FarmerPractices.model_validate({
            "cropType": "Rice",
            "landArea": 5,
            "practices": {"soilHealth": None},
        })
        result = verify(practices, rng=scripted(), clock=clock)

        assert practices.practices.soil_health == ""
        # 0.75 - 0.02
        assert result.ndvi_data.value == pytest.approx(0.73)
        assert result.fallbacks == ("fertilizer", "irrigation", "seed_type", "soil_health")

    def test_null_and_numeric_values_fall_back(self, scripted, clock):
        practices = FarmerPractices.model_validate({
            "cropType": None,
            "landArea": 5,
            "practices": {"fertilizer": None, "seedType": 3, "irrigation": "Drip Irrigation"},
        })
        result = verify(practices, rng=scripted(), clock=clock)

        assert practices.crop_type == ""
        assert practices.practices.seed_type == "3"
        # default crop baseline 0.75 + drip 0.05 - 0.02 soil
        assert result.ndvi_data.value == pytest.approx(0.78)
        assert result.fallbacks == ("crop_type", "fertilizer", "seed_type", "soil_health")

    def test_numeric_crop_uses_default_crop(self, scripted, clock):
        numeric = verify(
            FarmerPractices.model_validate({"cropType": 42, "landArea": 5}),
            rng=scripted(),
            clock=clock,
        )
        default = verify(FarmerPractices(crop_type=DEFAULT_CROP_TYPE, land_area=5), rng=scripted(), clock=clock)

        assert numeric.vegetation_analysis.crop_type == "42"
        assert numeric.ndvi_data == default.ndvi_data
        assert "crop_type" in numeric.fallbacks

    def test_null_practices_block(self):
        practices = FarmerPractices.model_validate({"cropType": "Wheat", "landArea": 2, "practices": None})
        assert practices.practices == PracticeSet()

    def test_enum_members_are_stored_by_value(self):
        assert PracticeSet(fertilizer=Fertilizer.COMPOST).fertilizer == "Compost"

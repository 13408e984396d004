"""Tests for derived measurements and business-rule validation."""

from __future__ import annotations

import pytest

from facade_estimator.facade_engine.aggregator import aggregate
from facade_estimator.facade_engine.measurements import (
    derive_measurements,
    glass_ratio_pct,
    net_facade_area,
)
from facade_estimator.facade_engine.rules import EngineRules
from facade_estimator.facade_engine.validator import validate
from facade_estimator.models import BuildingType, FacadeProfile

EXCESSIVE = "Glass area exceeds 90% of facade - requires manual verification"
HIGH = "High glass percentage detected - verify curtain wall system"
LOW = "Low glass percentage - verify window detection accuracy"


class TestMeasurements:
    """Test derived metrics."""

    def test_net_area_not_clamped(self):
        assert net_facade_area(1000, 1200) == -200

    @pytest.mark.parametrize(
        "total, glass, expected",
        [
            (10000, 4000, 40),
            (10000, 0, 0),
            (0, 0, 0),
            (0, 500, 0),  # degenerate facade yields 0, not an error
            (200, 50, 25),
        ],
    )
    def test_glass_ratio(self, total, glass, expected):
        assert glass_ratio_pct(total, glass) == pytest.approx(expected)

    def test_derive_ignores_stale_fields(self):
        """Derivation reads totals only, so stale derived values are replaced."""
        profile = FacadeProfile(
            total_facade_sqft=10000,
            total_glass_sqft=4000,
            net_facade_sqft=1,
            glass_to_facade_ratio_pct=99,
        )
        m = derive_measurements(profile)
        assert m.net_facade_sqft == 6000
        assert m.glass_to_facade_ratio_pct == pytest.approx(40)


class TestValidate:
    """Test validation severities."""

    def test_typical_profile_passes_cleanly(self, make_profile):
        result = validate(make_profile(total_facade_sqft=10000, total_glass_sqft=4000))
        assert result.measurements.net_facade_sqft == 6000
        assert result.measurements.glass_to_facade_ratio_pct == pytest.approx(40)
        assert result.validation.passed is True
        assert result.validation.warnings == ()
        assert result.validation.errors == ()

    def test_excessive_glass_is_error(self, make_profile):
        result = validate(make_profile(total_facade_sqft=10000, total_glass_sqft=9500))
        assert result.measurements.glass_to_facade_ratio_pct == pytest.approx(95)
        assert result.validation.passed is False
        assert EXCESSIVE in result.validation.errors
        assert HIGH not in result.validation.warnings

    def test_high_glass_is_warning(self, make_profile):
        result = validate(make_profile(total_facade_sqft=10000, total_glass_sqft=8500))
        assert result.measurements.glass_to_facade_ratio_pct == pytest.approx(85)
        assert result.validation.passed is True
        assert HIGH in result.validation.warnings
        assert result.validation.errors == ()

    def test_exactly_ninety_is_warning_not_error(self, make_profile):
        result = validate(make_profile(total_facade_sqft=100, total_glass_sqft=90))
        assert result.validation.passed is True
        assert HIGH in result.validation.warnings

    def test_exactly_eighty_is_clean(self, make_profile):
        result = validate(make_profile(total_facade_sqft=10000, total_glass_sqft=8000))
        assert result.validation.warnings == ()

    def test_glass_larger_than_facade_fails(self, make_profile):
        result = validate(make_profile(total_facade_sqft=1000, total_glass_sqft=1200))
        assert result.measurements.net_facade_sqft == -200
        assert result.validation.passed is False

    def test_height_mismatch_warning(self, make_profile):
        profile = make_profile(building_height_stories=10, building_height_feet=200)
        result = validate(profile)
        assert result.validation.passed is True
        mismatch = [w for w in result.validation.warnings if "Height mismatch" in w]
        assert len(mismatch) == 1
        assert "20.0 ft/story" in mismatch[0]
        assert "120" in mismatch[0]

    @pytest.mark.parametrize(
        "stories, feet",
        [
            (10, 120),   # nominal
            (10, 150),   # upper edge of the band
            (10, 90),    # lower edge of the band
            (0, 200),    # stories unknown
            (10, 0),     # feet unknown
            (0, 0),
        ],
    )
    def test_height_within_band_or_missing(self, make_profile, stories, feet):
        profile = make_profile(building_height_stories=stories, building_height_feet=feet)
        result = validate(profile)
        assert not any("Height mismatch" in w for w in result.validation.warnings)

    def test_short_stories_flagged(self, make_profile):
        result = validate(make_profile(building_height_stories=10, building_height_feet=60))
        assert any("Height mismatch" in w for w in result.validation.warnings)

    def test_mismatch_message_uses_plain_numbers(self, make_profile):
        result = validate(make_profile(building_height_stories=100000, building_height_feet=100))
        mismatch = [w for w in result.validation.warnings if "Height mismatch" in w]
        assert "1,200,000±300,000 feet" in mismatch[0]
        assert "e+" not in mismatch[0]

    def test_rules_accumulate(self, make_profile):
        """Every rule runs even after an error."""
        profile = make_profile(
            total_facade_sqft=10000,
            total_glass_sqft=9500,
            building_height_stories=10,
            building_height_feet=200,
        )
        result = validate(profile)
        assert result.validation.passed is False
        assert EXCESSIVE in result.validation.errors
        assert any("Height mismatch" in w for w in result.validation.warnings)

    def test_low_glass_warning(self, make_profile):
        result = validate(make_profile(total_glass_sqft=500))
        assert LOW in result.validation.warnings
        assert result.validation.passed is True

    def test_low_glass_ignored_for_industrial(self, make_profile):
        result = validate(make_profile(total_glass_sqft=500, building_type=BuildingType.INDUSTRIAL))
        assert LOW not in result.validation.warnings

    def test_empty_facade_has_no_findings(self, make_profile):
        result = validate(make_profile(total_facade_sqft=0, total_glass_sqft=0))
        assert result.measurements.glass_to_facade_ratio_pct == 0
        assert result.validation.passed is True
        assert result.validation.warnings == ()

    @pytest.mark.parametrize(
        "glass, confidence, expected",
        [
            (4000, 90, False),
            (4000, 70, False),
            (4000, 69, True),
            (9500, 95, True),  # failed validation
        ],
    )
    def test_field_verification(self, make_profile, glass, confidence, expected):
        result = validate(make_profile(total_glass_sqft=glass, confidence_level=confidence))
        assert result.validation.requires_field_verification is expected

    def test_idempotent(self, two_brick_views):
        profile = aggregate(two_brick_views)
        first = validate(profile)
        second = validate(profile)
        assert first == second
        # Re-validating a profile rebuilt from the derived fields changes nothing
        rebuilt = profile.model_copy(update=first.measurements.model_dump())
        assert validate(rebuilt) == first

    def test_custom_thresholds(self, make_profile):
        rules = EngineRules(glass_error_ratio_pct=85, glass_warning_ratio_pct=75)
        result = validate(make_profile(total_glass_sqft=8000), rules)
        assert result.validation.passed is True
        assert HIGH in result.validation.warnings

        result = validate(make_profile(total_glass_sqft=8600), rules)
        assert result.validation.errors == (
            "Glass area exceeds 85% of facade - requires manual verification",
        )

    def test_invalid_rules_rejected(self):
        with pytest.raises(ValueError):
            EngineRules(glass_warning_ratio_pct=95, glass_error_ratio_pct=90)


class TestSeverityOrdering:
    """Errors and warnings across the ratio range."""

    @pytest.mark.parametrize("glass", range(0, 10001, 250))
    def test_ratio_bands(self, make_profile, glass):
        result = validate(make_profile(total_facade_sqft=10000, total_glass_sqft=glass))
        ratio = result.measurements.glass_to_facade_ratio_pct
        assert ratio >= 0
        if ratio > 90:
            assert result.validation.passed is False
            assert result.validation.errors
        elif ratio > 80:
            assert result.validation.passed is True
            assert result.validation.warnings
        else:
            assert result.validation.passed is True

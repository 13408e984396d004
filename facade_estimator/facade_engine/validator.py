"""Measurement & validation engine.

Every rule runs on every profile; findings accumulate. Errors block
``passed``, warnings never do.
"""

from __future__ import annotations

from facade_estimator.facade_engine.measurements import derive_measurements
from facade_estimator.facade_engine.rules import DEFAULT_RULES, EngineRules
from facade_estimator.models import (
    BuildingType,
    FacadeMeasurements,
    FacadeProfile,
    ValidationOutcome,
    ValidationResult,
)

EXCESSIVE_GLASS_ERROR = "Glass area exceeds {limit:g}% of facade - requires manual verification"
HIGH_GLASS_WARNING = "High glass percentage detected - verify curtain wall system"
LOW_GLASS_WARNING = "Low glass percentage - verify window detection accuracy"


def validate(profile: FacadeProfile, rules: EngineRules = DEFAULT_RULES) -> ValidationResult:
    """Derive the secondary metrics of *profile* and check business rules."""
    measurements = derive_measurements(profile)
    warnings: list[str] = []
    errors: list[str] = []

    _check_glass_ratio(measurements, profile.building_type, rules, warnings, errors)
    _check_height(profile, rules, warnings)

    passed = not errors
    return ValidationResult(
        measurements=measurements,
        validation=ValidationOutcome(
            passed=passed,
            warnings=tuple(warnings),
            errors=tuple(errors),
            requires_field_verification=(
                not passed or profile.confidence_level < rules.field_verification_confidence
            ),
        ),
    )


def _check_glass_ratio(
    m: FacadeMeasurements,
    building_type: BuildingType,
    rules: EngineRules,
    warnings: list[str],
    errors: list[str],
) -> None:
    ratio = m.glass_to_facade_ratio_pct
    if ratio > rules.glass_error_ratio_pct:
        errors.append(EXCESSIVE_GLASS_ERROR.format(limit=rules.glass_error_ratio_pct))
    elif ratio > rules.glass_warning_ratio_pct:
        warnings.append(HIGH_GLASS_WARNING)

    # Industrial buildings are legitimately low-glass
    if (
        m.total_facade_sqft > 0
        and ratio < rules.low_glass_warning_ratio_pct
        and building_type != BuildingType.INDUSTRIAL
    ):
        warnings.append(LOW_GLASS_WARNING)


def _check_height(profile: FacadeProfile, rules: EngineRules, warnings: list[str]) -> None:
    """Flag a story count and height that disagree.

    Skipped unless both values were detected.
    """
    stories = profile.building_height_stories
    feet = profile.building_height_feet
    if stories <= 0 or feet <= 0:
        return

    per_story = feet / stories
    if rules.min_story_height_ft <= per_story <= rules.max_story_height_ft:
        return

    expected = stories * rules.nominal_story_height_ft
    spread = expected * rules.story_height_tolerance
    warnings.append(
        f"Height mismatch: {feet:g} ft over {stories} stories is {per_story:.1f} ft/story; "
        f"{stories} stories typically = {expected:,.0f}±{spread:,.0f} feet "
        f"({rules.min_story_height_ft:g}-{rules.max_story_height_ft:g} ft/story)"
    )

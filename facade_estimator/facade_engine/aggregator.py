"""
Aggregation engine: combine per-photograph detections into one FacadeProfile.

Each photograph contributes its facade and glass areas independently; the
caller is responsible for choosing non-overlapping vantage points, so areas
are summed without deduplication. Every photograph estimates the height of
the same building, so heights take the maximum rather than a sum.

All folds (fsum, max, decimal mean) are order-independent: any permutation of
the input yields an identical profile.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from decimal import Decimal

from facade_estimator.facade_engine.complexity import classify
from facade_estimator.facade_engine.errors import EmptyInputError
from facade_estimator.facade_engine.materials import merge_materials
from facade_estimator.facade_engine.measurements import (
    glass_ratio_pct,
    net_facade_area,
    round_half_up,
)
from facade_estimator.facade_engine.rules import DEFAULT_RULES, EngineRules
from facade_estimator.models import BuildingContext, FacadeProfile, ImageDetection


def aggregate(
    images: Sequence[ImageDetection],
    context: BuildingContext | None = None,
    rules: EngineRules = DEFAULT_RULES,
) -> FacadeProfile:
    """Build the building-level profile from every photograph's detection.

    Args:
        images: One detection per photograph, at least one.
        context: Building facts copied onto the profile unchanged.
        rules: Thresholds used for the complexity tier.

    Raises:
        EmptyInputError: If *images* is empty.
    """
    if not images:
        raise EmptyInputError()
    context = context or BuildingContext()

    total_facade = math.fsum(img.facade_area_sqft for img in images)
    total_glass = math.fsum(img.glass_area_sqft for img in images)

    materials = merge_materials(
        (m for img in images for m in img.materials),
        total_facade,
    )

    profile = FacadeProfile(
        total_facade_sqft=total_facade,
        total_glass_sqft=total_glass,
        net_facade_sqft=net_facade_area(total_facade, total_glass),
        glass_to_facade_ratio_pct=glass_ratio_pct(total_facade, total_glass),
        building_height_stories=max(img.height_estimate.stories for img in images),
        building_height_feet=max(img.height_estimate.feet for img in images),
        materials=tuple(materials),
        confidence_level=confidence_level(images),
        has_covered_areas=any(img.covered_areas_detected for img in images),
        windows_detected=sum(img.windows_detected for img in images),
        image_count=len(images),
        building_type=context.building_type,
        building_address=context.building_address,
        is_historic_building=context.is_historic_building,
    )
    return profile.model_copy(update={"facade_complexity": classify(profile, rules)})


def confidence_level(images: Sequence[ImageDetection]) -> int:
    """Mean height-estimate confidence as a 0-100 integer, rounded half up.

    Computed in decimal so that e.g. 0.90 and 0.95 give 93, not 92.
    """
    if not images:
        raise EmptyInputError()
    total = sum(Decimal(str(img.height_estimate.confidence)) for img in images)
    mean_pct = total / len(images) * 100
    return round_half_up(mean_pct)

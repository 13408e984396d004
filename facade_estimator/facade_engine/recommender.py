"""
Recommendation engine: services and access equipment for a validated profile.

Service rules run in a fixed order and each may append one recommendation.
New rules go at the end of ``SERVICE_RULES`` so the output of earlier,
higher-priority rules keeps its position.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Optional

from facade_estimator.facade_engine.measurements import round_half_up
from facade_estimator.facade_engine.rules import DEFAULT_RULES, EngineRules
from facade_estimator.models import (
    EquipmentRequirement,
    FacadeComplexity,
    FacadeProfile,
    MaterialType,
    RecommendationBundle,
    ServiceRecommendation,
)

ServiceRule = Callable[[FacadeProfile, EngineRules], Optional[ServiceRecommendation]]


def recommend(profile: FacadeProfile, rules: EngineRules = DEFAULT_RULES) -> RecommendationBundle:
    """Derive recommended services and equipment from *profile*."""
    services = []
    for rule in SERVICE_RULES:
        rec = rule(profile, rules)
        if rec is not None:
            services.append(rec)

    return RecommendationBundle(
        recommended_services=tuple(services),
        equipment_requirements=(equipment_for(profile, rules),),
    )


def equipment_for(profile: FacadeProfile, rules: EngineRules = DEFAULT_RULES) -> EquipmentRequirement:
    """Pick access equipment from the story count and size the rental.

    Days grow with facade area and with each story above the band's floor.
    """
    stories = profile.building_height_stories
    band = rules.equipment_band(stories)
    story_scale = 1 + rules.story_duration_factor * max(0, stories - band.min_stories)
    days = math.ceil(profile.total_facade_sqft / band.sqft_per_day * story_scale)
    return EquipmentRequirement(
        type=band.equipment_type,
        reason=band.reason,
        duration_days=max(1, days),
    )


# --- service rules ---

def _window_cleaning(profile: FacadeProfile, rules: EngineRules) -> Optional[ServiceRecommendation]:
    glass = profile.total_glass_sqft
    if glass <= 0:
        return None
    reason = f"{glass:,.0f} sq ft of glass detected"
    if profile.windows_detected:
        reason += f" across {profile.windows_detected} windows"
    return ServiceRecommendation(
        service="window_cleaning",
        reason=reason,
        estimated_sqft=glass,
        confidence=profile.confidence_level,
    )


def _pressure_washing(profile: FacadeProfile, rules: EngineRules) -> Optional[ServiceRecommendation]:
    net = profile.net_facade_sqft
    if net <= 0:
        return None
    confidence = profile.confidence_level
    finish = "regular"
    # Ornate facades hide surface area from a photograph
    if profile.facade_complexity == FacadeComplexity.COMPLEX:
        finish = "ornate"
        confidence = max(0, confidence - rules.complex_facade_confidence_penalty)
    return ServiceRecommendation(
        service="pressure_washing",
        reason=f"{net:,.0f} sq ft of {finish} non-glass facade surfaces require cleaning",
        estimated_sqft=net,
        confidence=confidence,
    )


def _soft_washing(profile: FacadeProfile, rules: EngineRules) -> Optional[ServiceRecommendation]:
    if not profile.is_historic_building or profile.net_facade_sqft <= 0:
        return None
    return ServiceRecommendation(
        service="soft_washing",
        reason="Historic designation requires low-pressure cleaning of original surfaces",
        estimated_sqft=profile.net_facade_sqft,
        confidence=profile.confidence_level,
    )


def _granite_reconditioning(profile: FacadeProfile, rules: EngineRules) -> Optional[ServiceRecommendation]:
    stone = profile.material(MaterialType.STONE)
    if stone is None or stone.sqft <= 0:
        return None
    return ServiceRecommendation(
        service="granite_reconditioning",
        reason=f"{stone.sqft:,.0f} sq ft of stone cladding detected",
        estimated_sqft=stone.sqft,
        confidence=min(profile.confidence_level, round_half_up(stone.confidence)),
    )


def _high_dusting(profile: FacadeProfile, rules: EngineRules) -> Optional[ServiceRecommendation]:
    if not profile.has_covered_areas:
        return None
    return ServiceRecommendation(
        service="high_dusting",
        reason="Covered walkways or overhangs detected",
        estimated_sqft=0.0,
        confidence=profile.confidence_level,
    )


SERVICE_RULES: tuple[ServiceRule, ...] = (
    _window_cleaning,
    _pressure_washing,
    _soft_washing,
    _granite_reconditioning,
    _high_dusting,
)

"""Facade complexity tiers."""

from __future__ import annotations

from facade_estimator.facade_engine.rules import DEFAULT_RULES, EngineRules
from facade_estimator.models import FacadeComplexity, FacadeProfile


def classify(profile: FacadeProfile, rules: EngineRules = DEFAULT_RULES) -> FacadeComplexity:
    """Assign a complexity tier from glass share and material diversity.

    High-glass facades (curtain walls) are complex whatever their materials,
    so the glass check runs before the material count.
    """
    if profile.glass_to_facade_ratio_pct >= rules.complex_glass_ratio_pct:
        return FacadeComplexity.COMPLEX
    if len(profile.materials) >= rules.moderate_material_count:
        return FacadeComplexity.MODERATE
    return FacadeComplexity.SIMPLE

"""
Business thresholds for the facade engine.

Glass-ratio limits, the height plausibility band and the equipment table are
values the estimating team tunes, so they live in one named structure that
every engine function accepts instead of being scattered through the control
flow. Defaults reproduce the thresholds the estimators have used in the field.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EquipmentBand(BaseModel):
    """One row of the access-equipment table.

    ``min_stories`` is inclusive, ``max_stories`` exclusive (``None`` = no
    upper bound).
    """
    model_config = ConfigDict(frozen=True)

    min_stories: int = Field(ge=0)
    max_stories: Optional[int] = None
    equipment_type: str
    reason: str
    sqft_per_day: float = Field(gt=0, description="Facade area serviced per day from this equipment")

    def contains(self, stories: int) -> bool:
        if stories < self.min_stories:
            return False
        return self.max_stories is None or stories < self.max_stories


# ---------------------------------------------------------------------------
# Access equipment by building height (ascending, first match wins)
# ---------------------------------------------------------------------------
DEFAULT_EQUIPMENT_BANDS: tuple[EquipmentBand, ...] = (
    EquipmentBand(
        min_stories=0, max_stories=5,
        equipment_type="26_scissor_lift",
        reason="Building height ≤4 stories",
        sqft_per_day=5000,
    ),
    EquipmentBand(
        min_stories=5, max_stories=7,
        equipment_type="45_boom_lift",
        reason="Building height 5-6 stories",
        sqft_per_day=4000,
    ),
    EquipmentBand(
        min_stories=7, max_stories=13,
        equipment_type="swing_stage",
        reason="Building height 7-12 stories",
        sqft_per_day=3000,
    ),
    EquipmentBand(
        min_stories=13, max_stories=None,
        equipment_type="rope_access",
        reason="Building height over 12 stories",
        sqft_per_day=2000,
    ),
)


class EngineRules(BaseModel):
    """Tunable thresholds for validation, classification and recommendations."""
    model_config = ConfigDict(frozen=True)

    # Validation: glass share of the facade (%)
    glass_error_ratio_pct: float = 90.0
    glass_warning_ratio_pct: float = 80.0
    low_glass_warning_ratio_pct: float = 10.0

    # Validation: implied feet per story
    nominal_story_height_ft: float = Field(default=12.0, gt=0)
    story_height_tolerance: float = Field(default=0.25, ge=0, lt=1)

    # Below this confidence the estimate needs a site visit
    field_verification_confidence: int = Field(default=70, ge=0, le=100)

    # Complexity classification
    complex_glass_ratio_pct: float = 70.0
    moderate_material_count: int = Field(default=2, ge=1)

    # Recommendations
    complex_facade_confidence_penalty: int = Field(default=10, ge=0, le=100)
    story_duration_factor: float = Field(default=0.05, ge=0)
    equipment_bands: tuple[EquipmentBand, ...] = DEFAULT_EQUIPMENT_BANDS

    @model_validator(mode="after")
    def _check_thresholds(self) -> "EngineRules":
        if self.glass_warning_ratio_pct > self.glass_error_ratio_pct:
            raise ValueError("glass_warning_ratio_pct must not exceed glass_error_ratio_pct")
        if not self.equipment_bands:
            raise ValueError("equipment_bands must not be empty")
        if self.equipment_bands[0].min_stories != 0:
            raise ValueError("equipment_bands must start at 0 stories")
        previous = None
        for band in self.equipment_bands:
            if previous is not None and band.min_stories < previous.min_stories:
                raise ValueError("equipment_bands must be sorted by min_stories")
            previous = band
        return self

    @property
    def min_story_height_ft(self) -> float:
        return self.nominal_story_height_ft * (1 - self.story_height_tolerance)

    @property
    def max_story_height_ft(self) -> float:
        return self.nominal_story_height_ft * (1 + self.story_height_tolerance)

    def equipment_band(self, stories: int) -> EquipmentBand:
        """Return the first band containing *stories* (last band as fallback)."""
        for band in self.equipment_bands:
            if band.contains(stories):
                return band
        return self.equipment_bands[-1]


DEFAULT_RULES = EngineRules()

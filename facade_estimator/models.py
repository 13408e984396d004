"""Shared Pydantic data models for the facade analysis engine."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Enums ---

class BuildingType(str, Enum):
    """Building use classification supplied by the caller."""
    COMMERCIAL = "commercial"
    RESIDENTIAL = "residential"
    INDUSTRIAL = "industrial"


class MaterialType(str, Enum):
    """Facade material categories reported by the vision analysis."""
    BRICK = "brick"
    METAL = "metal"
    GLASS = "glass"
    STONE = "stone"
    STUCCO = "stucco"
    CONCRETE = "concrete"
    WOOD = "wood"
    OTHER = "other"


class FacadeComplexity(str, Enum):
    """Coarse tier used to scope labour and equipment."""
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


# --- Per-photograph detections (vision boundary) ---

class MaterialDetection(BaseModel):
    """One material found in a single photograph."""
    model_config = ConfigDict(frozen=True)

    type: MaterialType
    sqft: float = Field(ge=0, default=0.0)
    percentage: float = Field(ge=0, le=100, default=0.0, description="Share of the source image's facade")
    confidence: float = Field(ge=0, le=100, default=0.0)


class HeightEstimate(BaseModel):
    """Height of the whole building as seen from one vantage point."""
    model_config = ConfigDict(frozen=True)

    stories: int = Field(ge=0, default=0)
    feet: float = Field(ge=0, default=0.0)
    confidence: float = Field(ge=0, le=1, default=0.0)


class ImageDetection(BaseModel):
    """Raw measurements for one photograph.

    ``glass_area_sqft`` may exceed ``facade_area_sqft`` when the upstream
    detection is inconsistent; the engine tolerates it and flags it during
    validation.
    """
    model_config = ConfigDict(frozen=True)

    windows_detected: int = Field(ge=0, default=0)
    facade_area_sqft: float = Field(ge=0, default=0.0)
    glass_area_sqft: float = Field(ge=0, default=0.0)
    materials: tuple[MaterialDetection, ...] = ()
    height_estimate: HeightEstimate = Field(default_factory=HeightEstimate)
    covered_areas_detected: bool = False
    processing_time_ms: int = Field(ge=0, default=0)  # diagnostic only


class BuildingContext(BaseModel):
    """Caller-supplied building facts carried through to the profile."""
    model_config = ConfigDict(frozen=True)

    building_type: BuildingType = BuildingType.COMMERCIAL
    building_address: str = ""
    is_historic_building: bool = False


# --- Aggregated building profile ---

class MergedMaterial(BaseModel):
    """One material type merged across all photographs."""
    model_config = ConfigDict(frozen=True)

    type: MaterialType
    sqft: float
    percentage: float  # of total facade sqft
    confidence: float  # mean of contributing detections


class FacadeProfile(BaseModel):
    """Building-level facade measurements combined from every photograph."""
    model_config = ConfigDict(frozen=True)

    total_facade_sqft: float = Field(ge=0, default=0.0)
    total_glass_sqft: float = Field(ge=0, default=0.0)
    net_facade_sqft: float = 0.0                 # total - glass, not clamped
    glass_to_facade_ratio_pct: float = Field(ge=0, default=0.0)
    building_height_stories: int = Field(ge=0, default=0)
    building_height_feet: float = Field(ge=0, default=0.0)
    materials: tuple[MergedMaterial, ...] = ()
    confidence_level: int = Field(ge=0, le=100, default=0)
    facade_complexity: FacadeComplexity = FacadeComplexity.SIMPLE
    has_covered_areas: bool = False
    windows_detected: int = Field(ge=0, default=0)
    image_count: int = Field(ge=0, default=0)

    # Building context, copied unchanged
    building_type: BuildingType = BuildingType.COMMERCIAL
    building_address: str = ""
    is_historic_building: bool = False

    def material(self, material_type: MaterialType) -> Optional[MergedMaterial]:
        """Return the merged entry for *material_type*, if detected."""
        for m in self.materials:
            if m.type == material_type:
                return m
        return None


# --- Validation ---

class FacadeMeasurements(BaseModel):
    """Primary and derived facade areas."""
    model_config = ConfigDict(frozen=True)

    total_facade_sqft: float
    total_glass_sqft: float
    net_facade_sqft: float
    glass_to_facade_ratio_pct: float


class ValidationOutcome(BaseModel):
    """Business-rule check results. Only errors block ``passed``."""
    model_config = ConfigDict(frozen=True)

    passed: bool
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    requires_field_verification: bool = False


class ValidationResult(BaseModel):
    """Derived measurements plus the validation outcome."""
    model_config = ConfigDict(frozen=True)

    measurements: FacadeMeasurements
    validation: ValidationOutcome


# --- Recommendations ---

class ServiceRecommendation(BaseModel):
    """A service the estimator should quote."""
    model_config = ConfigDict(frozen=True)

    service: str
    reason: str
    estimated_sqft: float
    confidence: int = Field(ge=0, le=100)


class EquipmentRequirement(BaseModel):
    """Access equipment needed to reach the facade."""
    model_config = ConfigDict(frozen=True)

    type: str
    reason: str
    duration_days: int = Field(ge=1)


class RecommendationBundle(BaseModel):
    """Services and equipment derived from a validated profile."""
    model_config = ConfigDict(frozen=True)

    recommended_services: tuple[ServiceRecommendation, ...] = ()
    equipment_requirements: tuple[EquipmentRequirement, ...] = ()


# --- Orchestration ---

class PipelineResult(BaseModel):
    """Complete pipeline output."""
    context: BuildingContext
    photos: list[str] = Field(default_factory=list)
    detections: list[ImageDetection] = Field(default_factory=list)
    profile: Optional[FacadeProfile] = None
    validation: Optional[ValidationResult] = None
    recommendations: Optional[RecommendationBundle] = None
    errors: list[str] = Field(default_factory=list)

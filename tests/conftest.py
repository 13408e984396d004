"""Shared fixtures for tests."""

from __future__ import annotations

import pytest

from facade_estimator.facade_engine.measurements import glass_ratio_pct, net_facade_area
from facade_estimator.models import (
    BuildingContext,
    BuildingType,
    FacadeProfile,
    HeightEstimate,
    ImageDetection,
    MaterialDetection,
    MaterialType,
)


@pytest.fixture
def office_context() -> BuildingContext:
    """A commercial office building."""
    return BuildingContext(
        building_type=BuildingType.COMMERCIAL,
        building_address="100 Main St, Springfield",
        is_historic_building=False,
    )


@pytest.fixture
def two_brick_views() -> list[ImageDetection]:
    """Two vantage points of a brick and metal building (40% glass)."""
    return [
        ImageDetection(
            windows_detected=40,
            facade_area_sqft=5000,
            glass_area_sqft=2000,
            materials=(
                MaterialDetection(type=MaterialType.BRICK, sqft=3600, percentage=60, confidence=90),
            ),
            height_estimate=HeightEstimate(stories=4, feet=48, confidence=0.90),
            processing_time_ms=1200,
        ),
        ImageDetection(
            windows_detected=36,
            facade_area_sqft=5000,
            glass_area_sqft=2000,
            materials=(
                MaterialDetection(type=MaterialType.BRICK, sqft=2500, percentage=50, confidence=80),
                MaterialDetection(type=MaterialType.METAL, sqft=1500, percentage=30, confidence=70),
            ),
            height_estimate=HeightEstimate(stories=5, feet=55, confidence=0.95),
            covered_areas_detected=True,
            processing_time_ms=900,
        ),
    ]


@pytest.fixture
def curtain_wall_view() -> ImageDetection:
    """A single view of a glass curtain-wall tower (80% glass)."""
    return ImageDetection(
        windows_detected=120,
        facade_area_sqft=10000,
        glass_area_sqft=8000,
        materials=(
            MaterialDetection(type=MaterialType.GLASS, sqft=8000, percentage=80, confidence=95),
            MaterialDetection(type=MaterialType.METAL, sqft=2000, percentage=20, confidence=85),
        ),
        height_estimate=HeightEstimate(stories=10, feet=130, confidence=0.85),
    )


@pytest.fixture
def make_profile():
    """Build a FacadeProfile with consistent derived fields."""

    def _make(total_facade_sqft: float = 10000, total_glass_sqft: float = 4000, **overrides) -> FacadeProfile:
        fields = dict(
            total_facade_sqft=total_facade_sqft,
            total_glass_sqft=total_glass_sqft,
            net_facade_sqft=net_facade_area(total_facade_sqft, total_glass_sqft),
            glass_to_facade_ratio_pct=glass_ratio_pct(total_facade_sqft, total_glass_sqft),
            confidence_level=90,
        )
        fields.update(overrides)
        return FacadeProfile(**fields)

    return _make

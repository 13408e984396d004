"""Derived facade metrics: net area and glass-to-facade ratio."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from facade_estimator.models import FacadeMeasurements, FacadeProfile


def round_half_up(value) -> int:
    """Round to the nearest integer, halves away from zero (60.5 -> 61)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def net_facade_area(total_facade_sqft: float, total_glass_sqft: float) -> float:
    """Facade area that is not glazing.

    Negative when the detections report more glass than facade; the value is
    left as-is and the ratio check flags it.
    """
    return total_facade_sqft - total_glass_sqft


def glass_ratio_pct(total_facade_sqft: float, total_glass_sqft: float) -> float:
    """Glass as a percentage of the facade, 0 for an empty facade."""
    if total_facade_sqft <= 0:
        return 0.0
    return total_glass_sqft / total_facade_sqft * 100


def derive_measurements(profile: FacadeProfile) -> FacadeMeasurements:
    """Recompute the derived fields from the profile's totals."""
    total = profile.total_facade_sqft
    glass = profile.total_glass_sqft
    return FacadeMeasurements(
        total_facade_sqft=total,
        total_glass_sqft=glass,
        net_facade_sqft=net_facade_area(total, glass),
        glass_to_facade_ratio_pct=glass_ratio_pct(total, glass),
    )

"""Merge per-photograph material detections into building-level materials."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable

from facade_estimator.models import MaterialDetection, MaterialType, MergedMaterial


def merge_materials(
    detections: Iterable[MaterialDetection],
    total_facade_sqft: float,
) -> list[MergedMaterial]:
    """Group material detections by type.

    Each group's sqft is summed and its confidence averaged. The per-image
    percentage is discarded and recomputed against *total_facade_sqft*
    (0 for every group when the facade total is 0).

    Returns:
        One entry per material type, largest area first, ties by type name.
    """
    groups: dict[MaterialType, list[MaterialDetection]] = defaultdict(list)
    for detection in detections:
        groups[detection.type].append(detection)

    merged = []
    for material_type, items in groups.items():
        sqft = math.fsum(m.sqft for m in items)
        confidence = math.fsum(m.confidence for m in items) / len(items)
        percentage = sqft / total_facade_sqft * 100 if total_facade_sqft > 0 else 0.0
        merged.append(
            MergedMaterial(
                type=material_type,
                sqft=sqft,
                percentage=percentage,
                confidence=confidence,
            )
        )

    merged.sort(key=lambda m: (-m.sqft, m.type.value))
    return merged

"""Claude Vision analysis of a single facade photograph.

This is the boundary with the vision model: its loosely-typed JSON reply is
normalized once, here, into an immutable ``ImageDetection`` before anything
reaches the engine.
"""

from __future__ import annotations

import json
import logging
import math
import time
from pathlib import Path

import anthropic

from facade_estimator.config import get_settings
from facade_estimator.models import (
    BuildingType,
    HeightEstimate,
    ImageDetection,
    MaterialDetection,
    MaterialType,
)
from facade_estimator.vision.photos import load_photo

logger = logging.getLogger(__name__)


class VisionAnalysisError(ValueError):
    """The vision model could not produce a usable detection."""


_BUILDING_HINTS = {
    BuildingType.COMMERCIAL: (
        "This appears to be a commercial building. Consider larger window sizes "
        "(typically 3-5ft wide), higher floor-to-floor heights (12-14ft) and "
        "curtain-wall glazing."
    ),
    BuildingType.RESIDENTIAL: (
        "This appears to be a residential building. Consider smaller window sizes "
        "(typically 2-3ft wide) and standard floor heights (8-10ft)."
    ),
    BuildingType.INDUSTRIAL: (
        "This appears to be an industrial building. Consider large window sizes, "
        "high ceilings and metal or concrete panel cladding."
    ),
}

FACADE_ANALYSIS_PROMPT = """You are an expert exterior-cleaning estimator analysing ONE photograph of a building facade.

{building_hint}

Measure only the facade visible in this photograph. Return ONLY a JSON object:
{{
  "windows_detected": <integer, visible windows including partially obscured ones>,
  "facade_area_sqft": <float, visible facade area in square feet including glass>,
  "glass_area_sqft": <float, visible glazing area in square feet>,
  "materials": [
    {{
      "type": one of ["brick", "metal", "glass", "stone", "stucco", "concrete", "wood", "other"],
      "sqft": <float>,
      "percentage": <float 0-100, share of the visible facade>,
      "confidence": <float 0-100>
    }}
  ],
  "height_estimate": {{
    "stories": <integer>,
    "feet": <float, total building height>,
    "confidence": <float 0-1>
  }},
  "covered_areas_detected": <true if covered walkways, canopies or overhangs are visible>
}}

If the facade is obstructed or not visible, set "height_estimate.confidence" to 0.1 or lower."""


async def analyze_facade(
    source: str | Path,
    building_type: BuildingType = BuildingType.COMMERCIAL,
) -> ImageDetection:
    """Send one facade photograph to Claude Vision and normalize the reply.

    Args:
        source: Local path or http(s) URL of the photograph.
        building_type: Building use, used to tune the prompt.

    Returns:
        ImageDetection for this photograph.

    Raises:
        VisionAnalysisError: If the API key is missing or the reply is not JSON.
    """
    settings = get_settings()
    if not settings.anthropic_api_key:
        raise VisionAnalysisError("ANTHROPIC_API_KEY not configured")

    started = time.perf_counter()
    photo = await load_photo(source)

    prompt = FACADE_ANALYSIS_PROMPT.format(building_hint=_BUILDING_HINTS[building_type])
    client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)

    message = await client.messages.create(
        model=settings.claude_model,
        max_tokens=settings.claude_max_tokens,
        messages=[
            {
                "role": "user",
                "content": [
                    photo.to_content_block(),
                    {"type": "text", "text": prompt},
                ],
            }
        ],
    )

    response_text = message.content[0].text.strip()

    # Handle potential markdown code blocks
    if response_text.startswith("```"):
        lines = response_text.split("\n")
        response_text = "\n".join(lines[1:-1])

    try:
        data = json.loads(response_text)
    except json.JSONDecodeError as e:
        raise VisionAnalysisError(
            f"Failed to parse Claude response for {photo.source}: {response_text[:200]}"
        ) from e
    if not isinstance(data, dict):
        raise VisionAnalysisError(f"Unexpected Claude response for {photo.source}: {response_text[:200]}")

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    detection = normalize_detection(data, processing_time_ms=elapsed_ms)
    logger.debug(
        "Analysed %s: %.0f sq ft facade, %.0f sq ft glass in %d ms",
        photo.source, detection.facade_area_sqft, detection.glass_area_sqft, elapsed_ms,
    )
    return detection


def normalize_detection(data: dict, processing_time_ms: int = 0) -> ImageDetection:
    """Turn a loosely-typed vision reply into an ``ImageDetection``.

    Missing fields get defaults, negative numbers are clamped to 0, a height
    confidence given on a 0-100 scale is rescaled to 0-1, and unknown
    material names become ``other``. Glass larger than the facade is kept;
    the engine flags it during validation.
    """
    facade = _non_negative(data.get("facade_area_sqft"))
    height = data.get("height_estimate")
    if not isinstance(height, dict):
        height = {}

    materials = []
    for raw in data.get("materials") or []:
        if isinstance(raw, dict):
            materials.append(_normalize_material(raw, facade))

    return ImageDetection(
        windows_detected=int(_non_negative(data.get("windows_detected"))),
        facade_area_sqft=facade,
        glass_area_sqft=_non_negative(data.get("glass_area_sqft")),
        materials=tuple(materials),
        height_estimate=HeightEstimate(
            stories=int(_non_negative(height.get("stories"))),
            feet=_non_negative(height.get("feet")),
            confidence=_unit_confidence(height.get("confidence")),
        ),
        covered_areas_detected=bool(data.get("covered_areas_detected", False)),
        processing_time_ms=max(0, int(processing_time_ms)),
    )


def _normalize_material(raw: dict, facade_sqft: float) -> MaterialDetection:
    try:
        mtype = MaterialType(str(raw.get("type", "other")).strip().lower())
    except ValueError:
        mtype = MaterialType.OTHER

    sqft = _non_negative(raw.get("sqft"))
    if raw.get("percentage") is None and facade_sqft > 0:
        percentage = sqft / facade_sqft * 100
    else:
        percentage = _non_negative(raw.get("percentage"))

    return MaterialDetection(
        type=mtype,
        sqft=sqft,
        percentage=min(100.0, percentage),
        confidence=min(100.0, _non_negative(raw.get("confidence"))),
    )


def _non_negative(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(0.0, number)


def _unit_confidence(value) -> float:
    confidence = _non_negative(value)
    if confidence > 1:
        confidence /= 100
    return min(1.0, confidence)

"""Pipeline orchestrator: ties the vision analysis and the engine together.

Flow: photos → Claude analysis (parallel, one call per photo) → aggregate
     → validate → recommend

The engine stages are pure; retries, omissions and aborts are decided here.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from facade_estimator.config import Settings, get_settings
from facade_estimator.facade_engine.aggregator import aggregate
from facade_estimator.facade_engine.errors import EmptyInputError
from facade_estimator.facade_engine.recommender import recommend
from facade_estimator.facade_engine.validator import validate
from facade_estimator.models import BuildingContext, ImageDetection, PipelineResult
from facade_estimator.vision.claude_analyzer import analyze_facade

logger = logging.getLogger(__name__)


class FacadePipeline:
    """End-to-end facade estimation pipeline."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.rules = self.settings.rules

    async def run(
        self,
        photos: Sequence[str | Path],
        context: BuildingContext | None = None,
        strict: bool = False,
    ) -> PipelineResult:
        """Analyse every photo and build the recommendation bundle.

        Args:
            photos: Local paths or URLs, one per vantage point.
            context: Building facts carried onto the profile.
            strict: Abort when any photo fails instead of omitting it.

        Returns:
            PipelineResult with all intermediate and final results.

        Raises:
            ValueError: If no photos, or more than ``max_photos``, are given.
        """
        if not photos:
            raise ValueError("At least one photo is required")
        if len(photos) > self.settings.max_photos:
            raise ValueError(
                f"Too many photos: {len(photos)} (maximum {self.settings.max_photos})"
            )

        context = context or BuildingContext()
        result = PipelineResult(context=context, photos=[str(p) for p in photos])

        # Phase 1: per-photo analysis (fan-out); gather is the join point
        semaphore = asyncio.Semaphore(max(1, self.settings.analysis_concurrency))

        async def _analyze_one(photo: str | Path) -> ImageDetection:
            async with semaphore:
                return await analyze_facade(photo, building_type=context.building_type)

        outcomes = await asyncio.gather(
            *(_analyze_one(p) for p in photos), return_exceptions=True
        )

        detections: list[ImageDetection] = []
        for photo, outcome in zip(photos, outcomes):
            if isinstance(outcome, ImageDetection):
                detections.append(outcome)
            elif isinstance(outcome, Exception):
                logger.warning("Analysis failed for %s: %s", photo, outcome)
                result.errors.append(f"Analysis failed for {photo}: {outcome}")
            else:
                raise outcome

        if strict and result.errors:
            result.errors.append("Aborted: strict mode requires every photo to be analysed")
            return result

        # Phase 2: pure engine
        return self.evaluate(detections, context, result)

    def evaluate(
        self,
        detections: Sequence[ImageDetection],
        context: BuildingContext | None = None,
        result: PipelineResult | None = None,
    ) -> PipelineResult:
        """Run aggregate → validate → recommend on already-resolved detections."""
        context = context or BuildingContext()
        if result is None:
            result = PipelineResult(context=context)
        result.detections = list(detections)

        try:
            profile = aggregate(detections, context, self.rules)
        except EmptyInputError as e:
            result.errors.append(f"No usable photo analyses: {e}")
            return result

        result.profile = profile
        result.validation = validate(profile, self.rules)

        outcome = result.validation.validation
        if not outcome.passed:
            # Quoting waits for a manual review of the measurements
            logger.info(
                "Profile for %s failed validation: %s",
                context.building_address or "unnamed building", "; ".join(outcome.errors),
            )
            result.errors.append("Recommendations withheld: measurements require manual verification")
            return result

        result.recommendations = recommend(profile, self.rules)
        return result

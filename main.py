"""CLI entry point for the facade estimator."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter

from facade_estimator.config import get_settings
from facade_estimator.models import (
    BuildingContext,
    BuildingType,
    ImageDetection,
    PipelineResult,
)
from facade_estimator.pipeline import FacadePipeline

_DETECTIONS = TypeAdapter(list[ImageDetection])


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Facade estimator: building profile, validation and service recommendations from facade photos"
    )
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    sub = parser.add_subparsers(dest="command")

    # --- analyze command ---
    an_p = sub.add_parser("analyze", help="Analyse facade photos with Claude Vision")
    an_p.add_argument("photos", nargs="+", help="Photo paths or URLs, one per vantage point")
    an_p.add_argument("--strict", action="store_true", help="Abort if any photo fails")
    _add_context_args(an_p)

    # --- evaluate command ---
    ev_p = sub.add_parser("evaluate", help="Run the engine on a JSON list of detections")
    ev_p.add_argument("detections", type=Path, help="JSON file with a list of image detections")
    _add_context_args(ev_p)

    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "analyze":
        result = _run_analyze(args)
    elif args.command == "evaluate":
        result = _run_evaluate(args)
    else:
        parser.print_help()
        sys.exit(1)

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        _print_result(result)

    if result.profile is None:
        sys.exit(1)


def _add_context_args(p: argparse.ArgumentParser):
    p.add_argument(
        "--building-type",
        choices=[bt.value for bt in BuildingType],
        default="commercial",
    )
    p.add_argument("--address", default="", help="Building address")
    p.add_argument("--historic", action="store_true", help="Building has a historic designation")


def _context(args) -> BuildingContext:
    return BuildingContext(
        building_type=BuildingType(args.building_type),
        building_address=args.address,
        is_historic_building=args.historic,
    )


def _run_analyze(args) -> PipelineResult:
    pipeline = FacadePipeline()
    return asyncio.run(pipeline.run(args.photos, _context(args), strict=args.strict))


def _run_evaluate(args) -> PipelineResult:
    detections = _DETECTIONS.validate_json(args.detections.read_bytes())
    return FacadePipeline().evaluate(detections, _context(args))


def _print_result(result: PipelineResult):
    if result.errors:
        print("Warnings:")
        for err in result.errors:
            print(f"  - {err}")

    profile = result.profile
    if profile is None:
        print("Facade profile could not be produced.")
        return

    print(f"\n{'='*60}")
    print(f"  {profile.building_address or 'Facade profile'} ({profile.building_type.value})")
    print(f"  Complexity: {profile.facade_complexity.value}   Confidence: {profile.confidence_level}%")
    print(f"{'='*60}")
    print(f"  Photos analysed:   {profile.image_count}")
    print(f"  Total facade:      {profile.total_facade_sqft:,.0f} sq ft")
    print(f"  Glass:             {profile.total_glass_sqft:,.0f} sq ft ({profile.glass_to_facade_ratio_pct:.1f}%)")
    print(f"  Net facade:        {profile.net_facade_sqft:,.0f} sq ft")
    print(f"  Height:            {profile.building_height_stories} stories / {profile.building_height_feet:.0f} ft")
    for m in profile.materials:
        print(f"  Material {m.type.value:<9} {m.sqft:,.0f} sq ft ({m.percentage:.1f}%)")

    if result.validation:
        outcome = result.validation.validation
        print(f"\n  Validation: {'PASSED' if outcome.passed else 'FAILED'}")
        for e in outcome.errors:
            print(f"    error:   {e}")
        for w in outcome.warnings:
            print(f"    warning: {w}")
        if outcome.requires_field_verification:
            print("    field verification recommended")

    if result.recommendations:
        print("\n  Recommended services:")
        for s in result.recommendations.recommended_services:
            print(f"    {s.service:<24} {s.estimated_sqft:>10,.0f} sq ft  {s.confidence:>3}%  {s.reason}")
        print("  Equipment:")
        for eq in result.recommendations.equipment_requirements:
            print(f"    {eq.type:<24} {eq.duration_days:>3} days  {eq.reason}")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    main()

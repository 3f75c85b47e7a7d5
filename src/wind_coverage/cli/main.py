"""Command-line interface for the wind coverage estimator.

Two sub-commands are provided:

``evaluate``
    Reads a gridded 100 m wind extract (Parquet, queried through DuckDB) and a
    building footprint table, evaluates the daily energy of the reference
    turbine at the requested site and reports how many of the surrounding
    buildings the chosen project size could supply. The report is printed as
    JSON; ``--output`` additionally writes ``daily_records.csv`` and
    ``summary.json``. When no explicit period is given the trailing year up to
    the latest available sample is used.

``locations``
    Lists the preset sites declared in the configuration file.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Mapping, Sequence

import pandas as pd

from wind_coverage.errors import InvalidScenarioError, NoWindDataError
from wind_coverage.estimator import EvaluationResult, WindCoverageEstimator
from wind_coverage.io import (
    DEFAULT_CONFIG_PATH,
    DateRange,
    GeoPoint,
    load_building_filter,
    load_preset_locations,
    load_quality_thresholds,
    load_turbine_config,
)
from wind_coverage.io.sources import ParquetWindDataSource, TabularBuildingInventorySource
from wind_coverage.stats.coverage import ScenarioParams, classify_household_load, compute_daily_households

DAILY_RECORDS_FILENAME = "daily_records.csv"
SUMMARY_FILENAME = "summary.json"
EXIT_FAILURE = 2


def _build_logger(verbose: bool) -> logging.Logger:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")
    return logging.getLogger("wind_coverage.cli")


def _parse_timestamp(value: str) -> datetime:
    try:
        return pd.Timestamp(value).to_pydatetime()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid timestamp: {value!r}") from exc


def _resolve_point(args: argparse.Namespace) -> GeoPoint:
    if args.location is not None:
        locations = load_preset_locations(args.config)
        try:
            return locations[args.location]
        except KeyError as exc:
            raise ValueError(
                f"Unknown location {args.location!r}; available locations: {', '.join(locations)}"
            ) from exc
    if args.lat is None or args.lon is None:
        raise ValueError("Either --location or both --lat and --lon are required.")
    return GeoPoint(latitude=args.lat, longitude=args.lon)


def _resolve_date_range(
    args: argparse.Namespace,
    source: ParquetWindDataSource,
    point: GeoPoint,
) -> DateRange | None:
    if args.start is not None and args.end is not None:
        return DateRange(start=args.start, end=args.end)

    end = args.end
    if end is None:
        end = source.latest_timestamp(point)
        if end is None:
            return None
    window = DateRange.trailing_year(end)
    if args.start is not None:
        return DateRange(start=args.start, end=window.end)
    return window


def _write_outputs(result: EvaluationResult, scenario: ScenarioParams, output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)

    frame = pd.DataFrame.from_records([dict(record.to_mapping()) for record in result.daily_records])
    households = compute_daily_households(result.daily_records, scenario)
    frame["houses_powered"] = households.to_numpy()
    frame.to_csv(output_dir / DAILY_RECORDS_FILENAME, index=False)

    (output_dir / SUMMARY_FILENAME).write_text(json.dumps(_report(result, scenario), indent=2), encoding="utf-8")


def _report(result: EvaluationResult, scenario: ScenarioParams) -> Mapping[str, object]:
    payload = dict(result.to_mapping())
    payload["daily_record_count"] = len(payload.pop("daily_records"))
    payload["scenario"] = {
        "num_turbines": scenario.num_turbines,
        "daily_load_per_household_kwh": scenario.daily_load_per_household_kwh,
        "load_tier": classify_household_load(scenario.daily_load_per_household_kwh),
    }
    return payload


def _handle_evaluate(args: argparse.Namespace) -> int:
    logger = _build_logger(args.verbose)

    try:
        scenario = ScenarioParams(num_turbines=args.turbines, daily_load_per_household_kwh=args.household_load)
    except InvalidScenarioError as exc:
        logger.error("Invalid scenario: %s", exc)
        return EXIT_FAILURE

    try:
        point = _resolve_point(args)
    except ValueError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE
    wind_source = ParquetWindDataSource(args.wind_dataset, max_snap_distance_m=args.max_snap_distance_m)
    building_source = TabularBuildingInventorySource.from_path(args.buildings)

    try:
        date_range = _resolve_date_range(args, wind_source, point)
    except ValueError as exc:
        logger.error("Invalid date range: %s", exc)
        return EXIT_FAILURE
    if date_range is None:
        logger.error("No wind data available for this location.")
        return EXIT_FAILURE

    estimator = WindCoverageEstimator(
        wind_source,
        building_source,
        building_filter=load_building_filter(args.config),
        thresholds=load_quality_thresholds(args.config),
    )
    try:
        result = estimator.evaluate(point, date_range, load_turbine_config(args.config), scenario)
    except NoWindDataError as exc:
        logger.error("No wind data available for this location: %s", exc)
        return EXIT_FAILURE

    summary = result.annual_summary
    coverage = result.coverage
    logger.info(
        "Resource quality at 100 m: %.0f W/m² (%s)",
        summary.mean_wpd,
        coverage.quality_label,
    )
    logger.info(
        "Potential coverage: %d / %d homes, status %s",
        coverage.homes_supported,
        coverage.building_count,
        coverage.status,
    )

    if args.output is not None:
        _write_outputs(result, scenario, args.output)
        logger.info("Wrote %s and %s to %s", DAILY_RECORDS_FILENAME, SUMMARY_FILENAME, args.output)

    sys.stdout.write(json.dumps(_report(result, scenario), indent=2) + "\n")
    return 0


def _handle_locations(args: argparse.Namespace) -> int:
    locations = load_preset_locations(args.config)
    for name, point in locations.items():
        sys.stdout.write(f"{name}\t{point.latitude:.4f}\t{point.longitude:.4f}\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wind-coverage",
        description="Estimate wind turbine energy and the share of local buildings it could power.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    evaluate = subparsers.add_parser("evaluate", help="Evaluate a site for the given project scenario.")
    evaluate.add_argument("--wind-dataset", type=Path, required=True, help="Parquet extract of 100 m u/v wind.")
    evaluate.add_argument(
        "--buildings",
        type=Path,
        required=True,
        help="Building footprint table (Parquet or CSV) with latitude, longitude, confidence and height_m.",
    )
    evaluate.add_argument("--lat", type=float, default=None, help="Site latitude in decimal degrees.")
    evaluate.add_argument("--lon", type=float, default=None, help="Site longitude in decimal degrees.")
    evaluate.add_argument("--location", default=None, help="Name of a preset site (see the 'locations' command).")
    evaluate.add_argument(
        "--start",
        type=_parse_timestamp,
        default=None,
        help="Inclusive start of the period (defaults to one year before --end).",
    )
    evaluate.add_argument(
        "--end",
        type=_parse_timestamp,
        default=None,
        help="Exclusive end of the period (defaults to the latest available sample).",
    )
    evaluate.add_argument("--turbines", type=int, default=1, help="Number of turbines in the project.")
    evaluate.add_argument(
        "--household-load",
        type=float,
        default=1.5,
        help="Average daily consumption of one household in kWh.",
    )
    evaluate.add_argument(
        "--max-snap-distance-m",
        type=float,
        default=None,
        help="Reject the nearest wind grid node when it lies further than this distance.",
    )
    evaluate.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Configuration JSON.")
    evaluate.add_argument("--output", type=Path, default=None, help="Directory receiving CSV/JSON artefacts.")
    evaluate.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    evaluate.set_defaults(handler=_handle_evaluate)

    locations = subparsers.add_parser("locations", help="List the preset sites.")
    locations.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Configuration JSON.")
    locations.set_defaults(handler=_handle_locations)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

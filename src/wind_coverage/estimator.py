"""Single entry surface combining wind energy and building coverage.

:class:`WindCoverageEstimator` fetches the wind samples and building
inventory for a point, reduces the samples to daily records, summarises the
resource over the period and relates the resulting energy to the local
building count. The estimator keeps no state between calls; only its data
sources and static thresholds are held on the instance, so repeated calls
with identical inputs produce identical results.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Tuple

from .errors import InvalidScenarioError, NoWindDataError
from .io import BuildingInventorySource, DateRange, GeoPoint, WindDataSource
from .preprocessing.buildings import BuildingFilter, BuildingInventorySummary
from .stats.coverage import CoverageResult, QualityThresholds, ScenarioParams, compute_building_coverage
from .stats.power import DailyWindRecord, TurbineConfig, compute_daily_records
from .stats.summary import DEFAULT_MIN_VIABLE_WPD, AnnualSummary, compute_annual_summary

__all__ = ["EvaluationResult", "WindCoverageEstimator"]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    """Daily records, period summary and coverage for one site and scenario."""

    point: GeoPoint
    date_range: DateRange
    daily_records: Tuple[DailyWindRecord, ...]
    annual_summary: AnnualSummary
    building_summary: BuildingInventorySummary
    coverage: CoverageResult

    def to_mapping(self) -> Mapping[str, object]:
        return {
            "point": dict(self.point.to_mapping()),
            "date_range": dict(self.date_range.to_mapping()),
            "annual_summary": dict(self.annual_summary.to_mapping()),
            "buildings": dict(self.building_summary.to_mapping()),
            "coverage": dict(self.coverage.to_mapping()),
            "daily_records": [dict(record.to_mapping()) for record in self.daily_records],
        }


def _validate_scenario(scenario: ScenarioParams) -> None:
    if scenario.num_turbines < 1:
        raise InvalidScenarioError("num_turbines must be at least 1.")
    if scenario.daily_load_per_household_kwh <= 0.0:
        raise InvalidScenarioError("daily_load_per_household_kwh must be positive.")


class WindCoverageEstimator:
    """Estimate turbine energy at a point and the buildings it could supply."""

    def __init__(
        self,
        wind_source: WindDataSource,
        building_source: BuildingInventorySource,
        *,
        building_filter: BuildingFilter | None = None,
        thresholds: QualityThresholds | None = None,
        min_viable_wpd: float = DEFAULT_MIN_VIABLE_WPD,
    ) -> None:
        self.wind_source = wind_source
        self.building_source = building_source
        self.building_filter = building_filter or BuildingFilter()
        self.thresholds = thresholds or QualityThresholds()
        self.min_viable_wpd = min_viable_wpd

    def evaluate(
        self,
        point: GeoPoint,
        date_range: DateRange,
        turbine_config: TurbineConfig,
        scenario: ScenarioParams,
    ) -> EvaluationResult:
        """Return the daily records, summary and coverage for ``point``.

        Raises
        ------
        InvalidScenarioError
            If the scenario parameters are out of range.
        NoWindDataError
            If the wind source yields no samples for the point and range.
        """

        _validate_scenario(scenario)

        samples = self.wind_source.fetch_samples(point, date_range)
        if not samples:
            raise NoWindDataError(
                f"No wind data available at ({point.latitude:.4f}, {point.longitude:.4f}) "
                f"between {date_range.start.isoformat()} and {date_range.end.isoformat()}."
            )
        LOGGER.info("Evaluating %d wind samples at (%.4f, %.4f)", len(samples), point.latitude, point.longitude)

        daily_records = compute_daily_records(samples, turbine_config)
        if not daily_records:
            raise NoWindDataError("Wind samples did not yield any daily record.")
        annual_summary = compute_annual_summary(daily_records, min_viable_wpd=self.min_viable_wpd)

        building_summary = self.building_source.summarise(point, self.building_filter)
        LOGGER.info(
            "Found %d qualifying buildings within %.0f m",
            building_summary.count,
            self.building_filter.search_radius_m,
        )

        coverage = compute_building_coverage(
            building_summary,
            scenario,
            annual_summary.mean_generation_per_turbine_kwh,
            mean_wpd=annual_summary.mean_wpd,
            thresholds=self.thresholds,
        )
        return EvaluationResult(
            point=point,
            date_range=date_range,
            daily_records=daily_records,
            annual_summary=annual_summary,
            building_summary=building_summary,
            coverage=coverage,
        )

    def recompute_coverage(self, result: EvaluationResult, scenario: ScenarioParams) -> EvaluationResult:
        """Return ``result`` with coverage re-derived for a new scenario.

        Wind and building data are reused as-is, so scenario changes never
        trigger another fetch.
        """

        _validate_scenario(scenario)
        coverage = compute_building_coverage(
            result.building_summary,
            scenario,
            result.annual_summary.mean_generation_per_turbine_kwh,
            mean_wpd=result.annual_summary.mean_wpd,
            thresholds=self.thresholds,
        )
        return EvaluationResult(
            point=result.point,
            date_range=result.date_range,
            daily_records=result.daily_records,
            annual_summary=result.annual_summary,
            building_summary=result.building_summary,
            coverage=coverage,
        )

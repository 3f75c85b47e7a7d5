"""End-to-end tests for :class:`WindCoverageEstimator` with in-memory sources."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest

from wind_coverage import InvalidScenarioError, NoWindDataError, WindCoverageEstimator
from wind_coverage.io import DateRange, GeoPoint
from wind_coverage.preprocessing import BuildingFilter, BuildingInventorySummary, WindSample
from wind_coverage.stats import ScenarioParams, TurbineConfig


class _StaticWindSource:
    def __init__(self, samples):
        self.samples = tuple(samples)
        self.calls = 0

    def fetch_samples(self, point, date_range):
        self.calls += 1
        return tuple(sample for sample in self.samples if date_range.contains(sample.timestamp))

    def latest_timestamp(self, point):
        return max((sample.timestamp for sample in self.samples), default=None)


class _StaticBuildingSource:
    def __init__(self, count: int):
        self.count = count

    def summarise(self, point, building_filter):
        return BuildingInventorySummary(count=self.count, search_radius_m=building_filter.search_radius_m)


POINT = GeoPoint(latitude=2.0306, longitude=45.3409)
WINDOW = DateRange(start=datetime(2024, 1, 1), end=datetime(2024, 1, 4))


def _hourly_samples(days: int, u: float, v: float) -> list[WindSample]:
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [WindSample(start + timedelta(hours=hour), u, v) for hour in range(24 * days)]


def test_evaluate_combines_daily_records_summary_and_coverage() -> None:
    estimator = WindCoverageEstimator(_StaticWindSource(_hourly_samples(3, 3.0, 4.0)), _StaticBuildingSource(10_000))
    result = estimator.evaluate(POINT, WINDOW, TurbineConfig(), ScenarioParams(num_turbines=2, daily_load_per_household_kwh=1.5))

    assert len(result.daily_records) == 3
    assert result.annual_summary.mean_wpd == pytest.approx(76.5625)
    daily_kwh = result.annual_summary.mean_generation_per_turbine_kwh
    assert daily_kwh == pytest.approx(8311.0, rel=1e-3)
    assert result.coverage.homes_supported == math.floor(daily_kwh * 2 / 1.5)
    assert result.coverage.coverage_ratio == pytest.approx(result.coverage.homes_supported / 10_000)
    assert result.coverage.quality_label == "Poor"
    assert result.building_summary.count == 10_000


def test_evaluate_is_idempotent() -> None:
    estimator = WindCoverageEstimator(_StaticWindSource(_hourly_samples(2, 8.0, 6.0)), _StaticBuildingSource(500))
    scenario = ScenarioParams(num_turbines=3, daily_load_per_household_kwh=12.0)

    first = estimator.evaluate(POINT, WINDOW, TurbineConfig(), scenario)
    second = estimator.evaluate(POINT, WINDOW, TurbineConfig(), scenario)
    assert first == second
    assert first.to_mapping() == second.to_mapping()


def test_evaluate_without_samples_raises_no_wind_data() -> None:
    estimator = WindCoverageEstimator(_StaticWindSource([]), _StaticBuildingSource(10))
    with pytest.raises(NoWindDataError):
        estimator.evaluate(POINT, WINDOW, TurbineConfig(), ScenarioParams())


def test_invalid_scenario_is_rejected_before_fetching() -> None:
    wind = _StaticWindSource(_hourly_samples(1, 5.0, 0.0))
    estimator = WindCoverageEstimator(wind, _StaticBuildingSource(10))

    class _Unchecked:
        num_turbines = 0
        daily_load_per_household_kwh = 1.5

    with pytest.raises(InvalidScenarioError):
        estimator.evaluate(POINT, WINDOW, TurbineConfig(), _Unchecked())
    assert wind.calls == 0


def test_uninhabited_site_reports_zero_coverage() -> None:
    estimator = WindCoverageEstimator(_StaticWindSource(_hourly_samples(1, 10.0, 0.0)), _StaticBuildingSource(0))
    result = estimator.evaluate(POINT, WINDOW, TurbineConfig(), ScenarioParams())
    assert result.coverage.homes_supported > 0
    assert result.coverage.coverage_ratio == 0.0
    assert result.coverage.status == "PARTIAL COVERAGE (0.0%)"


def test_recompute_coverage_reuses_fetched_data() -> None:
    wind = _StaticWindSource(_hourly_samples(2, 0.0, 11.0))
    estimator = WindCoverageEstimator(
        wind,
        _StaticBuildingSource(1000),
        building_filter=BuildingFilter(search_radius_m=2000.0),
    )
    base = estimator.evaluate(POINT, WINDOW, TurbineConfig(), ScenarioParams())
    updated = estimator.recompute_coverage(base, ScenarioParams(num_turbines=4, daily_load_per_household_kwh=1.5))

    assert wind.calls == 1
    assert updated.daily_records == base.daily_records
    assert updated.coverage.total_daily_energy_kwh == pytest.approx(4 * base.coverage.total_daily_energy_kwh)
    assert updated.building_summary.search_radius_m == 2000.0


def test_duck_typed_scenario_with_non_positive_load_is_rejected() -> None:
    wind = _StaticWindSource(_hourly_samples(1, 5.0, 0.0))
    estimator = WindCoverageEstimator(wind, _StaticBuildingSource(10))
    base = estimator.evaluate(POINT, WINDOW, TurbineConfig(), ScenarioParams())

    class _ZeroLoad:
        num_turbines = 2
        daily_load_per_household_kwh = 0.0

    with pytest.raises(InvalidScenarioError):
        estimator.recompute_coverage(base, _ZeroLoad())

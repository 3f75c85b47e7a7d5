"""Translate turbine energy into equivalent households and building coverage.

The coverage model divides the daily energy of the whole project by the
consumption of a single household to obtain the number of homes that could
be supplied, then relates that figure to the count of qualifying buildings
around the site. The unclamped ratio feeds the ">100%" status message while
the ratio capped at one drives any visual allocation of powered buildings.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from numbers import Integral
from typing import Mapping, Sequence

import math

import pandas as pd

from ..errors import InvalidScenarioError
from ..preprocessing.buildings import BuildingInventorySummary
from .power import DailyWindRecord

__all__ = [
    "CoverageResult",
    "QualityThresholds",
    "ScenarioParams",
    "classify_household_load",
    "classify_resource_quality",
    "compute_building_coverage",
    "compute_daily_households",
]


@dataclass(frozen=True)
class ScenarioParams:
    """User-adjustable project size and household consumption."""

    num_turbines: int = 1
    daily_load_per_household_kwh: float = 1.5

    def __post_init__(self) -> None:
        if isinstance(self.num_turbines, bool) or not isinstance(self.num_turbines, Integral):
            raise InvalidScenarioError("num_turbines must be an integer.")
        if self.num_turbines < 1:
            raise InvalidScenarioError("num_turbines must be at least 1.")
        load = self.daily_load_per_household_kwh
        if not isinstance(load, (int, float)) or not math.isfinite(load) or load <= 0.0:
            raise InvalidScenarioError("daily_load_per_household_kwh must be a positive number.")

    def with_turbines(self, num_turbines: int) -> "ScenarioParams":
        return replace(self, num_turbines=num_turbines)

    def with_load(self, daily_load_per_household_kwh: float) -> "ScenarioParams":
        return replace(self, daily_load_per_household_kwh=daily_load_per_household_kwh)


@dataclass(frozen=True)
class QualityThresholds:
    """Wind power density bounds (W/m²) for the resource quality label."""

    good: float = 200.0
    excellent: float = 400.0

    def __post_init__(self) -> None:
        if self.good < 0.0:
            raise ValueError("good threshold must be non-negative.")
        if self.excellent <= self.good:
            raise ValueError("excellent threshold must exceed the good threshold.")


@dataclass(frozen=True)
class CoverageResult:
    """Households supported by the project and the resulting coverage."""

    homes_supported: int
    coverage_ratio: float
    capped_ratio: float
    quality_label: str
    building_count: int
    total_daily_energy_kwh: float

    @property
    def full_coverage(self) -> bool:
        return self.coverage_ratio >= 1.0

    @property
    def coverage_percent_text(self) -> str:
        """Return the coverage as a percentage, saturating at ``>100%``."""

        percent = self.coverage_ratio * 100.0
        if percent >= 100.0:
            return ">100%"
        return f"{percent:.1f}%"

    @property
    def status(self) -> str:
        if self.full_coverage:
            return "FULL COVERAGE"
        return f"PARTIAL COVERAGE ({self.coverage_percent_text})"

    def to_mapping(self) -> Mapping[str, object]:
        return {
            "homes_supported": self.homes_supported,
            "building_count": self.building_count,
            "coverage_ratio": self.coverage_ratio,
            "capped_ratio": self.capped_ratio,
            "coverage_percent": self.coverage_percent_text,
            "status": self.status,
            "quality_label": self.quality_label,
            "total_daily_energy_kwh": self.total_daily_energy_kwh,
        }


def classify_resource_quality(mean_wpd: float, thresholds: QualityThresholds | None = None) -> str:
    """Bucket a mean wind power density into Poor, Good or Excellent."""

    bounds = thresholds or QualityThresholds()
    if mean_wpd < bounds.good:
        return "Poor"
    if mean_wpd < bounds.excellent:
        return "Good"
    return "Excellent"


def classify_household_load(daily_load_per_household_kwh: float) -> str:
    """Return the consumption tier used to describe a household load."""

    if daily_load_per_household_kwh < 1.0:
        return "Basic"
    if daily_load_per_household_kwh < 5.0:
        return "Standard Household"
    return "Heavy/Industrial"


def compute_building_coverage(
    building_summary: BuildingInventorySummary,
    scenario: ScenarioParams,
    mean_generation_per_turbine_kwh: float,
    *,
    mean_wpd: float,
    thresholds: QualityThresholds | None = None,
) -> CoverageResult:
    """Return the share of surrounding buildings the project could power.

    Sites without qualifying buildings (open water, uninhabited land) yield a
    coverage ratio of zero.
    """

    if mean_generation_per_turbine_kwh < 0.0:
        raise ValueError("mean_generation_per_turbine_kwh must be non-negative.")

    total_daily_energy = mean_generation_per_turbine_kwh * scenario.num_turbines
    homes_supported = int(math.floor(total_daily_energy / scenario.daily_load_per_household_kwh))

    if building_summary.count > 0:
        coverage_ratio = homes_supported / building_summary.count
    else:
        coverage_ratio = 0.0

    return CoverageResult(
        homes_supported=homes_supported,
        coverage_ratio=coverage_ratio,
        capped_ratio=min(coverage_ratio, 1.0),
        quality_label=classify_resource_quality(mean_wpd, thresholds),
        building_count=building_summary.count,
        total_daily_energy_kwh=total_daily_energy,
    )


def compute_daily_households(records: Sequence[DailyWindRecord], scenario: ScenarioParams) -> pd.Series:
    """Return the equivalent households powered on each day of the record."""

    if not records:
        return pd.Series(dtype="int64", name="houses_powered")

    index = pd.DatetimeIndex([pd.Timestamp(record.day) for record in records], name="date")
    values = [
        int(
            math.floor(
                record.mean_generation_per_turbine_kwh
                * scenario.num_turbines
                / scenario.daily_load_per_household_kwh
            )
        )
        for record in records
    ]
    return pd.Series(values, index=index, name="houses_powered", dtype="int64")

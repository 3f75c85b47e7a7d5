"""Wind power, resource summary and coverage computations."""

from __future__ import annotations

from .coverage import (
    CoverageResult,
    QualityThresholds,
    ScenarioParams,
    classify_household_load,
    classify_resource_quality,
    compute_building_coverage,
    compute_daily_households,
)
from .lottery import DEFAULT_LOTTERY_SEED, allocate_powered_pixels, draw_lottery_grid
from .power import (
    HOURS_PER_DAY,
    DailyWindRecord,
    TurbineConfig,
    compute_daily_record,
    compute_daily_records,
    compute_generation_kw,
    compute_wind_power_density,
    compute_wind_speed,
)
from .summary import DEFAULT_MIN_VIABLE_WPD, AnnualSummary, compute_annual_summary

__all__ = [
    "AnnualSummary",
    "CoverageResult",
    "DailyWindRecord",
    "DEFAULT_LOTTERY_SEED",
    "DEFAULT_MIN_VIABLE_WPD",
    "HOURS_PER_DAY",
    "QualityThresholds",
    "ScenarioParams",
    "TurbineConfig",
    "allocate_powered_pixels",
    "classify_household_load",
    "classify_resource_quality",
    "compute_annual_summary",
    "compute_building_coverage",
    "compute_daily_households",
    "compute_daily_record",
    "compute_daily_records",
    "compute_generation_kw",
    "compute_wind_power_density",
    "compute_wind_speed",
    "draw_lottery_grid",
]

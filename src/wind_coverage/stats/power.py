"""Turbine physics applied to 100 m wind-vector samples.

Each sample is reduced to a wind power density ``0.5 * rho * v**3`` (W/m²)
and to the electrical output of a single reference turbine obtained by
multiplying the density by the rotor swept area and the system efficiency.
A simplified power curve zeroes production outside the cut-in/cut-out band
and caps it at the nameplate rating.

Daily energy is approximated as the mean instantaneous output multiplied by
24 hours. This holds the averaged rate constant over the day instead of
integrating sub-daily generation, so days with strongly varying wind speed
are only approximately represented.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Sequence, Tuple

import math

import numpy as np

from ..preprocessing.wind_samples import WindSample, group_samples_by_day, sample_components

__all__ = [
    "HOURS_PER_DAY",
    "DailyWindRecord",
    "TurbineConfig",
    "compute_daily_record",
    "compute_daily_records",
    "compute_generation_kw",
    "compute_wind_power_density",
    "compute_wind_speed",
]

HOURS_PER_DAY = 24.0


@dataclass(frozen=True)
class TurbineConfig:
    """Physical constants describing the reference turbine."""

    rotor_diameter_m: float = 120.0
    system_efficiency: float = 0.40
    air_density: float = 1.225
    cut_in_speed: float = 3.0
    cut_out_speed: float = 25.0
    max_generation_kw: float = 3000.0

    def __post_init__(self) -> None:
        if self.rotor_diameter_m <= 0.0:
            raise ValueError("rotor_diameter_m must be positive.")
        if not 0.0 < self.system_efficiency <= 1.0:
            raise ValueError("system_efficiency must lie in (0, 1].")
        if self.air_density <= 0.0:
            raise ValueError("air_density must be positive.")
        if self.cut_in_speed < 0.0:
            raise ValueError("cut_in_speed must be non-negative.")
        if self.cut_out_speed <= self.cut_in_speed:
            raise ValueError("cut_out_speed must exceed cut_in_speed.")
        if self.max_generation_kw <= 0.0:
            raise ValueError("max_generation_kw must be positive.")

    @property
    def swept_area_m2(self) -> float:
        """Return the area traced by the rotor blades."""

        radius = self.rotor_diameter_m / 2.0
        return math.pi * radius * radius

    def to_mapping(self) -> Mapping[str, float]:
        return {
            "rotor_diameter_m": self.rotor_diameter_m,
            "system_efficiency": self.system_efficiency,
            "air_density": self.air_density,
            "cut_in_speed": self.cut_in_speed,
            "cut_out_speed": self.cut_out_speed,
            "max_generation_kw": self.max_generation_kw,
            "swept_area_m2": self.swept_area_m2,
        }


@dataclass(frozen=True)
class DailyWindRecord:
    """Wind resource and per-turbine energy for one UTC calendar day."""

    day: date
    mean_power_density: float
    mean_generation_per_turbine_kwh: float
    sample_count: int

    def to_mapping(self) -> Mapping[str, object]:
        return {
            "date": self.day.isoformat(),
            "mean_power_density_w_per_m2": self.mean_power_density,
            "daily_kwh_per_turbine": self.mean_generation_per_turbine_kwh,
            "sample_count": self.sample_count,
        }


def compute_wind_speed(u: Sequence[float] | np.ndarray, v: Sequence[float] | np.ndarray) -> np.ndarray:
    """Return the horizontal speed ``sqrt(u² + v²)`` element-wise."""

    return np.hypot(np.asarray(u, dtype=float), np.asarray(v, dtype=float))


def compute_wind_power_density(speeds: Sequence[float] | np.ndarray, *, air_density: float = 1.225) -> np.ndarray:
    """Return the wind power density in W/m² for each speed."""

    if air_density <= 0.0:
        raise ValueError("air_density must be positive.")
    arr = np.asarray(speeds, dtype=float)
    return 0.5 * air_density * np.power(arr, 3)


def compute_generation_kw(speeds: Sequence[float] | np.ndarray, config: TurbineConfig) -> np.ndarray:
    """Return single-turbine output in kW after applying the power curve."""

    arr = np.asarray(speeds, dtype=float)
    density = compute_wind_power_density(arr, air_density=config.air_density)
    raw_kw = density * config.swept_area_m2 * config.system_efficiency / 1000.0
    capped = np.minimum(raw_kw, config.max_generation_kw)
    # Turbine is idle below cut-in and braked above cut-out.
    outside_band = (arr < config.cut_in_speed) | (arr > config.cut_out_speed)
    return np.where(outside_band, 0.0, capped)


def compute_daily_record(
    samples: Sequence[WindSample],
    config: TurbineConfig,
) -> DailyWindRecord | None:
    """Reduce the samples of one calendar day to a :class:`DailyWindRecord`.

    Returns ``None`` when ``samples`` is empty; callers must drop those days
    before aggregating.
    """

    if not samples:
        return None

    days = {sample.day for sample in samples}
    if len(days) > 1:
        raise ValueError("Samples passed to compute_daily_record must share a calendar day.")

    u, v = sample_components(samples)
    speeds = compute_wind_speed(u, v)
    density = compute_wind_power_density(speeds, air_density=config.air_density)
    generation = compute_generation_kw(speeds, config)

    return DailyWindRecord(
        day=days.pop(),
        mean_power_density=float(np.mean(density)),
        mean_generation_per_turbine_kwh=float(np.mean(generation)) * HOURS_PER_DAY,
        sample_count=len(samples),
    )


def compute_daily_records(
    samples: Iterable[WindSample],
    config: TurbineConfig,
) -> Tuple[DailyWindRecord, ...]:
    """Return one record per day that has at least one sample, sorted by date."""

    records: list[DailyWindRecord] = []
    for day_samples in group_samples_by_day(samples).values():
        record = compute_daily_record(day_samples, config)
        if record is not None:
            records.append(record)
    return tuple(records)

"""Aggregate resource metrics over a series of daily records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np

from ..errors import NoDataError
from .power import DailyWindRecord

__all__ = ["DEFAULT_MIN_VIABLE_WPD", "AnnualSummary", "compute_annual_summary"]

DEFAULT_MIN_VIABLE_WPD = 200.0


@dataclass(frozen=True)
class AnnualSummary:
    """Mean wind power density and per-turbine energy across the period."""

    mean_wpd: float
    mean_generation_per_turbine_kwh: float
    day_count: int
    viable_day_ratio: float
    min_viable_wpd: float = DEFAULT_MIN_VIABLE_WPD

    def to_mapping(self) -> Mapping[str, object]:
        return {
            "mean_wpd_w_per_m2": self.mean_wpd,
            "mean_daily_kwh_per_turbine": self.mean_generation_per_turbine_kwh,
            "day_count": self.day_count,
            "viable_day_ratio": self.viable_day_ratio,
            "min_viable_wpd_w_per_m2": self.min_viable_wpd,
        }


def compute_annual_summary(
    records: Sequence[DailyWindRecord],
    *,
    min_viable_wpd: float = DEFAULT_MIN_VIABLE_WPD,
) -> AnnualSummary:
    """Return the arithmetic means of the daily records.

    Raises
    ------
    NoDataError
        If ``records`` is empty.
    """

    if not records:
        raise NoDataError("At least one daily record is required to summarise the wind resource.")

    density = np.fromiter((record.mean_power_density for record in records), dtype=float, count=len(records))
    energy = np.fromiter(
        (record.mean_generation_per_turbine_kwh for record in records),
        dtype=float,
        count=len(records),
    )

    return AnnualSummary(
        mean_wpd=float(np.mean(density)),
        mean_generation_per_turbine_kwh=float(np.mean(energy)),
        day_count=len(records),
        viable_day_ratio=float(np.count_nonzero(density >= min_viable_wpd)) / len(records),
        min_viable_wpd=min_viable_wpd,
    )

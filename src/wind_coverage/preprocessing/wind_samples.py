"""Normalisation helpers for 100 m wind-vector samples.

Forecast and reanalysis products deliver wind as eastward (``u``) and
northward (``v``) components at a fixed height above ground. The helpers in
this module convert tabular extracts into immutable :class:`WindSample`
instances, enforce UTC timestamps, and split the series into calendar days so
the daily power reduction never has to reason about time zones.

Naive timestamps are interpreted as UTC, matching the convention used by the
upstream forecast archives.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Mapping, Sequence, Tuple

import math

import numpy as np
import pandas as pd

__all__ = [
    "MEASUREMENT_HEIGHT_M",
    "WindSample",
    "group_samples_by_day",
    "sample_components",
    "samples_from_frame",
    "samples_to_frame",
]

MEASUREMENT_HEIGHT_M = 100.0

_DEFAULT_COLUMNS: Mapping[str, str] = {
    "timestamp": "timestamp",
    "u": "u_component_100m",
    "v": "v_component_100m",
}


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class WindSample:
    """Single wind-vector observation at :data:`MEASUREMENT_HEIGHT_M`."""

    timestamp: datetime
    u_component: float
    v_component: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _as_utc(self.timestamp))
        if not (math.isfinite(self.u_component) and math.isfinite(self.v_component)):
            raise ValueError("Wind components must be finite numbers.")

    @property
    def speed(self) -> float:
        """Return the horizontal wind speed in m/s."""

        return math.hypot(self.u_component, self.v_component)

    @property
    def day(self) -> date:
        """Return the UTC calendar day the sample belongs to."""

        return self.timestamp.date()


def samples_from_frame(
    frame: pd.DataFrame,
    *,
    timestamp_field: str = _DEFAULT_COLUMNS["timestamp"],
    u_field: str = _DEFAULT_COLUMNS["u"],
    v_field: str = _DEFAULT_COLUMNS["v"],
) -> Tuple[WindSample, ...]:
    """Return time-ordered samples built from a tabular extract.

    Rows with a missing timestamp or a non-finite component are dropped.
    """

    if frame.empty:
        return ()

    missing = [name for name in (timestamp_field, u_field, v_field) if name not in frame.columns]
    if missing:
        raise KeyError(f"Wind extract is missing required columns: {', '.join(missing)}")

    timestamps = pd.to_datetime(frame[timestamp_field], utc=True, errors="coerce")
    u_values = pd.to_numeric(frame[u_field], errors="coerce").to_numpy(dtype=float)
    v_values = pd.to_numeric(frame[v_field], errors="coerce").to_numpy(dtype=float)

    valid = timestamps.notna().to_numpy() & np.isfinite(u_values) & np.isfinite(v_values)
    cleaned = pd.DataFrame(
        {
            "timestamp": timestamps[valid].reset_index(drop=True),
            "u": u_values[valid],
            "v": v_values[valid],
        }
    ).sort_values("timestamp", kind="stable")

    return tuple(
        WindSample(
            timestamp=row.timestamp.to_pydatetime(),
            u_component=float(row.u),
            v_component=float(row.v),
        )
        for row in cleaned.itertuples(index=False)
    )


def samples_to_frame(samples: Iterable[WindSample]) -> pd.DataFrame:
    """Return a UTC-indexed frame with ``u``, ``v`` and ``speed`` columns."""

    rows = [
        {
            "timestamp": sample.timestamp,
            "u": sample.u_component,
            "v": sample.v_component,
            "speed": sample.speed,
        }
        for sample in samples
    ]
    if not rows:
        return pd.DataFrame(
            {
                "u": pd.Series(dtype=float),
                "v": pd.Series(dtype=float),
                "speed": pd.Series(dtype=float),
            },
            index=pd.DatetimeIndex([], tz="UTC", name="timestamp"),
        )
    frame = pd.DataFrame.from_records(rows)
    frame["timestamp"] = pd.to_datetime(frame["timestamp"], utc=True)
    return frame.set_index("timestamp").sort_index()


def sample_components(samples: Sequence[WindSample]) -> tuple[np.ndarray, np.ndarray]:
    """Return the ``u`` and ``v`` components as float arrays."""

    u = np.fromiter((sample.u_component for sample in samples), dtype=float, count=len(samples))
    v = np.fromiter((sample.v_component for sample in samples), dtype=float, count=len(samples))
    return u, v


def group_samples_by_day(samples: Iterable[WindSample]) -> "OrderedDict[date, Tuple[WindSample, ...]]":
    """Split samples into UTC calendar days, ordered chronologically."""

    buckets: dict[date, list[WindSample]] = {}
    for sample in samples:
        buckets.setdefault(sample.day, []).append(sample)

    grouped: "OrderedDict[date, Tuple[WindSample, ...]]" = OrderedDict()
    for day in sorted(buckets):
        grouped[day] = tuple(sorted(buckets[day], key=lambda item: item.timestamp))
    return grouped

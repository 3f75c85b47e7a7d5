"""IO contracts and configuration for the wind coverage workflow.

The estimator never talks to storage directly. It receives a
:class:`WindDataSource` returning 100 m wind-vector samples for a point and a
half-open date range, and a :class:`BuildingInventorySource` counting the
qualifying structures around that point. Concrete file-backed implementations
live in :mod:`wind_coverage.io.sources`.

Static parameters (turbine physics, building filter, quality thresholds and
the preset site list) are read from ``config/wind_coverage.json``. Every
loader falls back to built-in defaults when the file or the relevant section
is absent so the library remains usable without a configuration tree.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Protocol, Sequence, runtime_checkable

import pandas as pd

from ..preprocessing.buildings import BuildingFilter, BuildingInventorySummary
from ..preprocessing.wind_samples import WindSample
from ..stats.coverage import QualityThresholds
from ..stats.power import TurbineConfig

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_LOCATIONS",
    "BuildingInventorySource",
    "DateRange",
    "GeoPoint",
    "WindDataSource",
    "load_building_filter",
    "load_preset_locations",
    "load_quality_thresholds",
    "load_turbine_config",
]

DEFAULT_CONFIG_PATH = Path("config") / "wind_coverage.json"


@dataclass(frozen=True)
class GeoPoint:
    """WGS84 location of a candidate turbine site."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError("latitude must lie within [-90, 90].")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError("longitude must lie within [-180, 180].")

    def to_mapping(self) -> Mapping[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class DateRange:
    """Half-open UTC interval ``[start, end)``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _as_utc(self.start))
        object.__setattr__(self, "end", _as_utc(self.end))
        if self.end <= self.start:
            raise ValueError("DateRange end must be later than start.")

    @classmethod
    def trailing_year(cls, end: datetime) -> "DateRange":
        """Return the one-year window that closes at ``end``."""

        end_utc = _as_utc(end)
        start = (pd.Timestamp(end_utc) - pd.DateOffset(years=1)).to_pydatetime()
        return cls(start=start, end=end_utc)

    def contains(self, timestamp: datetime) -> bool:
        return self.start <= _as_utc(timestamp) < self.end

    def to_mapping(self) -> Mapping[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@runtime_checkable
class WindDataSource(Protocol):
    """Provider of wind-vector samples at the fixed measurement height."""

    def fetch_samples(self, point: GeoPoint, date_range: DateRange) -> Sequence[WindSample]:
        """Return the samples for ``point`` within ``date_range``, time-ordered."""

    def latest_timestamp(self, point: GeoPoint) -> datetime | None:
        """Return the most recent sample time available near ``point``."""


@runtime_checkable
class BuildingInventorySource(Protocol):
    """Provider of building counts around a point."""

    def summarise(self, point: GeoPoint, building_filter: BuildingFilter) -> BuildingInventorySummary:
        """Return the qualifying structure count within the filter radius."""


DEFAULT_LOCATIONS: Mapping[str, GeoPoint] = {
    "Mogadishu, Somalia": GeoPoint(latitude=2.0306, longitude=45.3409),
    "Nouakchott, Mauritania": GeoPoint(latitude=18.0735, longitude=-15.9585),
    "Cape Town, South Africa": GeoPoint(latitude=-33.9135, longitude=18.4619),
    "Paraguana, Venezuela": GeoPoint(latitude=11.7583, longitude=-69.9431),
    "Barranquilla, Colombia": GeoPoint(latitude=10.9685, longitude=-74.7813),
}


def _load_section(path: str | Path | None, section: str) -> Mapping[str, object]:
    target = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not target.exists():
        return {}
    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in wind coverage configuration: {target}") from exc
    if not isinstance(payload, Mapping):
        raise ValueError(f"Wind coverage configuration must be a JSON object: {target}")
    value = payload.get(section) or {}
    if not isinstance(value, Mapping):
        raise ValueError(f"Section {section!r} in {target} must be a JSON object.")
    return value


def _float_overrides(section: Mapping[str, object], names: Sequence[str]) -> dict[str, float]:
    overrides: dict[str, float] = {}
    for name in names:
        value = section.get(name)
        if value is not None:
            overrides[name] = float(value)
    return overrides


def load_turbine_config(path: str | Path | None = None) -> TurbineConfig:
    """Return the turbine constants declared under the ``turbine`` section."""

    section = _load_section(path, "turbine")
    names = [field.name for field in fields(TurbineConfig)]
    return TurbineConfig(**_float_overrides(section, names))


def load_building_filter(path: str | Path | None = None) -> BuildingFilter:
    """Return the building filter declared under the ``buildings`` section."""

    section = _load_section(path, "buildings")
    names = [field.name for field in fields(BuildingFilter)]
    return BuildingFilter(**_float_overrides(section, names))


def load_quality_thresholds(path: str | Path | None = None) -> QualityThresholds:
    """Return the resource quality bounds under ``quality_thresholds``."""

    section = _load_section(path, "quality_thresholds")
    names = [field.name for field in fields(QualityThresholds)]
    return QualityThresholds(**_float_overrides(section, names))


def load_preset_locations(path: str | Path | None = None) -> dict[str, GeoPoint]:
    """Return the named preset sites, falling back to :data:`DEFAULT_LOCATIONS`.

    Each entry of the ``locations`` section maps a site name to a
    ``[longitude, latitude]`` pair.
    """

    section = _load_section(path, "locations")
    if not section:
        return dict(DEFAULT_LOCATIONS)

    locations: dict[str, GeoPoint] = {}
    for name, coords in section.items():
        if not isinstance(coords, Sequence) or isinstance(coords, str) or len(coords) != 2:
            raise ValueError(f"Location {name!r} must be a [longitude, latitude] pair.")
        locations[str(name)] = GeoPoint(latitude=float(coords[1]), longitude=float(coords[0]))
    return locations

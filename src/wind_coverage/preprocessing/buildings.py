"""Building inventory filtering around a candidate turbine site.

Building footprints come either as a detection raster (per-pixel presence
confidence and estimated height) or as a table of individual structures with
coordinates. In both cases a structure qualifies when its detection
confidence reaches :attr:`BuildingFilter.confidence_threshold` and its height
reaches :attr:`BuildingFilter.min_height_m`. Every qualifying structure is
treated as one equivalent household, regardless of its actual use.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import numpy as np
import pandas as pd

__all__ = [
    "EARTH_RADIUS_M",
    "BuildingFilter",
    "BuildingInventorySummary",
    "haversine_distance_m",
    "qualifying_building_mask",
    "summarise_building_raster",
    "summarise_building_table",
]

EARTH_RADIUS_M = 6_371_008.8


@dataclass(frozen=True)
class BuildingFilter:
    """Thresholds deciding which detected structures are counted."""

    confidence_threshold: float = 0.7
    min_height_m: float = 1.5
    search_radius_m: float = 5000.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must lie within [0, 1].")
        if self.min_height_m < 0.0:
            raise ValueError("min_height_m must be non-negative.")
        if self.search_radius_m <= 0.0:
            raise ValueError("search_radius_m must be positive.")


@dataclass(frozen=True)
class BuildingInventorySummary:
    """Snapshot count of qualifying structures around a point."""

    count: int
    search_radius_m: float | None = None

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("Building count must be non-negative.")

    def to_mapping(self) -> Mapping[str, object]:
        return {"count": self.count, "search_radius_m": self.search_radius_m}


def qualifying_building_mask(
    presence: np.ndarray,
    heights: np.ndarray,
    building_filter: BuildingFilter,
) -> np.ndarray:
    """Return a boolean grid flagging pixels that hold a qualifying building.

    Non-finite pixels (no detection, outside the footprint) never qualify.
    """

    presence_arr = np.asarray(presence, dtype=float)
    height_arr = np.asarray(heights, dtype=float)
    if presence_arr.shape != height_arr.shape:
        raise ValueError("presence and heights rasters must share the same shape.")

    with np.errstate(invalid="ignore"):
        mask = (presence_arr >= building_filter.confidence_threshold) & (
            height_arr >= building_filter.min_height_m
        )
    return mask & np.isfinite(presence_arr) & np.isfinite(height_arr)


def summarise_building_raster(
    presence: np.ndarray,
    heights: np.ndarray,
    building_filter: BuildingFilter,
) -> BuildingInventorySummary:
    """Count qualifying pixels of a raster already clipped to the search radius."""

    mask = qualifying_building_mask(presence, heights, building_filter)
    return BuildingInventorySummary(
        count=int(np.count_nonzero(mask)),
        search_radius_m=building_filter.search_radius_m,
    )


def haversine_distance_m(
    latitude: float,
    longitude: float,
    latitudes: np.ndarray,
    longitudes: np.ndarray,
) -> np.ndarray:
    """Return great-circle distances in metres from one point to many."""

    lat1 = np.radians(latitude)
    lon1 = np.radians(longitude)
    lat2 = np.radians(np.asarray(latitudes, dtype=float))
    lon2 = np.radians(np.asarray(longitudes, dtype=float))

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = np.sin(dlat / 2.0) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2.0) ** 2
    return 2.0 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def summarise_building_table(
    frame: pd.DataFrame,
    *,
    latitude: float,
    longitude: float,
    building_filter: BuildingFilter,
) -> BuildingInventorySummary:
    """Count qualifying structures of a footprint table within the search radius.

    ``frame`` must expose ``latitude``, ``longitude``, ``confidence`` and
    ``height_m`` columns. Rows with missing values are ignored.
    """

    if frame.empty:
        return BuildingInventorySummary(count=0, search_radius_m=building_filter.search_radius_m)

    required = ("latitude", "longitude", "confidence", "height_m")
    missing = [name for name in required if name not in frame.columns]
    if missing:
        raise KeyError(f"Building table is missing required columns: {', '.join(missing)}")

    lats = pd.to_numeric(frame["latitude"], errors="coerce").to_numpy(dtype=float)
    lons = pd.to_numeric(frame["longitude"], errors="coerce").to_numpy(dtype=float)
    confidence = pd.to_numeric(frame["confidence"], errors="coerce").to_numpy(dtype=float)
    heights = pd.to_numeric(frame["height_m"], errors="coerce").to_numpy(dtype=float)

    qualifies = qualifying_building_mask(confidence, heights, building_filter)
    located = np.isfinite(lats) & np.isfinite(lons)
    distances = np.full(lats.shape, np.inf)
    distances[located] = haversine_distance_m(latitude, longitude, lats[located], lons[located])

    within = distances <= building_filter.search_radius_m
    return BuildingInventorySummary(
        count=int(np.count_nonzero(qualifies & within)),
        search_radius_m=building_filter.search_radius_m,
    )

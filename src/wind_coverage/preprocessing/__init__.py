"""Preprocessing utilities for wind samples and building inventories."""

from __future__ import annotations

from .buildings import (
    BuildingFilter,
    BuildingInventorySummary,
    haversine_distance_m,
    qualifying_building_mask,
    summarise_building_raster,
    summarise_building_table,
)
from .wind_samples import (
    MEASUREMENT_HEIGHT_M,
    WindSample,
    group_samples_by_day,
    sample_components,
    samples_from_frame,
    samples_to_frame,
)

__all__ = [
    "BuildingFilter",
    "BuildingInventorySummary",
    "haversine_distance_m",
    "qualifying_building_mask",
    "summarise_building_raster",
    "summarise_building_table",
    "MEASUREMENT_HEIGHT_M",
    "WindSample",
    "group_samples_by_day",
    "sample_components",
    "samples_from_frame",
    "samples_to_frame",
]

"""Tests for the JSON configuration loaders and IO value objects."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from wind_coverage.io import (
    DEFAULT_LOCATIONS,
    DateRange,
    GeoPoint,
    load_building_filter,
    load_preset_locations,
    load_quality_thresholds,
    load_turbine_config,
)
from wind_coverage.preprocessing import BuildingFilter
from wind_coverage.stats import QualityThresholds, TurbineConfig


def _write_config(path: Path, payload: dict) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_missing_configuration_returns_defaults(tmp_path: Path) -> None:
    missing = tmp_path / "absent.json"
    assert load_turbine_config(missing) == TurbineConfig()
    assert load_building_filter(missing) == BuildingFilter()
    assert load_quality_thresholds(missing) == QualityThresholds()
    assert load_preset_locations(missing) == dict(DEFAULT_LOCATIONS)


def test_partial_overrides_keep_remaining_defaults(tmp_path: Path) -> None:
    config = _write_config(
        tmp_path / "config.json",
        {
            "turbine": {"rotor_diameter_m": 90, "max_generation_kw": 2000},
            "buildings": {"search_radius_m": 2500},
            "quality_thresholds": {"excellent": 500},
        },
    )

    turbine = load_turbine_config(config)
    assert turbine.rotor_diameter_m == 90.0
    assert turbine.max_generation_kw == 2000.0
    assert turbine.system_efficiency == 0.40
    assert load_building_filter(config).search_radius_m == 2500.0
    assert load_quality_thresholds(config) == QualityThresholds(good=200.0, excellent=500.0)


def test_invalid_json_raises_value_error(tmp_path: Path) -> None:
    config = tmp_path / "broken.json"
    config.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_turbine_config(config)


def test_invalid_values_are_rejected_by_dataclasses(tmp_path: Path) -> None:
    config = _write_config(tmp_path / "config.json", {"turbine": {"system_efficiency": 2.0}})
    with pytest.raises(ValueError):
        load_turbine_config(config)


def test_locations_use_longitude_latitude_pairs(tmp_path: Path) -> None:
    config = _write_config(tmp_path / "config.json", {"locations": {"Test site": [-15.5, 18.25]}})
    locations = load_preset_locations(config)
    assert locations == {"Test site": GeoPoint(latitude=18.25, longitude=-15.5)}

    bad = _write_config(tmp_path / "bad.json", {"locations": {"Broken": [1.0]}})
    with pytest.raises(ValueError):
        load_preset_locations(bad)


def test_geo_point_validates_ranges() -> None:
    with pytest.raises(ValueError):
        GeoPoint(latitude=91.0, longitude=0.0)
    with pytest.raises(ValueError):
        GeoPoint(latitude=0.0, longitude=-181.0)


def test_date_range_is_half_open_and_utc() -> None:
    window = DateRange(start=datetime(2024, 1, 1), end=datetime(2024, 1, 2))
    assert window.start.tzinfo == timezone.utc
    assert window.contains(datetime(2024, 1, 1, 23, 59))
    assert not window.contains(datetime(2024, 1, 2))
    with pytest.raises(ValueError):
        DateRange(start=datetime(2024, 1, 2), end=datetime(2024, 1, 1))


def test_trailing_year_window() -> None:
    window = DateRange.trailing_year(datetime(2024, 2, 29, 12, tzinfo=timezone.utc))
    assert window.start == datetime(2023, 2, 28, 12, tzinfo=timezone.utc)
    assert window.end == datetime(2024, 2, 29, 12, tzinfo=timezone.utc)

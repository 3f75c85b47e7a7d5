"""Tests for the DuckDB-backed wind source and the building table source."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pandas as pd
import pytest

from wind_coverage.io import BuildingInventorySource, DateRange, GeoPoint, WindDataSource
from wind_coverage.io.sources import ParquetWindDataSource, TabularBuildingInventorySource
from wind_coverage.preprocessing import BuildingFilter


def _make_wind_dataset(path: Path) -> None:
    timestamps = pd.date_range("2024-01-01", periods=72, freq="h", tz="UTC")
    frames = []
    for lat, lon, u in ((2.0, 45.25, 5.0), (2.25, 45.5, 9.0)):
        frames.append(
            pd.DataFrame(
                {
                    "timestamp": timestamps,
                    "latitude": lat,
                    "longitude": lon,
                    "u_component_100m": u,
                    "v_component_100m": 0.0,
                }
            )
        )
    pd.concat(frames, ignore_index=True).to_parquet(path)


def test_wind_source_snaps_to_nearest_node_and_filters_dates(tmp_path: Path) -> None:
    dataset = tmp_path / "wind.parquet"
    _make_wind_dataset(dataset)
    source = ParquetWindDataSource(dataset)
    assert isinstance(source, WindDataSource)

    window = DateRange(start=datetime(2024, 1, 2), end=datetime(2024, 1, 3))
    samples = source.fetch_samples(GeoPoint(latitude=2.03, longitude=45.34), window)

    assert len(samples) == 24
    assert all(sample.u_component == 5.0 for sample in samples)
    assert samples[0].timestamp == datetime(2024, 1, 2, tzinfo=timezone.utc)
    assert samples[-1].timestamp == datetime(2024, 1, 2, 23, tzinfo=timezone.utc)

    other = source.fetch_samples(GeoPoint(latitude=2.3, longitude=45.5), window)
    assert all(sample.u_component == 9.0 for sample in other)


def test_wind_source_latest_timestamp(tmp_path: Path) -> None:
    dataset = tmp_path / "wind.parquet"
    _make_wind_dataset(dataset)
    source = ParquetWindDataSource(dataset)
    latest = source.latest_timestamp(GeoPoint(latitude=2.0, longitude=45.25))
    assert latest == datetime(2024, 1, 3, 23, tzinfo=timezone.utc)


def test_wind_source_rejects_distant_nodes(tmp_path: Path) -> None:
    dataset = tmp_path / "wind.parquet"
    _make_wind_dataset(dataset)
    source = ParquetWindDataSource(dataset, max_snap_distance_m=50_000.0)
    far_point = GeoPoint(latitude=-33.9, longitude=18.46)
    window = DateRange(start=datetime(2024, 1, 1), end=datetime(2024, 1, 4))

    assert source.fetch_samples(far_point, window) == ()
    assert source.latest_timestamp(far_point) is None


def test_wind_source_requires_existing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ParquetWindDataSource(tmp_path / "missing.parquet")


def test_building_source_reads_csv(tmp_path: Path) -> None:
    path = tmp_path / "buildings.csv"
    pd.DataFrame(
        {
            "latitude": [2.03, 2.031, 2.5],
            "longitude": [45.34, 45.341, 45.34],
            "confidence": [0.9, 0.8, 0.9],
            "height_m": [3.0, 6.0, 3.0],
        }
    ).to_csv(path, index=False)

    source = TabularBuildingInventorySource.from_path(path)
    assert isinstance(source, BuildingInventorySource)
    summary = source.summarise(GeoPoint(latitude=2.03, longitude=45.34), BuildingFilter())
    assert summary.count == 2

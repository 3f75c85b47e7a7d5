"""File-backed wind and building data sources.

``ParquetWindDataSource`` reads a gridded wind extract stored as (Geo)Parquet
with one row per grid node and timestamp. Queries run through an in-memory
DuckDB connection so only the rows of the grid node closest to the requested
point are materialised. Timestamps are exchanged as epoch milliseconds, which
DuckDB derives identically for naive (assumed UTC) and zone-aware columns.

``TabularBuildingInventorySource`` wraps a footprint table with one row per
detected structure and delegates counting to
:func:`wind_coverage.preprocessing.buildings.summarise_building_table`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Tuple

import duckdb
import numpy as np
import pandas as pd

from ..preprocessing.buildings import (
    BuildingFilter,
    BuildingInventorySummary,
    haversine_distance_m,
    summarise_building_table,
)
from ..preprocessing.wind_samples import WindSample, samples_from_frame
from . import DateRange, GeoPoint

__all__ = ["ParquetWindDataSource", "TabularBuildingInventorySource"]

LOGGER = logging.getLogger(__name__)


def _escape_path_for_sql(path: Path) -> str:
    return path.as_posix().replace("'", "''")


def _epoch_ms(value: datetime) -> int:
    return int(round(value.timestamp() * 1000.0))


class ParquetWindDataSource:
    """Wind-vector samples for the nearest grid node of a Parquet extract.

    The dataset must expose ``timestamp``, ``latitude``, ``longitude``,
    ``u_component_100m`` and ``v_component_100m`` columns.
    """

    def __init__(self, dataset_path: str | Path, *, max_snap_distance_m: float | None = None) -> None:
        path = Path(dataset_path)
        if not path.exists():
            raise FileNotFoundError(f"Wind dataset not found: {path}")
        if max_snap_distance_m is not None and max_snap_distance_m <= 0.0:
            raise ValueError("max_snap_distance_m must be positive when provided.")
        self.dataset_path = path.resolve()
        self.max_snap_distance_m = max_snap_distance_m

    @property
    def _relation(self) -> str:
        return f"read_parquet('{_escape_path_for_sql(self.dataset_path)}')"

    def _nearest_node(self, conn: duckdb.DuckDBPyConnection, point: GeoPoint) -> Tuple[float, float] | None:
        row = conn.execute(
            f"""
            SELECT latitude, longitude
            FROM {self._relation}
            WHERE latitude IS NOT NULL AND longitude IS NOT NULL
            GROUP BY latitude, longitude
            ORDER BY POWER(latitude - ?, 2) + POWER(longitude - ?, 2), latitude, longitude
            LIMIT 1
            """,
            [point.latitude, point.longitude],
        ).fetchone()
        if row is None:
            return None

        node_lat, node_lon = float(row[0]), float(row[1])
        if self.max_snap_distance_m is not None:
            distance = float(
                haversine_distance_m(point.latitude, point.longitude, np.array([node_lat]), np.array([node_lon]))[0]
            )
            if distance > self.max_snap_distance_m:
                LOGGER.warning(
                    "Nearest wind grid node (%.4f, %.4f) lies %.0f m from the requested point; ignoring it.",
                    node_lat,
                    node_lon,
                    distance,
                )
                return None
        return node_lat, node_lon

    def fetch_samples(self, point: GeoPoint, date_range: DateRange) -> Tuple[WindSample, ...]:
        with duckdb.connect(database=":memory:") as conn:
            node = self._nearest_node(conn, point)
            if node is None:
                return ()
            frame = conn.execute(
                f"""
                SELECT epoch_ms(timestamp) AS epoch_ms, u_component_100m, v_component_100m
                FROM {self._relation}
                WHERE latitude = ? AND longitude = ?
                  AND epoch_ms(timestamp) >= ? AND epoch_ms(timestamp) < ?
                ORDER BY epoch_ms
                """,
                [node[0], node[1], _epoch_ms(date_range.start), _epoch_ms(date_range.end)],
            ).fetchdf()

        LOGGER.debug("Fetched %d wind samples from node (%.4f, %.4f)", len(frame), node[0], node[1])
        if frame.empty:
            return ()
        frame["timestamp"] = pd.to_datetime(frame["epoch_ms"], unit="ms", utc=True)
        return samples_from_frame(frame)

    def latest_timestamp(self, point: GeoPoint) -> datetime | None:
        with duckdb.connect(database=":memory:") as conn:
            node = self._nearest_node(conn, point)
            if node is None:
                return None
            row = conn.execute(
                f"""
                SELECT MAX(epoch_ms(timestamp))
                FROM {self._relation}
                WHERE latitude = ? AND longitude = ?
                """,
                [node[0], node[1]],
            ).fetchone()

        if row is None or row[0] is None:
            return None
        return datetime.fromtimestamp(int(row[0]) / 1000.0, tz=timezone.utc)


class TabularBuildingInventorySource:
    """Building counts derived from an in-memory footprint table."""

    def __init__(self, frame: pd.DataFrame) -> None:
        self.frame = frame

    @classmethod
    def from_path(cls, path: str | Path) -> "TabularBuildingInventorySource":
        """Load a footprint table from Parquet or CSV."""

        target = Path(path)
        if not target.exists():
            raise FileNotFoundError(f"Building dataset not found: {target}")
        if target.suffix.lower() == ".csv":
            frame = pd.read_csv(target)
        else:
            frame = pd.read_parquet(target)
        LOGGER.debug("Loaded %d building footprints from %s", len(frame), target)
        return cls(frame)

    def summarise(self, point: GeoPoint, building_filter: BuildingFilter) -> BuildingInventorySummary:
        return summarise_building_table(
            self.frame,
            latitude=point.latitude,
            longitude=point.longitude,
            building_filter=building_filter,
        )

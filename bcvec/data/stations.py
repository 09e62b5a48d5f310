"""
Weather station inventory handling.

Parses the Environment and Climate Change Canada station inventory, applies
the inventory's longitude sanity filter and derives record lengths.
"""

import logging
from typing import Iterable

import geopandas as gpd
import numpy as np
import pandas as pd

from bcvec.crs import WGS84_CRS
from bcvec.schema import require_columns

logger = logging.getLogger(__name__)

# Inventory header -> internal column name
STATION_COLUMNS = {
    "Station ID": "station_id",
    "Climate ID": "climate_id",
    "Name": "name",
    "Province": "province",
    "Latitude (Decimal Degrees)": "lat",
    "Longitude (Decimal Degrees)": "lon",
    "Elevation (m)": "elevation",
    "HLY First Year": "hly_y1",
    "HLY Last Year": "hly_y2",
    "DLY First Year": "dly_y1",
    "DLY Last Year": "dly_y2",
    "MLY First Year": "mly_y1",
    "MLY Last Year": "mly_y2",
}

FREQUENCIES = ("hly", "dly", "mly")

# The inventory places a few stations east of -50 degrees because of
# coordinate entry errors; Canada's mainland sits entirely west of it.
STATION_MAX_LON = -50.0

RECORD_LENGTH_BINS = [-np.inf, 10, 20, 30, np.inf]
RECORD_LENGTH_LABELS = ["0-10 years", "11-20 years", "21-30 years", "31+ years"]


def tidy_station_table(raw: pd.DataFrame) -> pd.DataFrame:
    """Select and rename the inventory columns used downstream."""
    require_columns(raw, STATION_COLUMNS.keys(), "station inventory")
    df = raw[list(STATION_COLUMNS)].rename(columns=STATION_COLUMNS).copy()
    df["station_id"] = df["station_id"].astype(str)
    df["climate_id"] = df["climate_id"].astype(str)
    return df


def filter_station_longitudes(df: pd.DataFrame, max_lon: float = STATION_MAX_LON) -> pd.DataFrame:
    """Drop rows whose longitude is missing or not strictly west of ``max_lon``.

    This is a sanity filter for the station inventory only. It does not
    describe a general validity rule for geographic coordinates.
    """
    require_columns(df, ["lon", "lat"], "station longitude filter")
    keep = (df["lon"] < max_lon) & df["lat"].notna()
    dropped = int((~keep).sum())
    if dropped:
        logger.warning(f"Dropped {dropped} stations with longitude >= {max_lon} or missing coordinates")
    return df.loc[keep].reset_index(drop=True)


def stations_to_points(df: pd.DataFrame) -> gpd.GeoDataFrame:
    """Build a WGS84 point collection from the lon/lat columns."""
    return gpd.GeoDataFrame(
        df.copy(),
        geometry=gpd.points_from_xy(df["lon"], df["lat"]),
        crs=WGS84_CRS,
    )


def record_length(first_year: pd.Series, last_year: pd.Series) -> pd.Series:
    """End year minus start year, missing where either bound is missing."""
    return (last_year - first_year).astype("Float64")


def classify_record_length(lengths: pd.Series) -> pd.Series:
    return pd.cut(
        lengths.astype(float),
        bins=RECORD_LENGTH_BINS,
        labels=RECORD_LENGTH_LABELS,
        right=True,
    )


def add_record_lengths(
    stations: gpd.GeoDataFrame,
    frequencies: Iterable[str] = FREQUENCIES,
) -> gpd.GeoDataFrame:
    """Return a copy with ``<freq>_length`` and ``<freq>_class`` columns."""
    stations = stations.copy()
    for freq in frequencies:
        first, last = f"{freq}_y1", f"{freq}_y2"
        require_columns(stations, [first, last], "record length")
        stations[f"{freq}_length"] = record_length(stations[first], stations[last])
        stations[f"{freq}_class"] = classify_record_length(stations[f"{freq}_length"])
    return stations

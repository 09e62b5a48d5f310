"""
The three worked examples as independent functions over explicit inputs.

1. ``station_map``: stations with record length classes, in a planar CRS
2. ``stations_near_catchment``: stations within a buffer around a catchment
3. ``alpine_coverage``: percentage of each catchment in alpine BEC zones

None of these read files or depend on earlier calls. Loading is done by the
caller through ``bcvec.data.load``.
"""

import logging
from typing import Any, Iterable, Optional, Tuple

import geopandas as gpd
import pandas as pd

from bcvec.aggregate import coverage_report, feature_areas
from bcvec.crs import BC_ALBERS_CRS
from bcvec.data.stations import FREQUENCIES, RECORD_LENGTH_LABELS, add_record_lengths
from bcvec.exceptions import SchemaMismatch
from bcvec.schema import ALPINE_ZONES, require_columns
from bcvec.spatial import buffer, filter_within, intersect, reproject

logger = logging.getLogger(__name__)


def station_map(
    stations: gpd.GeoDataFrame,
    boundary: Optional[gpd.GeoDataFrame] = None,
    province: Optional[str] = None,
    frequencies: Iterable[str] = FREQUENCIES,
    target_crs: Any = BC_ALBERS_CRS,
) -> gpd.GeoDataFrame:
    """
    Prepares the station inventory for mapping.

    Args:
        stations: Station points as loaded from the inventory
        boundary: Optional polygons; only stations inside (or on) them are kept
        province: Optional province name to filter on, case insensitive
        frequencies: Record frequencies to derive lengths and classes for
        target_crs: Planar CRS for the output

    Returns:
        GeoDataFrame of stations in ``target_crs`` with ``<freq>_length`` and
        ``<freq>_class`` columns
    """
    if province is not None:
        require_columns(stations, ["province"], "station_map")
        stations = stations[stations["province"].str.upper() == province.upper()]
        logger.info(f"{len(stations)} stations in {province}")

    stations = add_record_lengths(stations, frequencies=frequencies)
    stations = reproject(stations, target_crs)

    if boundary is not None:
        stations = filter_within(stations, reproject(boundary, target_crs))
    return stations


def record_class_counts(stations: gpd.GeoDataFrame, frequency: str = "hly") -> pd.DataFrame:
    """Number of stations in each record length class, empty classes included."""
    column = f"{frequency}_class"
    require_columns(stations, [column], "record_class_counts")
    counts = stations[column].value_counts().reindex(RECORD_LENGTH_LABELS, fill_value=0)
    return counts.rename_axis("record_length").reset_index(name="stations")


def stations_near_catchment(
    stations: gpd.GeoDataFrame,
    catchments: gpd.GeoDataFrame,
    distance: float,
    station_id: Optional[str] = None,
    target_crs: Any = BC_ALBERS_CRS,
) -> Tuple[gpd.GeoDataFrame, gpd.GeoDataFrame]:
    """
    Finds the stations within ``distance`` metres of a catchment.

    Args:
        stations: Station points in any CRS
        catchments: Catchment polygons in any CRS
        distance: Buffer distance in metres
        station_id: Gauging station identifying the catchment. When None
            every catchment in ``catchments`` is buffered.
        target_crs: Planar CRS used for buffering and for the outputs

    Returns:
        Tuple of (buffered catchment polygons, stations within them)
    """
    if station_id is not None:
        require_columns(catchments, ["station_id"], "stations_near_catchment")
        catchments = catchments[catchments["station_id"] == station_id]
        if catchments.empty:
            raise ValueError(f"No catchment found for station {station_id}")

    region = buffer(reproject(catchments, target_crs), distance)
    nearby = filter_within(reproject(stations, target_crs), region)
    logger.info(f"Found {len(nearby)} stations within {distance} m of {len(region)} catchment(s)")
    return region, nearby


def alpine_coverage(
    catchments: gpd.GeoDataFrame,
    zones: gpd.GeoDataFrame,
    alpine_zones: Iterable[str] = ALPINE_ZONES,
    key: str = "station_id",
    name: str = "name",
    area: Optional[str] = None,
    area_scale: float = 1.0,
    target_crs: Any = BC_ALBERS_CRS,
) -> Tuple[pd.DataFrame, gpd.GeoDataFrame]:
    """
    Calculates the percentage of each catchment covered by alpine zones.

    Args:
        catchments: Catchment polygons, one row per ``key``
        zones: BEC zone polygons with a ``zone`` column
        alpine_zones: Zone codes counted as alpine
        key: Catchment identifier column
        name: Catchment name column
        area: Catchment column holding the total area, such as the published
            drainage area ``area_km2``. When None the area is measured from
            the catchment geometry in ``target_crs`` instead of read from the
            attribute table.
        area_scale: Multiplier converting ``area`` to square metres, e.g.
            ``1e6`` for an area held in square kilometres
        target_crs: Planar CRS in metres used for all area calculations

    Returns:
        Tuple of (coverage table, alpine intersections). The table has one
        row per catchment, including those with no alpine area.
    """
    require_columns(catchments, [key, name], "alpine_coverage catchments")
    require_columns(zones, ["zone"], "alpine_coverage zones")
    duplicated = catchments[key][catchments[key].duplicated()]
    if len(duplicated):
        raise SchemaMismatch(f"alpine_coverage: repeated catchment keys {sorted(set(duplicated))}")

    alpine = zones.loc[zones["zone"].isin(list(alpine_zones)), ["zone", zones.geometry.name]]
    logger.info(f"{len(alpine)} alpine zone polygons")

    catchments = reproject(catchments, target_crs)
    alpine = reproject(alpine, target_crs)

    if area is None:
        reference = feature_areas(catchments, column="catchment_area")
        area = "catchment_area"
    else:
        require_columns(catchments, [area], "alpine_coverage catchments")
        reference = catchments.copy()
        reference[area] = reference[area] * area_scale

    keep = [key, name, catchments.geometry.name]
    intersections = intersect(catchments[keep], alpine)
    report = coverage_report(intersections, reference, key=key, name=name, area=area)
    return report, intersections

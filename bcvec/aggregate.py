"""
Area aggregation and coverage reporting.
"""

import logging
from typing import Iterable, List

import geopandas as gpd
import pandas as pd

from bcvec.crs import require_metric, require_same_crs
from bcvec.exceptions import SchemaMismatch, ZeroReferenceAreaError
from bcvec.schema import require_columns

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ["covered_area", "total_area", "percentage"]


def feature_areas(gdf: gpd.GeoDataFrame, column: str = "area") -> gpd.GeoDataFrame:
    """Return a copy with the planar area of each feature in ``column``."""
    require_metric(gdf, "feature_areas")
    result = gdf.copy()
    result[column] = gdf.geometry.area
    return result


def concat_collections(collections: Iterable[gpd.GeoDataFrame]) -> gpd.GeoDataFrame:
    """
    Concatenates collections that share a CRS and a set of columns.

    Used to combine the layers of a multi-layer geodatabase after each has
    been loaded on its own.
    """
    collections: List[gpd.GeoDataFrame] = list(collections)
    if not collections:
        raise ValueError("No collections to concatenate")

    first = collections[0]
    for other in collections[1:]:
        require_same_crs(first, other, "concat_collections")
        if set(other.columns) != set(first.columns):
            raise SchemaMismatch(
                "concat_collections: column sets differ "
                f"({sorted(set(first.columns) ^ set(other.columns))})"
            )

    combined = pd.concat([c[list(first.columns)] for c in collections], ignore_index=True)
    return gpd.GeoDataFrame(combined, geometry=first.geometry.name, crs=first.crs)


def sum_area_by(gdf: gpd.GeoDataFrame, key: str, area_column: str = "area") -> pd.DataFrame:
    """
    Sums the planar area of the features within each ``key`` group.

    Only keys present in ``gdf`` get a row. Join the result against the full
    key domain to report keys with no area.
    """
    require_columns(gdf, [key], "sum_area_by")
    with_area = feature_areas(gdf, column=area_column)
    sums = (
        pd.DataFrame(with_area[[key, area_column]])
        .groupby(key, as_index=False, sort=True)[area_column]
        .sum()
    )
    return sums


def coverage_report(
    intersections: gpd.GeoDataFrame,
    reference: pd.DataFrame,
    key: str,
    name: str,
    area: str,
) -> pd.DataFrame:
    """
    Reports the percentage of each reference feature covered by the intersections.

    Args:
        intersections: Output of ``bcvec.spatial.intersect`` in a metric CRS,
            carrying the ``key`` column. May have zero rows.
        reference: One row per key in the domain, with ``name`` and the
            total ``area`` of each key in the units of the intersection CRS
            squared.
        key: Column identifying the reference feature
        name: Column holding the reference feature's display name
        area: Column of ``reference`` holding the total area

    Returns:
        DataFrame with columns key, name, covered_area, total_area and
        percentage, one row per reference row. percentage is
        ``100 * round(covered_area / total_area, 3)``.

    Raises:
        ZeroReferenceAreaError: A reference feature has zero (or missing) area
    """
    require_columns(reference, [key, name, area], "coverage_report reference")
    table = pd.DataFrame(reference[[key, name, area]]).rename(columns={area: "total_area"})

    zero = table.loc[~(table["total_area"] > 0), key]
    if len(zero):
        raise ZeroReferenceAreaError(zero.tolist())

    if intersections.empty:
        require_metric(intersections, "coverage_report")
        report = table.assign(covered_area=float("nan"))
    else:
        sums = sum_area_by(intersections, key, area_column="covered_area")
        report = table.merge(sums, on=key, how="left")
    # Keys with no intersecting features have no row in sums
    uncovered = report["covered_area"].isna()
    if uncovered.any():
        logger.info(f"{int(uncovered.sum())} features have no coverage; reporting 0%")
    report["covered_area"] = report["covered_area"].fillna(0.0)

    report["percentage"] = 100 * (report["covered_area"] / report["total_area"]).round(3)
    return report[[key, name] + REPORT_COLUMNS]

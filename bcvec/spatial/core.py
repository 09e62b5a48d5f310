"""
Buffering, point-in-polygon filtering and polygon intersection.

All functions return new GeoDataFrames and leave their inputs untouched.
"""

import logging
from typing import Optional, Union

import geopandas as gpd
import numpy as np
import pandas as pd
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from bcvec.crs import require_metric, require_same_crs
from bcvec.exceptions import SchemaMismatch
from bcvec.schema import POLYGON_TYPES

logger = logging.getLogger(__name__)


def buffer(gdf: gpd.GeoDataFrame, distance: Union[float, int]) -> gpd.GeoDataFrame:
    """
    Expands every geometry outward by ``distance`` in the units of a metric CRS.

    Args:
        gdf: Collection in a projected CRS measured in metres
        distance: Non-negative buffer distance in metres. A distance of zero
            returns an unchanged copy.

    Returns:
        GeoDataFrame with the buffered geometries and the original attributes
    """
    require_metric(gdf, "buffer")
    if distance < 0:
        raise ValueError(f"Buffer distance must be non-negative, got {distance}")
    result = gdf.copy()
    if distance > 0:
        result[gdf.geometry.name] = gdf.geometry.buffer(distance)
    return result


def filter_within(points: gpd.GeoDataFrame, regions: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Keeps the points that intersect any region, boundary included.

    The returned rows keep their attributes, index and relative order.
    """
    require_same_crs(points, regions, "filter_within")
    if points.empty or regions.empty:
        return points.iloc[0:0].copy()

    # Bulk query against the region index: row 0 holds positions into points
    hits = regions.sindex.query(points.geometry, predicate="intersects")
    mask = np.zeros(len(points), dtype=bool)
    mask[hits[0]] = True
    logger.info(f"{mask.sum()} of {len(points)} points fall within {len(regions)} regions")
    return points.iloc[np.flatnonzero(mask)].copy()


def _polygonal_part(geom: Optional[BaseGeometry]) -> Optional[BaseGeometry]:
    if geom is None or geom.is_empty:
        return None
    if geom.geom_type in POLYGON_TYPES:
        return geom
    if geom.geom_type == "GeometryCollection":
        polygons = [g for g in geom.geoms if g.geom_type in POLYGON_TYPES and not g.is_empty]
        if polygons:
            return unary_union(polygons)
    # Shared edges and corners only
    return None


def _require_polygons(gdf: gpd.GeoDataFrame, name: str) -> None:
    types = set(gdf.geometry.dropna().geom_type.unique())
    unexpected = types - set(POLYGON_TYPES)
    if unexpected:
        raise SchemaMismatch(f"intersect: {name} has non-polygon geometries {sorted(unexpected)}")


def _attributes(gdf: gpd.GeoDataFrame, positions: np.ndarray) -> pd.DataFrame:
    attrs = pd.DataFrame(gdf.drop(columns=gdf.geometry.name))
    return attrs.iloc[positions].reset_index(drop=True)


def intersect(a: gpd.GeoDataFrame, b: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Intersects every overlapping pair of polygons from ``a`` and ``b``.

    Each output row holds the polygonal intersection of one feature of ``a``
    with one feature of ``b`` and the attributes of both. Where both inputs
    carry a column of the same name the value from ``a`` is kept; rename
    columns beforehand to keep both. Pairs that do not overlap, or only
    touch along an edge or corner, are left out.

    Rows are ordered by the position of the ``a`` feature, then ``b``.
    """
    crs = require_same_crs(a, b, "intersect")
    _require_polygons(a, "first collection")
    _require_polygons(b, "second collection")

    if a.empty or b.empty:
        ia = ib = np.array([], dtype=int)
    else:
        ia, ib = b.sindex.query(a.geometry, predicate="intersects")
        order = np.lexsort((ib, ia))
        ia, ib = ia[order], ib[order]

    a_attrs = _attributes(a, ia)
    b_attrs = _attributes(b, ib)
    collisions = [c for c in b_attrs.columns if c in a_attrs.columns]
    if collisions:
        logger.warning(f"intersect: keeping first collection's values for shared columns {collisions}")
    attrs = pd.concat([a_attrs, b_attrs.drop(columns=collisions)], axis=1)

    left = a.geometry.iloc[ia].reset_index(drop=True)
    right = b.geometry.iloc[ib].reset_index(drop=True)
    parts = [_polygonal_part(g) for g in left.intersection(right)]
    keep = np.array([p is not None for p in parts], dtype=bool)

    result = gpd.GeoDataFrame(attrs, geometry=gpd.GeoSeries(parts, crs=crs), crs=crs)
    result = result.iloc[np.flatnonzero(keep)].reset_index(drop=True)
    logger.info(f"intersect: {len(result)} overlapping pairs from {len(a)} x {len(b)} features")
    return result

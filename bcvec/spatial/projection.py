import logging
from typing import Any

import geopandas as gpd
from pyproj.exceptions import CRSError

from bcvec.crs import resolve_crs
from bcvec.exceptions import UnsupportedCrsError

logger = logging.getLogger(__name__)


def reproject(gdf: gpd.GeoDataFrame, target_crs: Any) -> gpd.GeoDataFrame:
    """
    Reprojects a collection to ``target_crs``, returning a new GeoDataFrame.

    Attribute values are untouched and the input is never modified.

    Raises:
        UnsupportedCrsError: The collection has no CRS, or either CRS cannot
            be resolved or transformed between.
    """
    if gdf.crs is None:
        raise UnsupportedCrsError("Cannot reproject a collection without a CRS")
    source = resolve_crs(gdf.crs)
    target = resolve_crs(target_crs)
    if source.equals(target):
        return gdf.copy()
    try:
        projected = gdf.to_crs(target)
    except CRSError as e:
        raise UnsupportedCrsError(
            f"No transformation from {source.to_string()} to {target.to_string()}: {e}"
        ) from e
    logger.debug(f"Reprojected {len(gdf)} features to {target.to_string()}")
    return projected

"""Coordinate reference system constants and precondition checks.

- WGS84_CRS: WGS84 geographic coordinates (EPSG:4326), used for storage
  and for the station inventory as published
- BC_ALBERS_CRS: BC Albers equal area projection (EPSG:3005), the planar
  CRS used for buffering and area calculations
"""

from typing import Any, Optional

import geopandas as gpd
from pyproj import CRS
from pyproj.exceptions import CRSError

from bcvec.exceptions import CrsMismatchError, NonMetricCrsError, UnsupportedCrsError

WGS84_CRS = CRS.from_epsg(4326)
BC_ALBERS_CRS = CRS.from_epsg(3005)

_METRE_UNITS = {"metre", "meter", "m"}


def resolve_crs(crs: Any) -> CRS:
    """Resolve an EPSG code, authority string, PROJ string or WKT to a CRS."""
    if crs is None:
        raise UnsupportedCrsError("CRS is undefined")
    try:
        return CRS.from_user_input(crs)
    except CRSError as e:
        raise UnsupportedCrsError(f"Cannot resolve CRS {crs!r}: {e}") from e


def is_metric(crs: Any) -> bool:
    """True when the CRS is projected and its axes are measured in metres."""
    crs = resolve_crs(crs)
    if not crs.is_projected:
        return False
    units = {axis.unit_name.lower() for axis in crs.axis_info}
    return bool(units) and units <= _METRE_UNITS


def require_metric(gdf: gpd.GeoDataFrame, operation: str) -> CRS:
    if gdf.crs is None:
        raise NonMetricCrsError(f"{operation} requires a metric CRS but the collection has none")
    crs = resolve_crs(gdf.crs)
    if not is_metric(crs):
        raise NonMetricCrsError(
            f"{operation} requires a projected CRS in metres, got {crs.to_string()}"
        )
    return crs


def require_same_crs(
    left: gpd.GeoDataFrame,
    right: gpd.GeoDataFrame,
    operation: str,
) -> Optional[CRS]:
    if left.crs is None or right.crs is None:
        if left.crs is None and right.crs is None:
            return None
        raise CrsMismatchError(f"{operation}: one collection has no CRS")
    left_crs = resolve_crs(left.crs)
    right_crs = resolve_crs(right.crs)
    if not left_crs.equals(right_crs):
        raise CrsMismatchError(
            f"{operation}: {left_crs.to_string()} does not match {right_crs.to_string()}"
        )
    return left_crs

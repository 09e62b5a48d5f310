"""
Source descriptions for the loader.

Each source knows how to read itself from its authoritative location. The
loader in ``bcvec.data.loaders`` adds caching and schema validation on top.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import geopandas as gpd
import pandas as pd
import requests

from bcvec.crs import resolve_crs
from bcvec.data.stations import (
    STATION_MAX_LON,
    filter_station_longitudes,
    stations_to_points,
    tidy_station_table,
)
from bcvec.exceptions import SchemaMismatch, SourceUnavailable
from bcvec.schema import CATCHMENT_SCHEMA, CollectionSchema, STATION_SCHEMA, ZONE_SCHEMA

logger = logging.getLogger(__name__)

BC_WFS_URL = "https://openmaps.gov.bc.ca/geo/pub/wfs"
BEC_LAYER = "WHSE_FOREST_VEGETATION.BEC_BIOGEOCLIMATIC_POLY"


def _select_columns(gdf: gpd.GeoDataFrame, columns: Optional[Dict[str, str]]) -> gpd.GeoDataFrame:
    if not columns:
        return gdf
    missing = [c for c in columns if c not in gdf.columns]
    if missing:
        raise SchemaMismatch(f"missing columns {missing}, found {list(gdf.columns)}")
    keep = list(columns) + [gdf.geometry.name]
    return gdf[keep].rename(columns=columns)


def _check_exists(path: Path) -> None:
    if not path.exists():
        raise SourceUnavailable(str(path), "file not found")


@dataclass(frozen=True)
class StationInventorySource:
    """Delimited text station inventory with decimal degree coordinates."""

    path: Union[str, Path]
    cache_key: Optional[str] = None
    skiprows: int = 3
    max_lon: float = STATION_MAX_LON
    schema: Optional[CollectionSchema] = STATION_SCHEMA

    @property
    def description(self) -> str:
        return str(self.path)

    def read(self) -> gpd.GeoDataFrame:
        path = Path(self.path)
        _check_exists(path)
        try:
            raw = pd.read_csv(
                path,
                skiprows=self.skiprows,
                dtype={"Climate ID": str, "Station ID": str},
            )
        except (OSError, ValueError) as e:
            raise SourceUnavailable(str(path), str(e)) from e
        stations = filter_station_longitudes(tidy_station_table(raw), max_lon=self.max_lon)
        return stations_to_points(stations)


@dataclass(frozen=True)
class ShapefileSource:
    """A single-layer vector file such as a shapefile set or GeoJSON."""

    path: Union[str, Path]
    cache_key: Optional[str] = None
    columns: Optional[Dict[str, str]] = None
    schema: Optional[CollectionSchema] = None

    @property
    def description(self) -> str:
        return str(self.path)

    def read(self) -> gpd.GeoDataFrame:
        path = Path(self.path)
        _check_exists(path)
        try:
            gdf = gpd.read_file(path)
        except Exception as e:
            raise SourceUnavailable(str(path), str(e)) from e
        return _select_columns(gdf, self.columns)


@dataclass(frozen=True)
class GeodatabaseLayerSource:
    """One named layer of a multi-layer file geodatabase."""

    path: Union[str, Path]
    layer: str
    cache_key: Optional[str] = None
    columns: Optional[Dict[str, str]] = None
    schema: Optional[CollectionSchema] = None

    @property
    def description(self) -> str:
        return f"{self.path}:{self.layer}"

    def read(self) -> gpd.GeoDataFrame:
        path = Path(self.path)
        _check_exists(path)
        try:
            gdf = gpd.read_file(path, layer=self.layer)
        except Exception as e:
            raise SourceUnavailable(self.description, str(e)) from e
        return _select_columns(gdf, self.columns)


@dataclass(frozen=True)
class RemoteLayerSource:
    """A reference layer served as GeoJSON by a WFS endpoint.

    ``params`` are passed as the query string. The response CRS is taken
    from ``crs`` and should match the ``srsName`` requested.

    When ``page_size`` is set the layer is requested in pages using the WFS
    2.0 ``count``/``startIndex`` parameters. The load fails unless the number
    of features received equals the server's ``numberMatched``, so a
    truncated layer is never returned.
    """

    url: str
    params: Dict[str, Any] = field(default_factory=dict)
    crs: Any = "EPSG:3005"
    cache_key: Optional[str] = None
    columns: Optional[Dict[str, str]] = None
    schema: Optional[CollectionSchema] = None
    timeout: float = 60
    page_size: Optional[int] = None

    @property
    def description(self) -> str:
        return self.url

    def _get_page(self, params: Dict[str, Any]) -> Tuple[List[Dict], Optional[int]]:
        """One GetFeature request, returning its features and numberMatched."""
        try:
            r = requests.get(self.url, params=params, timeout=self.timeout)
            r.raise_for_status()
            payload = r.json()
            features = payload["features"]
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            raise SourceUnavailable(self.url, str(e)) from e
        return features, _number_matched(payload)

    def read(self) -> gpd.GeoDataFrame:
        crs = resolve_crs(self.crs)
        features = []
        while True:
            params = dict(self.params)
            if self.page_size:
                params.update(count=self.page_size, startIndex=len(features))
            page, matched = self._get_page(params)
            features.extend(page)
            logger.debug(f"Received {len(features)} of {matched if matched is not None else 'unknown'} features from {self.url}")

            if not self.page_size or not page:
                break
            if matched is not None and len(features) >= matched:
                break
            if matched is None and len(page) < self.page_size:
                break

        if matched is not None and len(features) != matched:
            raise SourceUnavailable(
                self.url, f"received {len(features)} of {matched} matched features"
            )
        gdf = gpd.GeoDataFrame.from_features(features, crs=crs)
        return _select_columns(gdf, self.columns)


def _number_matched(payload: Dict[str, Any]) -> Optional[int]:
    # WFS 2.0 servers may report "unknown"
    matched = payload.get("numberMatched", payload.get("totalFeatures"))
    try:
        return int(matched)
    except (TypeError, ValueError):
        return None


def wfs_layer_source(
    type_name: str,
    url: str = BC_WFS_URL,
    cache_key: Optional[str] = None,
    columns: Optional[Dict[str, str]] = None,
    schema: Optional[CollectionSchema] = None,
    timeout: float = 60,
    crs: str = "EPSG:3005",
    page_size: Optional[int] = 10000,
    sort_by: Optional[str] = None,
) -> RemoteLayerSource:
    """A whole WFS feature type requested as GeoJSON in ``crs``.

    Paging needs a stable feature order, so pass ``sort_by`` with the
    layer's key column when ``page_size`` is set.
    """
    params = {
        "service": "WFS",
        "version": "2.0.0",
        "request": "GetFeature",
        "typeName": type_name,
        "outputFormat": "json",
        "srsName": crs,
    }
    if sort_by:
        params["sortBy"] = sort_by
    return RemoteLayerSource(
        url=url,
        params=params,
        crs=crs,
        cache_key=cache_key,
        columns=columns,
        schema=schema,
        timeout=timeout,
        page_size=page_size,
    )


def bec_zone_source(
    url: str = BC_WFS_URL,
    cache_key: Optional[str] = "bec_zones",
    timeout: float = 60,
    schema: Optional[CollectionSchema] = ZONE_SCHEMA,
    page_size: Optional[int] = 10000,
) -> RemoteLayerSource:
    """The provincial biogeoclimatic zone layer with its zone code."""
    return wfs_layer_source(
        BEC_LAYER,
        url=url,
        cache_key=cache_key,
        columns={"ZONE": "zone"},
        schema=schema,
        timeout=timeout,
        page_size=page_size,
        sort_by="OBJECTID",
    )


# Water Survey of Canada catchment attributes -> internal column names
WSC_CATCHMENT_COLUMNS = {
    "StationNum": "station_id",
    "NameNom": "name",
    "Area_km2": "area_km2",
}


def catchment_source(
    path: Union[str, Path],
    layer: Optional[str] = None,
    cache_key: Optional[str] = None,
    columns: Optional[Dict[str, str]] = None,
):
    """A catchment polygon file, or one layer of a geodatabase of catchments."""
    columns = WSC_CATCHMENT_COLUMNS if columns is None else columns
    if layer is not None:
        return GeodatabaseLayerSource(
            path=path, layer=layer, cache_key=cache_key, columns=columns, schema=CATCHMENT_SCHEMA
        )
    return ShapefileSource(path=path, cache_key=cache_key, columns=columns, schema=CATCHMENT_SCHEMA)

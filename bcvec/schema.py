"""
Declared attribute schemas for the collections the loaders produce.

Each schema lists the fields a collection must carry, the kind of value held
in each field and the geometry types it may contain. Loaders validate every
collection against its schema before it is cached or returned.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import geopandas as gpd
import pandas as pd
from pandas.api import types as ptypes

from bcvec.exceptions import SchemaMismatch


POINT_TYPES = ("Point",)
POLYGON_TYPES = ("Polygon", "MultiPolygon")

BEC_ZONES = (
    "BAFA", "BG", "BWBS", "CDF", "CMA", "CWH", "ESSF", "ICH",
    "IDF", "IMA", "MH", "MS", "PP", "SBPS", "SBS", "SWB",
)
ALPINE_ZONES = ("BAFA", "CMA", "IMA")


@dataclass(frozen=True)
class Field:
    name: str
    kind: str = "string"  # "string" or "number"
    allowed: Optional[Tuple] = None


@dataclass(frozen=True)
class CollectionSchema:
    name: str
    fields: Tuple[Field, ...]
    geometry_types: Optional[Tuple[str, ...]] = None

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def validate(self, gdf: pd.DataFrame) -> None:
        """Raise SchemaMismatch if ``gdf`` does not satisfy this schema."""
        missing = [name for name in self.field_names if name not in gdf.columns]
        if missing:
            raise SchemaMismatch(f"{self.name}: missing columns {missing}")

        for f in self.fields:
            column = gdf[f.name]
            if f.kind == "number" and not ptypes.is_numeric_dtype(column):
                raise SchemaMismatch(
                    f"{self.name}: column '{f.name}' should be numeric, got {column.dtype}"
                )
            if f.kind == "string" and not _holds_strings(column):
                raise SchemaMismatch(
                    f"{self.name}: column '{f.name}' should hold text, got {column.dtype}"
                )
            if f.allowed is not None:
                unknown = sorted(set(column.dropna()) - set(f.allowed))
                if unknown:
                    raise SchemaMismatch(
                        f"{self.name}: column '{f.name}' has unexpected values {unknown}"
                    )

        if self.geometry_types is not None:
            if not isinstance(gdf, gpd.GeoDataFrame):
                raise SchemaMismatch(f"{self.name}: expected a GeoDataFrame")
            present = set(gdf.geometry.dropna().geom_type.unique())
            unexpected = present - set(self.geometry_types)
            if unexpected:
                raise SchemaMismatch(
                    f"{self.name}: unexpected geometry types {sorted(unexpected)}, "
                    f"expected {list(self.geometry_types)}"
                )


def _holds_strings(column: pd.Series) -> bool:
    values = column.dropna()
    if values.empty:
        return True
    if isinstance(column.dtype, pd.CategoricalDtype):
        values = values.astype(object)
    elif not (ptypes.is_string_dtype(column) or ptypes.is_object_dtype(column)):
        return False
    return bool(values.map(lambda v: isinstance(v, str)).all())


def require_columns(gdf: pd.DataFrame, columns: Iterable[str], context: str) -> None:
    missing = [c for c in columns if c not in gdf.columns]
    if missing:
        raise SchemaMismatch(f"{context}: missing columns {missing}")


STATION_SCHEMA = CollectionSchema(
    name="stations",
    fields=(
        Field("station_id"),
        Field("climate_id"),
        Field("name"),
        Field("province"),
        Field("lat", "number"),
        Field("lon", "number"),
        Field("elevation", "number"),
        Field("hly_y1", "number"),
        Field("hly_y2", "number"),
        Field("dly_y1", "number"),
        Field("dly_y2", "number"),
        Field("mly_y1", "number"),
        Field("mly_y2", "number"),
    ),
    geometry_types=POINT_TYPES,
)

CATCHMENT_SCHEMA = CollectionSchema(
    name="catchments",
    fields=(
        Field("station_id"),
        Field("name"),
        Field("area_km2", "number"),
    ),
    geometry_types=POLYGON_TYPES,
)

ZONE_SCHEMA = CollectionSchema(
    name="bec_zones",
    fields=(Field("zone", allowed=BEC_ZONES),),
    geometry_types=POLYGON_TYPES,
)

BOUNDARY_SCHEMA = CollectionSchema(
    name="boundary",
    fields=(),
    geometry_types=POLYGON_TYPES,
)

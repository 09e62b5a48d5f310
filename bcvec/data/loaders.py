"""
Loading of sources into GeoDataFrames, with optional caching.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

import geopandas as gpd

from bcvec.data.cache import GeoCache
from bcvec.data.sources import GeodatabaseLayerSource
from bcvec.schema import CollectionSchema

logger = logging.getLogger(__name__)


def load(source, cache: Optional[GeoCache] = None) -> gpd.GeoDataFrame:
    """Load a source, serving it from ``cache`` when an entry exists.

    Args:
        source: Any of the source classes in ``bcvec.data.sources``
        cache: Cache to read from and write to. Sources without a
            ``cache_key`` are always read from the authoritative location.

    Returns:
        GeoDataFrame validated against the source's schema

    Raises:
        SourceUnavailable: The source could not be read (nothing is cached)
        SchemaMismatch: The loaded collection does not match the schema
    """
    key = getattr(source, "cache_key", None)
    if cache is not None and key is not None and key in cache:
        logger.info(f"Loading {source.description} from cache ({key})")
        return cache.get(key)

    logger.info(f"Loading {source.description}")
    gdf = source.read()
    schema: Optional[CollectionSchema] = getattr(source, "schema", None)
    if schema is not None:
        schema.validate(gdf)
    logger.info(f"Loaded {len(gdf)} features from {source.description}")

    if cache is not None and key is not None:
        cache.put(key, gdf)
    return gdf


def load_layers(
    path: Union[str, Path],
    layers: Iterable[str],
    cache: Optional[GeoCache] = None,
    columns: Optional[Dict[str, str]] = None,
    schema: Optional[CollectionSchema] = None,
    cache_prefix: Optional[str] = None,
) -> Dict[str, gpd.GeoDataFrame]:
    """Load each named geodatabase layer independently.

    Layers are cached as ``<cache_prefix>-<layer>`` when a prefix is given.
    Combining the layers is left to ``bcvec.aggregate.concat_collections``.
    """
    results = {}
    for layer in layers:
        source = GeodatabaseLayerSource(
            path=path,
            layer=layer,
            cache_key=f"{cache_prefix}-{layer}" if cache_prefix else None,
            columns=columns,
            schema=schema,
        )
        results[layer] = load(source, cache=cache)
    return results

"""
Data loading and caching functionality.
"""

from .cache import GeoCache, MemoryBackend, ParquetBackend, filesystem_cache
from .loaders import load, load_layers
from .sources import (
    StationInventorySource,
    ShapefileSource,
    GeodatabaseLayerSource,
    RemoteLayerSource,
    wfs_layer_source,
    bec_zone_source,
    catchment_source,
    WSC_CATCHMENT_COLUMNS,
)
from .stations import (
    add_record_lengths,
    classify_record_length,
    filter_station_longitudes,
)

__all__ = [
    # Cache
    'GeoCache',
    'MemoryBackend',
    'ParquetBackend',
    'filesystem_cache',

    # Loaders
    'load',
    'load_layers',

    # Sources
    'StationInventorySource',
    'ShapefileSource',
    'GeodatabaseLayerSource',
    'RemoteLayerSource',
    'wfs_layer_source',
    'bec_zone_source',
    'catchment_source',
    'WSC_CATCHMENT_COLUMNS',

    # Stations
    'add_record_lengths',
    'classify_record_length',
    'filter_station_longitudes',
]

"""
Spatial vector analysis of weather stations, catchments and BEC zones.
"""

__version__ = "0.1.0"

from .exceptions import (
    BcvecError,
    SourceUnavailable,
    SchemaMismatch,
    UnsupportedCrsError,
    NonMetricCrsError,
    CrsMismatchError,
    ZeroReferenceAreaError,
    ConfigError,
)
from .data import GeoCache, load, load_layers
from .spatial import reproject, buffer, filter_within, intersect
from .aggregate import feature_areas, concat_collections, sum_area_by, coverage_report
from .workflows import station_map, stations_near_catchment, alpine_coverage

__all__ = [
    'BcvecError',
    'SourceUnavailable',
    'SchemaMismatch',
    'UnsupportedCrsError',
    'NonMetricCrsError',
    'CrsMismatchError',
    'ZeroReferenceAreaError',
    'ConfigError',
    'GeoCache',
    'load',
    'load_layers',
    'reproject',
    'buffer',
    'filter_within',
    'intersect',
    'feature_areas',
    'concat_collections',
    'sum_area_by',
    'coverage_report',
    'station_map',
    'stations_near_catchment',
    'alpine_coverage',
]

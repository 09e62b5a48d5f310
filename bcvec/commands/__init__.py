"""
Command wrappers behind the CLI. Each sets up logging and configuration,
loads its inputs through the cache and writes the workflow outputs.
"""

from .stations import generate_station_map
from .nearby import find_nearby_stations
from .alpine import generate_alpine_report
from .cache import clear_cache

__all__ = [
    'generate_station_map',
    'find_nearby_stations',
    'generate_alpine_report',
    'clear_cache',
]

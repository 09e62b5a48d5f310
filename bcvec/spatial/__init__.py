"""
Spatial processing functionality.
"""

from .projection import reproject
from .core import (
    buffer,
    filter_within,
    intersect,
)

__all__ = [
    'reproject',
    'buffer',
    'filter_within',
    'intersect',
]

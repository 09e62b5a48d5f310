from .logging_utils import setup_logging
from .io import load_config, load_analysis_config, write_table, write_geometries
from .text_utils import tidy_key, source_cache_key

__all__ = [
    'setup_logging',
    'load_config',
    'load_analysis_config',
    'write_table',
    'write_geometries',
    'tidy_key',
    'source_cache_key',
]

import logging
from pathlib import Path
from typing import List, Optional

from bcvec.data import filesystem_cache
from bcvec.utils.io import load_analysis_config
from bcvec.utils.logging_utils import setup_logging


def clear_cache(
    key: Optional[str] = None,
    config_path: Optional[Path] = None,
    cache_dir: Optional[Path] = None,
    verbose: bool = False,
) -> List[str]:
    """Removes one cache entry, or all of them when ``key`` is None."""
    config = load_analysis_config(config_path)
    setup_logging(verbose=verbose, log_file=config["logging"]["file"])
    cache = filesystem_cache(cache_dir if cache_dir is not None else Path(config["cache"]["dir"]))
    cleared = cache.clear(key)
    logging.info(f"Removed {len(cleared)} cache entries from {cache.backend.cache_dir}")
    return cleared

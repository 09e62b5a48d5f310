from pathlib import Path
from typing import Dict, Optional

from bcvec.data import GeoCache, StationInventorySource, filesystem_cache
from bcvec.utils.text_utils import source_cache_key


def build_cache(config: Dict, cache_dir: Optional[Path] = None, use_cache: bool = True) -> Optional[GeoCache]:
    if not use_cache:
        return None
    return filesystem_cache(cache_dir if cache_dir is not None else Path(config["cache"]["dir"]))


def station_source(stations_csv: Path, config: Dict) -> StationInventorySource:
    return StationInventorySource(
        path=stations_csv,
        cache_key=source_cache_key("stations", Path(stations_csv)),
        skiprows=config["stations"]["skiprows"],
        max_lon=config["stations"]["max_lon"],
    )

"""
Local cache for materialised collections.

A cache entry is written once, after a source has been loaded and validated
in full, and read on every later run. Entries are never expired; call
``GeoCache.clear`` to force a reload from the authoritative source.
"""

import logging
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import geopandas as gpd

logger = logging.getLogger(__name__)

# Keys become filenames so keep them to a portable character set
CACHE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def validate_key(key: str) -> str:
    if not isinstance(key, str) or not CACHE_KEY_PATTERN.match(key):
        raise ValueError(
            f"Invalid cache key {key!r}: use letters, digits, '.', '_' or '-'"
        )
    return key


class MemoryBackend:
    """Holds cached collections in a dictionary. Used in tests."""

    def __init__(self):
        self._store: Dict[str, gpd.GeoDataFrame] = {}

    def exists(self, key: str) -> bool:
        return key in self._store

    def read(self, key: str) -> gpd.GeoDataFrame:
        return self._store[key].copy()

    def write(self, key: str, gdf: gpd.GeoDataFrame) -> None:
        self._store[key] = gdf.copy()

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._store)


class ParquetBackend:
    """Stores each cached collection as a GeoParquet file in a folder."""

    suffix = ".parquet"

    def __init__(self, cache_dir: Union[str, Path] = "data/cache"):
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.cache_dir / f"{key}{self.suffix}"

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def read(self, key: str) -> gpd.GeoDataFrame:
        return gpd.read_parquet(self.path_for(key))

    def write(self, key: str, gdf: gpd.GeoDataFrame) -> None:
        path = self.path_for(key)
        # Write beside the target then rename so a failed write leaves no entry
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            gdf.to_parquet(tmp_path)
            tmp_path.replace(path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            path.unlink()

    def keys(self) -> List[str]:
        return sorted(p.name[: -len(self.suffix)] for p in self.cache_dir.glob(f"*{self.suffix}"))


class GeoCache:
    """Write-once cache of collections keyed by a source identifier."""

    def __init__(self, backend=None):
        self.backend = backend if backend is not None else MemoryBackend()

    def __contains__(self, key: str) -> bool:
        return self.backend.exists(validate_key(key))

    def get(self, key: str) -> gpd.GeoDataFrame:
        validate_key(key)
        if not self.backend.exists(key):
            raise KeyError(key)
        logger.debug(f"Cache hit for {key}")
        return self.backend.read(key)

    def put(self, key: str, gdf: gpd.GeoDataFrame) -> None:
        self.backend.write(validate_key(key), gdf)
        logger.info(f"Cached {len(gdf)} features under {key}")

    def get_or_load(self, key: str, loader: Callable[[], gpd.GeoDataFrame]) -> gpd.GeoDataFrame:
        """Return the cached collection or call ``loader`` and cache its result.

        Nothing is cached when ``loader`` raises.
        """
        if key in self:
            return self.get(key)
        gdf = loader()
        self.put(key, gdf)
        return gdf

    def keys(self) -> List[str]:
        return self.backend.keys()

    def clear(self, key: Optional[str] = None) -> List[str]:
        """Remove one entry, or every entry when ``key`` is None."""
        keys = [validate_key(key)] if key is not None else self.keys()
        for k in keys:
            self.backend.delete(k)
        logger.info(f"Cleared cache entries: {keys}")
        return keys


def filesystem_cache(cache_dir: Union[str, Path]) -> GeoCache:
    return GeoCache(ParquetBackend(cache_dir))

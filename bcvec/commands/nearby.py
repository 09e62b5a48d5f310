import logging
from pathlib import Path
from typing import List, Optional, Tuple

from bcvec.aggregate import concat_collections
from bcvec.commands._common import build_cache, station_source
from bcvec.data import catchment_source, load, load_layers
from bcvec.data.sources import WSC_CATCHMENT_COLUMNS
from bcvec.schema import CATCHMENT_SCHEMA
from bcvec.utils.io import load_analysis_config, write_geometries
from bcvec.utils.logging_utils import setup_logging
from bcvec.utils.text_utils import source_cache_key
from bcvec.workflows import stations_near_catchment


def load_catchments(catchments_path: Path, layers: Optional[List[str]], cache):
    """Loads catchments from a polygon file or from geodatabase layers."""
    if layers:
        collections = load_layers(
            catchments_path,
            layers,
            cache=cache,
            columns=WSC_CATCHMENT_COLUMNS,
            schema=CATCHMENT_SCHEMA,
            cache_prefix=source_cache_key("catchments", catchments_path),
        )
        return concat_collections(collections.values())
    return load(
        catchment_source(catchments_path, cache_key=source_cache_key("catchments", catchments_path)),
        cache=cache,
    )


def find_nearby_stations(
    stations_csv: Path,
    catchments_path: Path,
    station_id: Optional[str] = None,
    layers: Optional[List[str]] = None,
    distance: Optional[float] = None,
    output_dir: Path = Path("outputs/nearby"),
    config_path: Optional[Path] = None,
    cache_dir: Optional[Path] = None,
    use_cache: bool = True,
    verbose: bool = False,
) -> Tuple[Path, Path]:
    """
    Finds the weather stations within a buffer around a catchment.

    Args:
        stations_csv: Path to the station inventory CSV.
        catchments_path: Catchment polygon file or geodatabase.
        station_id: Gauging station identifying the catchment. All catchments when None.
        layers: Geodatabase layers holding catchments.
        distance: Buffer distance in metres. Defaults to the configured distance.
        output_dir: Folder for the buffer and station GeoJSON files.
        config_path: Optional YAML configuration file.
        cache_dir: Cache folder. Defaults to the configured folder.
        use_cache: Read and write the local cache.
        verbose: Enable verbose logging.

    Returns:
        Tuple of (buffer GeoJSON path, stations GeoJSON path)
    """
    config = load_analysis_config(config_path)
    setup_logging(verbose=verbose, log_file=config["logging"]["file"])
    cache = build_cache(config, cache_dir, use_cache)
    distance = distance if distance is not None else config["nearby"]["buffer_distance"]

    stations = load(station_source(stations_csv, config), cache=cache)
    catchments = load_catchments(catchments_path, layers, cache)

    region, nearby = stations_near_catchment(
        stations,
        catchments,
        distance=distance,
        station_id=station_id,
        target_crs=config["crs"]["planar"],
    )
    logging.info(f"{len(nearby)} stations within {distance} m")

    buffer_path = write_geometries(region, output_dir / "catchment_buffer.geojson")
    stations_path = write_geometries(nearby, output_dir / "nearby_stations.geojson")
    return buffer_path, stations_path

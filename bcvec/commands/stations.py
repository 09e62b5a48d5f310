import logging
from pathlib import Path
from typing import Optional, Tuple

from bcvec.commands._common import build_cache, station_source
from bcvec.data import ShapefileSource, load
from bcvec.schema import BOUNDARY_SCHEMA
from bcvec.utils.io import load_analysis_config, write_geometries, write_table
from bcvec.utils.logging_utils import setup_logging
from bcvec.utils.text_utils import source_cache_key
from bcvec.workflows import record_class_counts, station_map


def generate_station_map(
    stations_csv: Path,
    output_path: Path = Path("outputs/stations.geojson"),
    boundary_path: Optional[Path] = None,
    summary_path: Optional[Path] = None,
    province: Optional[str] = None,
    frequency: str = "hly",
    config_path: Optional[Path] = None,
    cache_dir: Optional[Path] = None,
    use_cache: bool = True,
    verbose: bool = False,
) -> Tuple[Path, Optional[Path]]:
    """
    Prepares the weather station map layer.

    The process involves:
    1. Loading the station inventory (cached after the first run).
    2. Filtering to a province and, optionally, to a boundary polygon.
    3. Deriving record lengths and record length classes.
    4. Projecting to the planar CRS and writing the stations as GeoJSON.

    Args:
        stations_csv: Path to the station inventory CSV.
        output_path: Path to save the station points GeoJSON.
        boundary_path: Optional polygon file limiting the stations kept.
        summary_path: Optional path for a CSV of station counts per record length class.
        province: Province to keep. Defaults to the configured province.
        frequency: Record frequency ("hly", "dly" or "mly") summarised in the counts.
        config_path: Optional YAML configuration file.
        cache_dir: Cache folder. Defaults to the configured folder.
        use_cache: Read and write the local cache.
        verbose: Enable verbose logging.

    Returns:
        Tuple of (station GeoJSON path, summary CSV path or None)
    """
    config = load_analysis_config(config_path)
    setup_logging(verbose=verbose, log_file=config["logging"]["file"])
    cache = build_cache(config, cache_dir, use_cache)

    stations = load(station_source(stations_csv, config), cache=cache)
    boundary = None
    if boundary_path is not None:
        boundary = load(
            ShapefileSource(
                path=boundary_path,
                cache_key=source_cache_key("boundary", boundary_path),
                schema=BOUNDARY_SCHEMA,
            ),
            cache=cache,
        )

    province = province if province is not None else config["stations"]["province"]
    mapped = station_map(
        stations,
        boundary=boundary,
        province=province or None,
        target_crs=config["crs"]["planar"],
    )
    logging.info(f"Mapped {len(mapped)} stations")
    write_geometries(mapped, output_path)

    if summary_path is not None:
        write_table(record_class_counts(mapped, frequency=frequency), summary_path)
    return output_path, summary_path

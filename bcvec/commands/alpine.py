import logging
from pathlib import Path
from typing import List, Optional, Tuple

from bcvec.commands._common import build_cache
from bcvec.commands.nearby import load_catchments
from bcvec.data import ShapefileSource, bec_zone_source, load
from bcvec.schema import ZONE_SCHEMA
from bcvec.utils.io import load_analysis_config, write_geometries, write_table
from bcvec.utils.logging_utils import setup_logging
from bcvec.utils.text_utils import source_cache_key
from bcvec.workflows import alpine_coverage


def generate_alpine_report(
    catchments_path: Path,
    layers: Optional[List[str]] = None,
    zones_path: Optional[Path] = None,
    output_path: Path = Path("outputs/alpine_coverage.csv"),
    intersections_path: Optional[Path] = None,
    use_catchment_area: bool = False,
    config_path: Optional[Path] = None,
    cache_dir: Optional[Path] = None,
    use_cache: bool = True,
    verbose: bool = False,
) -> Tuple[Path, Optional[Path]]:
    """
    Reports the percentage of each catchment covered by alpine BEC zones.

    Args:
        catchments_path: Catchment polygon file or geodatabase.
        layers: Geodatabase layers holding catchments.
        zones_path: Local BEC zone polygons. Downloaded from the provincial WFS when None.
        output_path: Path to save the coverage CSV.
        intersections_path: Optional path to save the alpine intersections as GeoJSON.
        use_catchment_area: Use the published catchment area (km2) rather than the
            area measured from the catchment polygons.
        config_path: Optional YAML configuration file.
        cache_dir: Cache folder. Defaults to the configured folder.
        use_cache: Read and write the local cache.
        verbose: Enable verbose logging.

    Returns:
        Tuple of (coverage CSV path, intersections GeoJSON path or None)
    """
    config = load_analysis_config(config_path)
    setup_logging(verbose=verbose, log_file=config["logging"]["file"])
    cache = build_cache(config, cache_dir, use_cache)

    catchments = load_catchments(catchments_path, layers, cache)
    if zones_path is not None:
        zones_source = ShapefileSource(
            path=zones_path,
            cache_key=source_cache_key("zones", zones_path),
            schema=ZONE_SCHEMA,
        )
    else:
        zones_source = bec_zone_source(
            url=config["reference"]["url"],
            timeout=config["reference"]["timeout"],
            page_size=config["reference"]["page_size"],
        )
    zones = load(zones_source, cache=cache)

    report, intersections = alpine_coverage(
        catchments,
        zones,
        alpine_zones=config["alpine"]["zones"],
        area="area_km2" if use_catchment_area else None,
        area_scale=1e6 if use_catchment_area else 1.0,
        target_crs=config["crs"]["planar"],
    )
    logging.info(f"Alpine coverage calculated for {len(report)} catchments")

    write_table(report, output_path)
    if intersections_path is not None:
        write_geometries(intersections, intersections_path)
    return output_path, intersections_path

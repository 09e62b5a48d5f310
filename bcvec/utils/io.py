import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import geopandas as gpd
import pandas as pd
import yaml
from pyhere import here

from bcvec.crs import is_metric, resolve_crs
from bcvec.exceptions import ConfigError, UnsupportedCrsError
from bcvec.schema import BEC_ZONES

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(here(".")) / "config" / "default.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "crs": {"geographic": "EPSG:4326", "planar": "EPSG:3005"},
    "cache": {"dir": "data/cache"},
    "stations": {"skiprows": 3, "max_lon": -50.0, "province": "BRITISH COLUMBIA"},
    "nearby": {"buffer_distance": 10000},
    "alpine": {"zones": ["BAFA", "CMA", "IMA"]},
    "reference": {"url": "https://openmaps.gov.bc.ca/geo/pub/wfs", "timeout": 60, "page_size": 10000},
    "logging": {"file": None},
}


def load_config(config_path: Path = CONFIG_PATH) -> Dict:
    """Loads the YAML configuration file."""
    with open(config_path, "r") as f:
        config = yaml.safe_load(f)
    return config or {}


def _merge(base: Dict, override: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _merge(merged[k], v)
        else:
            merged[k] = v
    return merged


def load_analysis_config(config_path: Optional[Union[str, Path]] = None) -> Dict:
    """
    Loads the analysis configuration, filling gaps from the built-in defaults.

    When ``config_path`` is None the project's ``config/default.yaml`` is used
    if present. An explicit path that does not exist is an error.

    Raises:
        ConfigError: The file is missing or a value is invalid
    """
    if config_path is None:
        path = CONFIG_PATH
        if not path.exists():
            logger.debug(f"No config at {path}; using defaults")
            return validate_config(copy.deepcopy(DEFAULT_CONFIG))
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

    try:
        user_config = load_config(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e
    if not isinstance(user_config, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return validate_config(_merge(DEFAULT_CONFIG, user_config))


def validate_config(config: Dict) -> Dict:
    for section in DEFAULT_CONFIG:
        if not isinstance(config.get(section), dict):
            raise ConfigError(f"Config section '{section}' must be a mapping")

    try:
        planar = resolve_crs(config["crs"]["planar"])
        resolve_crs(config["crs"]["geographic"])
    except UnsupportedCrsError as e:
        raise ConfigError(str(e)) from e
    if not is_metric(planar):
        raise ConfigError(f"crs.planar must be a projected CRS in metres, got {planar.to_string()}")

    distance = config["nearby"]["buffer_distance"]
    if not isinstance(distance, (int, float)) or distance < 0:
        raise ConfigError(f"nearby.buffer_distance must be a non-negative number, got {distance!r}")

    zones = config["alpine"]["zones"]
    if not isinstance(zones, list) or not zones:
        raise ConfigError("alpine.zones must be a non-empty list")
    unknown = sorted(set(zones) - set(BEC_ZONES))
    if unknown:
        raise ConfigError(f"alpine.zones has unknown BEC zones {unknown}")

    if not isinstance(config["stations"]["skiprows"], int):
        raise ConfigError("stations.skiprows must be an integer")

    page_size = config["reference"]["page_size"]
    if page_size is not None and (not isinstance(page_size, int) or page_size <= 0):
        raise ConfigError(f"reference.page_size must be a positive integer or null, got {page_size!r}")

    log_file = config["logging"]["file"]
    if log_file is not None and not isinstance(log_file, str):
        raise ConfigError(f"logging.file must be a path or null, got {log_file!r}")
    return config


def write_table(df: pd.DataFrame, output_path: Union[str, Path]) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)
    logger.info(f"Wrote {len(df)} rows to {output_path}")
    return output_path


def write_geometries(gdf: gpd.GeoDataFrame, output_path: Union[str, Path]) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    gdf = gdf.copy()
    # GeoJSON drivers only take plain numpy dtypes
    for column in gdf.columns.drop(gdf.geometry.name):
        dtype = gdf[column].dtype
        if isinstance(dtype, pd.CategoricalDtype):
            gdf[column] = gdf[column].astype(object)
        elif pd.api.types.is_extension_array_dtype(dtype) and pd.api.types.is_float_dtype(dtype):
            gdf[column] = gdf[column].astype(float)
    gdf.to_file(output_path, driver="GeoJSON")
    logger.info(f"Wrote {len(gdf)} features to {output_path}")
    return output_path

import logging

import pytest
import yaml
from pathlib import Path

from bcvec.exceptions import ConfigError
from bcvec.utils.io import DEFAULT_CONFIG, load_analysis_config
from bcvec.utils.logging_utils import setup_logging
from bcvec.utils.text_utils import source_cache_key, tidy_key


def write_config(path, config) -> None:
    with open(path, "w") as f:
        yaml.safe_dump(config, f)


def test_default_config():
    config = load_analysis_config()
    assert config["crs"]["planar"] == "EPSG:3005"
    assert config["alpine"]["zones"] == ["BAFA", "CMA", "IMA"]


def test_partial_config_is_merged_with_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    write_config(path, {"nearby": {"buffer_distance": 2500}})
    config = load_analysis_config(path)
    assert config["nearby"]["buffer_distance"] == 2500
    assert config["stations"]["skiprows"] == DEFAULT_CONFIG["stations"]["skiprows"]


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_analysis_config(tmp_path / "nope.yaml")


@pytest.mark.parametrize(
    "override",
    [
        {"crs": {"planar": "EPSG:4326"}},
        {"crs": {"planar": "not a crs"}},
        {"nearby": {"buffer_distance": -5}},
        {"alpine": {"zones": ["IMA", "TUNDRA"]}},
        {"alpine": {"zones": []}},
        {"stations": {"skiprows": "three"}},
        {"cache": "data/cache"},
        {"reference": {"page_size": 0}},
        {"logging": {"file": 5}},
    ],
)
def test_invalid_config(tmp_path, override):
    path = tmp_path / "config.yaml"
    write_config(path, override)
    with pytest.raises(ConfigError):
        load_analysis_config(path)


def test_tidy_key():
    assert tidy_key("Station Inventory EN") == "station_inventory_en"
    assert source_cache_key("stations", Path("data/raw/Station Inventory EN.csv")) == (
        "stations-station_inventory_en"
    )
    with pytest.raises(ValueError):
        tidy_key("***")


def test_setup_logging_writes_log_file(tmp_path):
    log_file = tmp_path / "logs" / "bcvec.log"
    handler = setup_logging(log_file=log_file)
    try:
        assert setup_logging(log_file=log_file) is handler
        logging.getLogger("bcvec.stations").info("Loaded 3 stations")
        handler.flush()
    finally:
        logging.getLogger().removeHandler(handler)
        handler.close()
    assert "bcvec.stations - INFO - Loaded 3 stations" in log_file.read_text()


def test_setup_logging_without_file():
    assert setup_logging() is None

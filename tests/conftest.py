import pytest
import pandas as pd
import geopandas as gpd
from shapely.geometry import Point, box

# Origin inside British Columbia in BC Albers (EPSG:3005) metres
X0, Y0 = 1_200_000, 600_000


@pytest.fixture
def albers() -> str:
    return "EPSG:3005"


@pytest.fixture
def catchments(albers) -> gpd.GeoDataFrame:
    """Two catchments: 08AA001 is 100 m x 10 m, 08BB002 sits 1 km to the east."""
    return gpd.GeoDataFrame(
        data={
            "station_id": ["08AA001", "08BB002"],
            "name": ["Alpine Creek", "Valley River"],
            "area_km2": [0.001, 0.004],
        },
        geometry=[
            box(X0, Y0, X0 + 100, Y0 + 10),
            box(X0 + 1000, Y0, X0 + 1200, Y0 + 20),
        ],
        crs=albers,
    )


@pytest.fixture
def zones(albers) -> gpd.GeoDataFrame:
    """An alpine zone covering a quarter of 08AA001 and a subalpine zone for the rest."""
    return gpd.GeoDataFrame(
        data={"zone": ["IMA", "ESSF", "ESSF"]},
        geometry=[
            box(X0, Y0, X0 + 25, Y0 + 10),
            box(X0 + 25, Y0, X0 + 100, Y0 + 10),
            box(X0 + 1000, Y0, X0 + 1200, Y0 + 20),
        ],
        crs=albers,
    )


@pytest.fixture
def points(albers) -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        data={"station_id": ["inside", "edge", "outside", "corner"]},
        geometry=[
            Point(X0 + 50, Y0 + 5),
            Point(X0, Y0 + 5),
            Point(X0 + 500, Y0 + 500),
            Point(X0 + 100, Y0 + 10),
        ],
        crs=albers,
    )


def station_rows() -> pd.DataFrame:
    rows = [
        {
            "Name": "VANCOUVER INT'L A", "Province": "BRITISH COLUMBIA",
            "Climate ID": "1108395", "Station ID": "889",
            "Latitude (Decimal Degrees)": 49.19, "Longitude (Decimal Degrees)": -123.18,
            "Elevation (m)": 4.3,
            "HLY First Year": 2000, "HLY Last Year": 2015,
            "DLY First Year": 1937, "DLY Last Year": 2013,
            "MLY First Year": 1937, "MLY Last Year": 2007,
        },
        {
            "Name": "MISPLACED STATION", "Province": "BRITISH COLUMBIA",
            "Climate ID": "110XXXX", "Station ID": "900",
            "Latitude (Decimal Degrees)": 49.0, "Longitude (Decimal Degrees)": -40.0,
            "Elevation (m)": 10.0,
            "HLY First Year": 1990, "HLY Last Year": 1995,
            "DLY First Year": None, "DLY Last Year": None,
            "MLY First Year": None, "MLY Last Year": None,
        },
        {
            "Name": "KAMLOOPS A", "Province": "BRITISH COLUMBIA",
            "Climate ID": "1163780", "Station ID": "1275",
            "Latitude (Decimal Degrees)": 50.7, "Longitude (Decimal Degrees)": -120.44,
            "Elevation (m)": 345.3,
            "HLY First Year": None, "HLY Last Year": None,
            "DLY First Year": 1951, "DLY Last Year": 2013,
            "MLY First Year": 1951, "MLY Last Year": 2013,
        },
        {
            "Name": "CALGARY INT'L A", "Province": "ALBERTA",
            "Climate ID": "3031093", "Station ID": "2205",
            "Latitude (Decimal Degrees)": 51.11, "Longitude (Decimal Degrees)": -114.02,
            "Elevation (m)": 1084.1,
            "HLY First Year": 1953, "HLY Last Year": 2012,
            "DLY First Year": 1881, "DLY Last Year": 2012,
            "MLY First Year": 1881, "MLY Last Year": 2012,
        },
    ]
    df = pd.DataFrame(rows)
    # Columns the loader ignores
    df["WMO ID"] = None
    df["TC ID"] = None
    return df


def write_inventory(path, df: pd.DataFrame) -> None:
    preamble = (
        '"Modified Date: 2023-01-25 23:30 UTC"\n'
        '"Station Inventory EN"\n'
        '"Disclaimer: see the documentation"\n'
    )
    with open(path, "w") as f:
        f.write(preamble)
        df.to_csv(f, index=False)


@pytest.fixture
def inventory_csv(tmp_path):
    path = tmp_path / "Station Inventory EN.csv"
    write_inventory(path, station_rows())
    return path

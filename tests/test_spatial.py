import pytest
import numpy as np
import geopandas as gpd
from shapely.geometry import Point, box

from bcvec.exceptions import (
    CrsMismatchError,
    NonMetricCrsError,
    SchemaMismatch,
    UnsupportedCrsError,
)
from bcvec.spatial import buffer, filter_within, intersect, reproject

from conftest import X0, Y0


@pytest.fixture
def geographic_points() -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        data={"name": ["Vancouver", "Prince George", "Fort Nelson"]},
        geometry=[Point(-123.18, 49.19), Point(-122.68, 53.88), Point(-122.6, 58.84)],
        crs="EPSG:4326",
    )


def test_reproject_round_trip(geographic_points):
    projected = reproject(geographic_points, "EPSG:3005")
    assert projected.crs.to_epsg() == 3005
    back = reproject(projected, "EPSG:4326")
    np.testing.assert_allclose(back.geometry.x, geographic_points.geometry.x, atol=1e-8)
    np.testing.assert_allclose(back.geometry.y, geographic_points.geometry.y, atol=1e-8)
    assert back["name"].tolist() == geographic_points["name"].tolist()


def test_reproject_does_not_modify_input(geographic_points):
    before = geographic_points.copy()
    reproject(geographic_points, 3005)
    assert geographic_points.crs.to_epsg() == 4326
    assert geographic_points.geom_equals(before).all()


def test_reproject_same_crs_returns_copy(catchments):
    result = reproject(catchments, "EPSG:3005")
    assert result is not catchments
    assert result.geom_equals(catchments).all()


def test_reproject_unknown_crs(catchments):
    with pytest.raises(UnsupportedCrsError):
        reproject(catchments, "EPSG:999999")


def test_reproject_without_crs():
    gdf = gpd.GeoDataFrame(geometry=[Point(0, 0)])
    with pytest.raises(UnsupportedCrsError):
        reproject(gdf, "EPSG:3005")


def test_buffer_grows_polygons(catchments):
    buffered = buffer(catchments, 10)
    assert (buffered.area > catchments.area).all()
    assert buffered.geometry.contains(catchments.geometry).all()
    assert buffered["station_id"].tolist() == catchments["station_id"].tolist()


@pytest.mark.parametrize("d1, d2", [(0, 5), (5, 50), (50, 50), (0, 0)])
def test_buffer_monotonic(catchments, d1, d2):
    small = buffer(catchments, d1)
    large = buffer(catchments, d2)
    assert large.geometry.covers(small.geometry).all()


def test_buffer_zero_is_unchanged_copy(catchments):
    result = buffer(catchments, 0)
    assert result is not catchments
    assert result.geom_equals(catchments).all()


def test_buffer_rejects_geographic_crs(geographic_points):
    with pytest.raises(NonMetricCrsError):
        buffer(geographic_points, 1000)


def test_buffer_rejects_negative_distance(catchments):
    with pytest.raises(ValueError):
        buffer(catchments, -1)


def test_filter_within_includes_boundary(points, catchments):
    result = filter_within(points, catchments)
    assert result["station_id"].tolist() == ["inside", "edge", "corner"]


def test_filter_within_point_on_boundary(catchments):
    boundary_point = gpd.GeoDataFrame(
        data={"station_id": ["on_edge"]}, geometry=[Point(X0 + 50, Y0)], crs=catchments.crs
    )
    assert len(filter_within(boundary_point, catchments)) == 1


def test_filter_within_partitions_points(points, catchments):
    kept = filter_within(points, catchments)
    dropped = points.loc[~points.index.isin(kept.index)]
    regions = catchments.geometry
    assert all(regions.intersects(p).any() for p in kept.geometry)
    assert not any(regions.intersects(p).any() for p in dropped.geometry)


def test_filter_within_preserves_order_and_index(points, catchments):
    shuffled = points.iloc[[3, 2, 1, 0]]
    result = filter_within(shuffled, catchments)
    assert result.index.tolist() == [3, 1, 0]
    assert list(result.columns) == list(points.columns)


def test_filter_within_empty_regions(points, catchments):
    result = filter_within(points, catchments.iloc[0:0])
    assert result.empty
    assert result.crs == points.crs


def test_filter_within_crs_mismatch(points, catchments):
    with pytest.raises(CrsMismatchError):
        filter_within(points, reproject(catchments, "EPSG:4326"))


def test_intersect_pairs_and_attributes(catchments, zones):
    result = intersect(catchments, zones)
    assert result[["station_id", "zone"]].values.tolist() == [
        ["08AA001", "IMA"],
        ["08AA001", "ESSF"],
        ["08BB002", "ESSF"],
    ]
    assert result.area.tolist() == pytest.approx([250.0, 750.0, 4000.0])
    assert result.crs == catchments.crs


def test_intersect_contained_in_both_parents(catchments, zones):
    result = intersect(catchments, zones)
    for _, row in result.iterrows():
        parent_a = catchments.loc[catchments["station_id"] == row["station_id"]].geometry.iloc[0]
        assert parent_a.buffer(1e-6).contains(row.geometry)
        assert zones.geometry.buffer(1e-6).contains(row.geometry).any()


def test_intersect_prefers_first_collection_on_collision(catchments, zones):
    labelled = zones.assign(name="zone polygon")
    result = intersect(catchments, labelled)
    assert set(result["name"]) == {"Alpine Creek", "Valley River"}


def test_intersect_omits_touching_pairs(catchments, albers):
    neighbour = gpd.GeoDataFrame(
        data={"zone": ["CMA"]},
        geometry=[box(X0 + 100, Y0, X0 + 200, Y0 + 10)],  # shares the east edge of 08AA001
        crs=albers,
    )
    result = intersect(catchments.iloc[[0]], neighbour)
    assert result.empty
    assert {"station_id", "zone"} <= set(result.columns)


def test_intersect_no_overlap_is_empty(catchments, albers):
    far = gpd.GeoDataFrame(
        data={"zone": ["BAFA"]}, geometry=[box(0, 0, 10, 10)], crs=albers
    )
    assert len(intersect(catchments, far)) == 0


def test_intersect_rejects_points(points, catchments):
    with pytest.raises(SchemaMismatch):
        intersect(catchments, points)


def test_intersect_crs_mismatch(catchments, zones):
    with pytest.raises(CrsMismatchError):
        intersect(catchments, reproject(zones, "EPSG:4326"))

# tests/conftest.py

from datetime import datetime, timezone

import pytest
import geopandas as gpd
from shapely.geometry import Point, MultiPoint

from geocolumns.vector import FeatureCollection, GeometryKind, TimeInterval

@pytest.fixture
def diagonal_points():
    """Three points on the diagonal: (0,0), (1,1), (2,2)."""
    return [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)]

@pytest.fixture
def intervals():
    """One interval per diagonal point, the last one unbounded."""
    return [
        TimeInterval(datetime(2020, 1, 1, tzinfo=timezone.utc), datetime(2020, 1, 2, tzinfo=timezone.utc)),
        TimeInterval(datetime(2021, 1, 1, tzinfo=timezone.utc), None),
        TimeInterval(),
    ]

@pytest.fixture
def point_collection(diagonal_points):
    return FeatureCollection(diagonal_points)

@pytest.fixture
def rich_collection(diagonal_points, intervals):
    """
    Point collection with time, attribute columns and global values
    to test lookups and filtering alignment.
    """
    collection = FeatureCollection(diagonal_points, intervals)
    collection.set_text_column("species", ["Abies", "Picea", "Betula"])
    collection.set_numeric_column("height", [15.5, 22.0, 9.25])
    collection.set_global_text("source", "survey-2021")
    collection.set_global_numeric("resolution", 0.25)
    return collection

@pytest.fixture
def multipoint_collection():
    """Multi-point collection with offsets [0, 2, 2, 5]; feature 1 is empty."""
    points = [(0, 0), (1, 0), (5, 5), (6, 5), (7, 5)]
    return FeatureCollection.from_offsets(points, [0, 2, 2, 5], GeometryKind.MULTI_POINT)

@pytest.fixture
def points_gdf():
    return gpd.GeoDataFrame(
        {
            'tree_id': [1, 2, 3],
            'species': ['Abies', None, 'Betula'],
            'height': [15.5, 22.0, 9.25],
            'observed': ['2020-01-01T00:00:00Z', '2021-06-01T00:00:00Z', None],
            'geometry': [Point(0, 0), Point(1, 1), Point(2, 2)]
        },
        crs="EPSG:32619"
    )

@pytest.fixture
def multipoints_gdf():
    return gpd.GeoDataFrame(
        {
            'cluster': ['a', 'b'],
            'geometry': [MultiPoint([(0, 0), (1, 0)]), Point(3, 3)]
        },
        crs="EPSG:32619"
    )

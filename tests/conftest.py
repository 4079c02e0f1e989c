"""
Shared fixtures: a small stream network with tributaries and a handful of
field-sampled sites placed near it, in a projected CRS so distances are planar.
"""
import geopandas as gpd
import pytest
from shapely import wkt
from shapely.geometry import Point

CRS = "EPSG:3857"


@pytest.fixture
def sample_points() -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        {
            "site_id": [1, 2, 3, 4, 5, 6],
            "name": ["Alice Creek", None, "Charlie Creek", "David Brook", "DONKEY Creek", "Frank Creek"],
        },
        geometry=[
            Point(0.5, -1.4),
            Point(1.1, 0.9),
            Point(2.3, 1.2),
            Point(3.0, 1.0),
            Point(1.5, -0.7),
            Point(3.0, -1.1),
        ],
        crs=CRS,
    )


@pytest.fixture
def sample_lines() -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        {
            "reach_id": [10, 20, 30, 40],
            "name": ["ROCK River", "Charley Creek", "Frank Creek", "Donkey Creek"],
        },
        geometry=[
            wkt.loads("LINESTRING (0 2, 1 1, 2 0, 3 -1)"),
            wkt.loads("LINESTRING (2 0, 2.5 1, 3 2)"),
            wkt.loads("LINESTRING (3 -1, 3.5 0, 4 1)"),
            wkt.loads("LINESTRING (0 -2, 1 -1, 2 0, 3 -1, 4 -2)"),
        ],
        crs=CRS,
    )

import matplotlib
matplotlib.use("Agg")

import geopandas as gpd
import pytest
from shapely.geometry import box

from globeumap.projection import to_cartesian
from globeumap.regions import join_continents
from globeumap.sampler import sample_sphere_points


@pytest.fixture
def world():
    # coarse stand-in for the Natural Earth countries, covers roughly two thirds of the sphere
    return gpd.GeoDataFrame(
        {'continent': ['Africa', 'Europe', 'Asia', 'Americas']},
        geometry=[
            box(-20, -35, 50, 35),
            box(-10, 36, 40, 70),
            box(50, 0, 180, 80),
            box(-170, -55, -30, 70),
        ],
        crs="EPSG:4326",
    )


@pytest.fixture
def points(world):
    df = sample_sphere_points(200, seed=29)
    df = join_continents(df, world)
    return to_cartesian(df, radius=6371)

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import Point, Polygon, box

from globeumap.regions import join_continents, land_only, load_world, validate_polygons
from globeumap.sampler import sample_sphere_points

BOWTIE = Polygon([(0, 0), (10, 10), (10, 0), (0, 10)])


def test_every_point_gets_one_label(world):
    df = sample_sphere_points(500, seed=3)
    joined = join_continents(df, world)
    assert len(joined) == len(df)
    assert joined.index.equals(df.index)
    assert joined['continent'].notna().all()
    assert 'oceans' in joined['continent'].cat.categories


def test_oceans_iff_no_polygon_contains(world):
    df = sample_sphere_points(300, seed=4)
    joined = join_continents(df, world)
    for _, row in joined.iterrows():
        inside = world.geometry.contains(Point(row['longitude'], row['latitude']))
        if inside.any():
            assert row['continent'] == world.loc[inside, 'continent'].iloc[0]
        else:
            assert row['continent'] == 'oceans'


def test_input_not_mutated(world):
    df = sample_sphere_points(50, seed=5)
    join_continents(df, world)
    assert 'continent' not in df.columns


def test_overlapping_polygons_keep_one_label():
    world = gpd.GeoDataFrame({'continent': ['A', 'B']}, geometry=[box(0, 0, 20, 20), box(10, 10, 30, 30)],
                             crs="EPSG:4326")
    df = pd.DataFrame({'longitude': [15.0, 5.0, 25.0, -50.0], 'latitude': [15.0, 5.0, 25.0, 0.0]})
    joined = join_continents(df, world)
    assert len(joined) == 4
    assert list(joined['continent']) == ['A', 'A', 'B', 'oceans']


def test_invalid_geometry_is_fatal(world):
    broken = pd.concat([world, gpd.GeoDataFrame({'continent': ['Bowtie']}, geometry=[BOWTIE], crs="EPSG:4326")],
                       ignore_index=True)
    with pytest.raises(ValueError, match="Invalid polygon"):
        validate_polygons(broken)
    with pytest.raises(ValueError):
        join_continents(sample_sphere_points(10, seed=1), broken)


def test_missing_columns(world):
    with pytest.raises(ValueError):
        join_continents(pd.DataFrame({'lon': [0.0], 'lat': [0.0]}), world)
    with pytest.raises(ValueError):
        join_continents(sample_sphere_points(5, seed=1), world.rename(columns={'continent': 'name'}))


def test_load_world_repairs_geometry(tmp_path):
    source = gpd.GeoDataFrame({'CONTINENT': ['Europe', 'Bowtie'], 'NAME': ['x', 'y']},
                              geometry=[box(0, 40, 10, 50), BOWTIE], crs="EPSG:4326")
    path = tmp_path / 'world.geojson'
    source.to_file(path, driver='GeoJSON')

    world = load_world(str(path), continent_column='CONTINENT')
    assert list(world.columns) == ['continent', 'geometry']
    assert world.geometry.is_valid.all()
    validate_polygons(world)


def test_load_world_missing_continent(tmp_path):
    path = tmp_path / 'world.geojson'
    gpd.GeoDataFrame({'NAME': ['x']}, geometry=[box(0, 0, 1, 1)], crs="EPSG:4326").to_file(path, driver='GeoJSON')
    with pytest.raises(ValueError, match="CONTINENT"):
        load_world(str(path))


def test_land_only(points):
    land = land_only(points)
    assert len(land) == (points['continent'] != 'oceans').sum()
    assert 'oceans' not in land['continent'].cat.categories

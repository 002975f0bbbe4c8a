import time

import geopandas as gpd
import pandas as pd

from globeumap.config import WORLD_PATH, CONTINENT_COLUMN, OCEANS

CRS = "EPSG:4326"


def load_world(path: str = WORLD_PATH, continent_column: str = CONTINENT_COLUMN) -> gpd.GeoDataFrame:
    print("Loading world polygons...")
    start_time = time.time()
    world = gpd.read_file(path)
    if continent_column not in world.columns:
        raise ValueError(f"World polygons have no '{continent_column}' column, found {world.columns.tolist()}.")

    world = world.rename(columns={continent_column: 'continent'})[['continent', 'geometry']]
    world = world.set_crs(CRS) if world.crs is None else world.to_crs(CRS)
    # self-intersecting rings would make the within test unreliable
    world['geometry'] = world.geometry.make_valid()

    end_time = time.time()
    print(f"{len(world)} polygons loaded in {end_time - start_time:.2f} seconds.")
    return world


def validate_polygons(world: gpd.GeoDataFrame) -> None:
    geometry = world.geometry
    bad = geometry.isna() | geometry.is_empty | ~geometry.is_valid
    if bad.any():
        raise ValueError(f"Invalid polygon geometry at rows {world.index[bad].tolist()}.")


def join_continents(df: pd.DataFrame, world: gpd.GeoDataFrame) -> pd.DataFrame:
    """Label every point with the continent of the polygon it lies within.

    Points outside every polygon are labelled 'oceans'. When polygons overlap
    the first polygon in layer order wins, so each point keeps exactly one label.
    """
    if 'longitude' not in df.columns or 'latitude' not in df.columns:
        raise ValueError("DataFrame must contain 'longitude' and 'latitude' columns.")
    if 'continent' not in world.columns:
        raise ValueError("World polygons must contain a 'continent' column.")
    validate_polygons(world)
    world = world.set_crs(CRS) if world.crs is None else world.to_crs(CRS)

    points = gpd.GeoDataFrame(index=df.index, geometry=gpd.points_from_xy(df.longitude, df.latitude), crs=CRS)
    layer = world[['continent', 'geometry']].reset_index(drop=True)
    joined = gpd.sjoin(points, layer, how='left', predicate='within')
    joined = joined.sort_values('index_right', kind='stable')
    joined = joined[~joined.index.duplicated(keep='first')]

    labels = joined['continent'].reindex(df.index).astype(object).fillna(OCEANS)
    categories = sorted(c for c in labels.unique() if c != OCEANS) + [OCEANS]

    df = df.copy()
    df['continent'] = pd.Categorical(labels, categories=categories)
    return df


def land_only(df: pd.DataFrame) -> pd.DataFrame:
    if 'continent' not in df.columns:
        raise ValueError("DataFrame must contain a 'continent' column, run join_continents first.")
    land = df[df['continent'] != OCEANS].copy()
    if isinstance(land['continent'].dtype, pd.CategoricalDtype):
        land['continent'] = land['continent'].cat.remove_unused_categories()
    return land

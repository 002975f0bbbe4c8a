import os
import time
from typing import List, Optional, Tuple

import geopandas as gpd
import pandas as pd

from globeumap import config
from globeumap.clustering import assign_clusters
from globeumap.embedding import embedding_grid, parameter_grid
from globeumap.projection import to_cartesian
from globeumap.regions import join_continents, land_only, load_world
from globeumap.render import (animate_embeddings, animate_sphere, plot_embedding_grid, plot_sphere,
                              plot_world)
from globeumap.sampler import sample_sphere_points


class PipelineResult:
    def __init__(self, table, embeddings, land_table, land_embeddings, files):
        self.table = table
        self.embeddings = embeddings
        self.land_table = land_table
        self.land_embeddings = land_embeddings
        self.files = files


def build_table(n: int = config.N_POINTS, seed: Optional[int] = config.SEED,
                radius: float = config.EARTH_RADIUS_KM, world: Optional[gpd.GeoDataFrame] = None) -> pd.DataFrame:
    """Sample the points, label their continents and add Cartesian coordinates."""
    if world is None:
        world = load_world()
    df = sample_sphere_points(n, seed=seed)
    df = join_continents(df, world)
    df = to_cartesian(df, radius=radius)
    counts = df['continent'].value_counts()
    print(f"{len(df)} points sampled, {counts.get(config.OCEANS, 0)} in the oceans.")
    return df


def run(n: int = config.N_POINTS, seed: Optional[int] = config.SEED, radius: float = config.EARTH_RADIUS_KM,
        grid: Optional[List[Tuple[float, float]]] = None, k: int = config.KNN_K,
        resolution: float = config.RESOLUTION, n_neighbors: int = config.UMAP_NEIGHBORS,
        world: Optional[gpd.GeoDataFrame] = None, output_dir: str = config.OUTPUT_DIR,
        transition_frames: int = config.TRANSITION_FRAMES, rotation_frames: int = config.ROTATION_FRAMES,
        land: bool = True) -> PipelineResult:
    start_time = time.time()
    if world is None:
        world = load_world()
    if grid is None:
        grid = parameter_grid(config.SPREADS, config.MIN_DISTS)

    def out(name):
        return os.path.join(output_dir, name)

    table = build_table(n, seed=seed, radius=radius, world=world)
    table = assign_clusters(table, k=k, resolution=resolution, seed=seed)
    embeddings = embedding_grid(table, grid, n_neighbors=n_neighbors, seed=seed)

    files = [
        plot_world(table, world, 'continent', out('world_points.png')),
        plot_sphere(table, 'continent', out('sphere_points.png')),
        plot_embedding_grid(embeddings, 'continent', out('umap_grid_continent.png')),
        plot_embedding_grid(embeddings, 'cluster_id', out('umap_grid_cluster.png')),
        animate_embeddings(embeddings, table, 'continent', out('world_projection.gif'), transition_frames),
        animate_sphere(table, 'continent', out('sphere_projection.gif'), rotation_frames),
        animate_embeddings(embeddings, table, 'cluster_id', out('cluster_projection.gif'), transition_frames),
    ]

    land_table = None
    land_embeddings = None
    if land:
        land_table = land_only(table)
        print(f"Repeating for the {len(land_table)} land points...")
        land_table = assign_clusters(land_table, k=k, resolution=resolution, seed=seed)
        land_embeddings = embedding_grid(land_table, grid, n_neighbors=n_neighbors, seed=seed)
        files += [
            animate_embeddings(land_embeddings, land_table, 'continent', out('world_projection_land.gif'), transition_frames),
            animate_embeddings(land_embeddings, land_table, 'cluster_id', out('cluster_projection_land.gif'), transition_frames),
            animate_sphere(land_table, 'continent', out('sphere_projection_land.gif'), rotation_frames),
        ]

    end_time = time.time()
    print(f"Pipeline finished in {end_time - start_time:.2f} seconds, {len(files)} files written to {output_dir}.")
    return PipelineResult(table, embeddings, land_table, land_embeddings, files)

import itertools
import time
from typing import Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd
import umap
from rich.progress import track

from globeumap.config import SPREADS, MIN_DISTS, UMAP_NEIGHBORS, SEED
from globeumap.projection import coordinates

CARRIED_COLUMNS = ['continent', 'cluster_id']


def parameter_grid(spreads: Iterable[float] = SPREADS, min_dists: Iterable[float] = MIN_DISTS) -> List[Tuple[float, float]]:
    return list(itertools.product(spreads, min_dists))


def params_label(spread: float, min_dist: float) -> str:
    return f"spread={spread}, min_dist={min_dist}"


def embed(coords: np.ndarray, spread: float, min_dist: float,
          n_neighbors: int = UMAP_NEIGHBORS, seed: Optional[int] = SEED) -> np.ndarray:
    # a fixed random_state makes umap run single threaded, which is what keeps it reproducible
    reducer = umap.UMAP(n_components=2, n_neighbors=n_neighbors, spread=spread,
                        min_dist=min_dist, random_state=seed)
    return reducer.fit_transform(coords)


def embedding_grid(df: pd.DataFrame, grid: Optional[List[Tuple[float, float]]] = None,
                   n_neighbors: int = UMAP_NEIGHBORS, seed: Optional[int] = SEED) -> pd.DataFrame:
    """Run UMAP on the 3D coordinates once per (spread, min_dist) pair.

    Returns a long table with one row per point per parameter pair. The
    continent and cluster labels of the source table are carried along so the
    embeddings can be coloured without joining back.
    """
    if grid is None:
        grid = parameter_grid()
    coords = coordinates(df)
    carried = [c for c in CARRIED_COLUMNS if c in df.columns]

    start_time = time.time()
    frames = []
    for spread, min_dist in track(grid, description="Running UMAP grid..."):
        emb = embed(coords, spread, min_dist, n_neighbors=n_neighbors, seed=seed)
        frame = pd.DataFrame({
            'point_id': df.index.to_numpy(),
            'spread': spread,
            'min_dist': min_dist,
            'params': params_label(spread, min_dist),
            'umap1': emb[:, 0],
            'umap2': emb[:, 1],
        })
        for column in carried:
            frame[column] = df[column].to_numpy()
        frames.append(frame)

    embeddings = pd.concat(frames, ignore_index=True)
    for column in carried:
        if isinstance(df[column].dtype, pd.CategoricalDtype):
            embeddings[column] = pd.Categorical(embeddings[column], categories=df[column].cat.categories)
    end_time = time.time()
    print(f"{len(grid)} embeddings of {len(df)} points computed in {end_time - start_time:.2f} seconds.")
    return embeddings

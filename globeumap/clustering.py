import time
from typing import Optional

import igraph as ig
import leidenalg
import numpy as np
import pandas as pd
from sklearn.neighbors import NearestNeighbors

from globeumap.config import KNN_K, RESOLUTION, SEED
from globeumap.projection import coordinates


def knn_graph(coords: np.ndarray, k: int = KNN_K) -> ig.Graph:
    """Undirected k-nearest-neighbour graph, one vertex per point."""
    if k < 1:
        raise ValueError(f"Neighbour count must be at least 1, got {k}.")

    # ask for k + 1 because every point is its own nearest neighbour
    nn = NearestNeighbors(n_neighbors=k + 1).fit(coords)
    _, indices = nn.kneighbors(coords)

    sources = np.repeat(np.arange(len(coords)), k)
    targets = indices[:, 1:].ravel()
    graph = ig.Graph(n=len(coords), edges=list(zip(sources.tolist(), targets.tolist())), directed=False)
    # mutual neighbours give the same edge twice
    graph.simplify(multiple=True, loops=True)
    return graph


def leiden_clusters(coords: np.ndarray, k: int = KNN_K, resolution: float = RESOLUTION,
                    seed: Optional[int] = SEED) -> np.ndarray:
    graph = knn_graph(coords, k)
    partition = leidenalg.find_partition(
        graph,
        leidenalg.RBConfigurationVertexPartition,
        resolution_parameter=resolution,
        seed=seed,
    )
    return np.asarray(partition.membership, dtype=np.int64)


def assign_clusters(df: pd.DataFrame, k: int = KNN_K, resolution: float = RESOLUTION,
                    seed: Optional[int] = SEED) -> pd.DataFrame:
    start_time = time.time()
    membership = leiden_clusters(coordinates(df), k=k, resolution=resolution, seed=seed)

    df = df.copy()
    df['cluster_id'] = pd.Categorical(membership, categories=sorted(set(membership.tolist())))
    end_time = time.time()
    print(f"Found {len(df['cluster_id'].cat.categories)} clusters in {end_time - start_time:.2f} seconds.")
    return df

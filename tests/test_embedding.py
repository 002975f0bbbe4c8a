import numpy as np
import pytest

from globeumap.embedding import embed, embedding_grid, parameter_grid


def test_parameter_grid_order():
    assert parameter_grid([0.5, 1.0], [0.0, 0.1, 0.5]) == [
        (0.5, 0.0), (0.5, 0.1), (0.5, 0.5),
        (1.0, 0.0), (1.0, 0.1), (1.0, 0.5),
    ]


def test_one_row_per_point_per_cell(points):
    grid = parameter_grid([1.0, 2.0], [0.1])
    embeddings = embedding_grid(points, grid, n_neighbors=10, seed=29)

    assert len(embeddings) == len(points) * len(grid)
    assert set(embeddings['params']) == {'spread=1.0, min_dist=0.1', 'spread=2.0, min_dist=0.1'}
    assert np.isfinite(embeddings[['umap1', 'umap2']].to_numpy()).all()
    for _, cell in embeddings.groupby('params'):
        assert sorted(cell['point_id']) == sorted(points.index)
    # labels ride along with the embedding rows
    assert (embeddings['continent'].to_numpy()[:len(points)] == points['continent'].to_numpy()).all()
    assert list(embeddings['continent'].cat.categories) == list(points['continent'].cat.categories)


def test_fixed_seed_is_reproducible(points):
    grid = [(1.0, 0.1)]
    a = embedding_grid(points, grid, n_neighbors=10, seed=29)
    b = embedding_grid(points, grid, n_neighbors=10, seed=29)
    assert np.array_equal(a[['umap1', 'umap2']].to_numpy(), b[['umap1', 'umap2']].to_numpy())


def test_embed_shape(points):
    emb = embed(points[['x', 'y', 'z']].to_numpy(), spread=1.0, min_dist=0.5, n_neighbors=10, seed=0)
    assert emb.shape == (len(points), 2)


def test_library_errors_propagate(points):
    # umap refuses min_dist larger than spread
    with pytest.raises(ValueError):
        embedding_grid(points, [(0.1, 1.0)], n_neighbors=10, seed=29)

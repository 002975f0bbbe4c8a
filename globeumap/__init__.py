from globeumap.sampler import sample_sphere_points
from globeumap.regions import load_world, validate_polygons, join_continents, land_only
from globeumap.projection import to_cartesian
from globeumap.embedding import parameter_grid, embed, embedding_grid
from globeumap.clustering import knn_graph, leiden_clusters, assign_clusters
from globeumap.pipeline import build_table, run, PipelineResult

__version__ = "0.1.0"

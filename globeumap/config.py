import os

# Natural Earth 110m countries, geopandas reads the zip straight from the URL
WORLD_PATH = 'https://naciscdn.org/naturalearth/110m/cultural/ne_110m_admin_0_countries.zip'
CONTINENT_COLUMN = 'CONTINENT'
OCEANS = 'oceans'

N_POINTS = 5000
SEED = 29
EARTH_RADIUS_KM = 6371

# UMAP grid, rows of the grid figure are spreads, columns are min_dists
SPREADS = [0.5, 1.0, 2.0]
MIN_DISTS = [0.0, 0.1, 0.5]
UMAP_NEIGHBORS = 15

# Leiden on the k-NN graph of the 3D points
KNN_K = 15
RESOLUTION = 0.1

OUTPUT_DIR = os.path.join(os.getcwd(), 'output')
TRANSITION_FRAMES = 12
ROTATION_FRAMES = 36
FRAME_DURATION_MS = 80

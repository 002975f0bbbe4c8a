import numbers
from typing import Optional

import numpy as np
import pandas as pd


def sample_sphere_points(n: int, seed: Optional[int] = None) -> pd.DataFrame:
    """Draw n points uniformly over the surface of a sphere.

    Longitude is uniform, but latitude is not: sampling sin(latitude) uniformly
    on [-1, 1] keeps equal-area bands equally populated, so the poles don't
    collect more points than the equator.
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise ValueError(f"Number of points must be an integer, got {n!r}.")
    if n <= 0:
        raise ValueError(f"Number of points must be positive, got {n}.")

    rng = np.random.default_rng(seed)
    longitude = rng.uniform(-180.0, 180.0, size=n)
    latitude = np.degrees(np.arcsin(rng.uniform(-1.0, 1.0, size=n)))

    df = pd.DataFrame({'longitude': longitude, 'latitude': latitude})
    df.index.name = 'point_id'
    return df

import numpy as np
import pandas as pd

from globeumap.config import EARTH_RADIUS_KM


def to_cartesian(df: pd.DataFrame, radius: float = EARTH_RADIUS_KM) -> pd.DataFrame:
    if 'longitude' not in df.columns or 'latitude' not in df.columns:
        raise ValueError("DataFrame must contain 'longitude' and 'latitude' columns.")

    df = df.copy()
    df['lon_rad'] = np.radians(df['longitude'])
    df['lat_rad'] = np.radians(df['latitude'])

    cos_lat = np.cos(df['lat_rad'])
    df['x'] = radius * cos_lat * np.cos(df['lon_rad'])
    df['y'] = radius * cos_lat * np.sin(df['lon_rad'])
    df['z'] = radius * np.sin(df['lat_rad'])
    return df


def coordinates(df: pd.DataFrame) -> np.ndarray:
    """(n, 3) array of the Cartesian columns."""
    if not {'x', 'y', 'z'}.issubset(df.columns):
        raise ValueError("DataFrame must contain 'x', 'y' and 'z' columns, run to_cartesian first.")
    return df[['x', 'y', 'z']].to_numpy(dtype=np.float64)

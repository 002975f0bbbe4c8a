import os
from pathlib import Path
from typing import Dict, List, Optional

import geopandas as gpd
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.colors import to_rgba
from matplotlib.patches import Patch
from PIL import Image
from rich.progress import track

from globeumap.config import OCEANS, TRANSITION_FRAMES, ROTATION_FRAMES, FRAME_DURATION_MS

OCEAN_COLOR = 'lightblue'
MAX_LEGEND_ENTRIES = 20


def category_colors(values: pd.Series) -> Dict[object, tuple]:
    """Stable colour per category, 'oceans' is always light blue."""
    if isinstance(values.dtype, pd.CategoricalDtype):
        categories = list(values.cat.categories)
    else:
        categories = sorted(values.dropna().unique().tolist())

    palette = plt.cm.tab10.colors if len(categories) <= 10 else plt.cm.tab20.colors
    colors = {}
    i = 0
    for category in categories:
        if category == OCEANS:
            colors[category] = to_rgba(OCEAN_COLOR)
        else:
            colors[category] = to_rgba(palette[i % len(palette)])
            i += 1
    return colors


def _point_colors(df: pd.DataFrame, color_by: str):
    if color_by not in df.columns:
        raise ValueError(f"Cannot colour by '{color_by}', available columns: {df.columns.tolist()}.")
    mapping = category_colors(df[color_by])
    return np.array([mapping[v] for v in df[color_by]]), mapping


def _add_legend(ax, mapping: Dict[object, tuple], color_by: str):
    if len(mapping) > MAX_LEGEND_ENTRIES:
        return
    handles = [Patch(color=c, label=str(l)) for l, c in mapping.items()]
    ax.legend(handles=handles, title=color_by, prop={'size': 6}, loc='upper right')


def _prepare_path(path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _save_figure(fig, path) -> Path:
    path = _prepare_path(path)
    fig.savefig(path, dpi=120, bbox_inches='tight')
    plt.close(fig)
    print(f"Saved {path}")
    return path


def _rasterize(fig) -> Image.Image:
    fig.canvas.draw()
    return Image.fromarray(np.asarray(fig.canvas.buffer_rgba())).convert('RGB')


def _save_gif(frames: List[Image.Image], path, duration: int) -> Path:
    path = _prepare_path(path)
    frames[0].save(path, save_all=True, append_images=frames[1:], duration=duration, loop=0)
    print(f"Saved {path} ({len(frames)} frames)")
    return path


def plot_world(df: pd.DataFrame, world: Optional[gpd.GeoDataFrame], color_by: str = 'continent',
               path=os.path.join('output', 'world_points.png')) -> Path:
    colors, mapping = _point_colors(df, color_by)
    fig, ax = plt.subplots(figsize=(12, 6))
    if world is not None:
        world.boundary.plot(ax=ax, color='gray', linewidth=0.4)
    ax.scatter(df['longitude'], df['latitude'], c=colors, s=3)
    ax.set_xlim(-180, 180)
    ax.set_ylim(-90, 90)
    ax.set_xlabel('Longitude')
    ax.set_ylabel('Latitude')
    ax.set_title(f'Sampled points by {color_by}')
    _add_legend(ax, mapping, color_by)
    return _save_figure(fig, path)


def _sphere_axes(df: pd.DataFrame, colors: np.ndarray):
    fig = plt.figure(figsize=(7, 7))
    ax = fig.add_subplot(111, projection='3d')
    ax.scatter(df['x'], df['y'], df['z'], c=colors, s=3, depthshade=False)
    ax.set_box_aspect((1, 1, 1))
    ax.set_xlabel('x (km)')
    ax.set_ylabel('y (km)')
    ax.set_zlabel('z (km)')
    return fig, ax


def plot_sphere(df: pd.DataFrame, color_by: str = 'continent', path=os.path.join('output', 'sphere_points.png'),
                elev: float = 20, azim: float = 30) -> Path:
    colors, mapping = _point_colors(df, color_by)
    fig, ax = _sphere_axes(df, colors)
    ax.view_init(elev=elev, azim=azim)
    ax.set_title(f'Points on the sphere by {color_by}')
    _add_legend(ax, mapping, color_by)
    return _save_figure(fig, path)


def plot_embedding_grid(embeddings: pd.DataFrame, color_by: str = 'continent',
                        path=os.path.join('output', 'umap_grid.png')) -> Path:
    """One panel per (spread, min_dist), spreads down the rows."""
    colors, mapping = _point_colors(embeddings, color_by)
    spreads = sorted(embeddings['spread'].unique())
    min_dists = sorted(embeddings['min_dist'].unique())

    fig, axes = plt.subplots(len(spreads), len(min_dists), figsize=(4 * len(min_dists), 4 * len(spreads)), squeeze=False)
    for i, spread in enumerate(spreads):
        for j, min_dist in enumerate(min_dists):
            ax = axes[i][j]
            mask = ((embeddings['spread'] == spread) & (embeddings['min_dist'] == min_dist)).to_numpy()
            ax.scatter(embeddings.loc[mask, 'umap1'], embeddings.loc[mask, 'umap2'], c=colors[mask], s=3)
            ax.set_title(f'spread={spread}, min_dist={min_dist}', fontsize=10)
            ax.set_xticks([])
            ax.set_yticks([])
    _add_legend(axes[0][-1], mapping, color_by)
    fig.tight_layout()
    return _save_figure(fig, path)


def _normalize(layout: np.ndarray) -> np.ndarray:
    lo = layout.min(axis=0)
    span = layout.max(axis=0) - lo
    span[span == 0] = 1.0
    return 2 * (layout - lo) / span - 1


def _layouts(embeddings: pd.DataFrame, df: pd.DataFrame):
    # the geographic layout first, then every grid cell in the order it was computed
    layouts = [_normalize(df[['longitude', 'latitude']].to_numpy(dtype=np.float64))]
    titles = ['longitude / latitude']
    for params in embeddings['params'].unique():
        cell = embeddings[embeddings['params'] == params].set_index('point_id')
        layouts.append(_normalize(cell.loc[df.index, ['umap1', 'umap2']].to_numpy(dtype=np.float64)))
        titles.append(params)
    return layouts, titles


def animate_embeddings(embeddings: pd.DataFrame, df: pd.DataFrame, color_by: str = 'continent',
                       path=os.path.join('output', 'world_projection.gif'),
                       transition_frames: int = TRANSITION_FRAMES, duration: int = FRAME_DURATION_MS) -> Path:
    """Morph the points from their map positions through each UMAP embedding."""
    if embeddings.empty or df.empty:
        raise ValueError("Nothing to animate, the embedding table is empty.")
    colors, mapping = _point_colors(df, color_by)
    layouts, titles = _layouts(embeddings, df)

    fig, ax = plt.subplots(figsize=(6, 6))
    scatter = ax.scatter(layouts[0][:, 0], layouts[0][:, 1], c=colors, s=4)
    ax.set_xlim(-1.1, 1.1)
    ax.set_ylim(-1.1, 1.1)
    ax.set_xticks([])
    ax.set_yticks([])
    title = ax.set_title(titles[0], fontsize=10)
    _add_legend(ax, mapping, color_by)

    steps = []
    for k in range(len(layouts) - 1):
        for t in np.linspace(0.0, 1.0, max(transition_frames, 1), endpoint=False):
            steps.append((k, t))
    steps.append((len(layouts) - 1, 0.0))

    frames = []
    for k, t in track(steps, description=f"Rendering {Path(path).name}..."):
        if t == 0.0:
            positions = layouts[k]
            title.set_text(titles[k])
        else:
            positions = (1 - t) * layouts[k] + t * layouts[k + 1]
            title.set_text(f'{titles[k]} -> {titles[k + 1]}')
        scatter.set_offsets(positions)
        frames.append(_rasterize(fig))
    plt.close(fig)
    return _save_gif(frames, path, duration)


def animate_sphere(df: pd.DataFrame, color_by: str = 'continent', path=os.path.join('output', 'sphere_projection.gif'),
                   n_frames: int = ROTATION_FRAMES, elev: float = 20, duration: int = FRAME_DURATION_MS) -> Path:
    """Rotate the 3D scatter once around the z axis."""
    if df.empty:
        raise ValueError("Nothing to animate, the point table is empty.")
    colors, mapping = _point_colors(df, color_by)
    fig, ax = _sphere_axes(df, colors)
    ax.set_title(f'Points on the sphere by {color_by}')
    _add_legend(ax, mapping, color_by)

    frames = []
    for azim in track(np.linspace(0, 360, n_frames, endpoint=False), description=f"Rendering {Path(path).name}..."):
        ax.view_init(elev=elev, azim=azim)
        frames.append(_rasterize(fig))
    plt.close(fig)
    return _save_gif(frames, path, duration)

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


def _pyplot():
    try:
        import matplotlib
        matplotlib.use('Agg')
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise RuntimeError("Matplotlib is not available. Please install matplotlib.") from e
    return plt


def _closed(points: np.ndarray) -> np.ndarray:
    return np.vstack([points, points[:1]])


def plot_outline(bounds, ax=None, segments: int = 72, save: Optional[str] = None,
                 show_bounding_box: bool = True, color: str = 'C0'):
    """
    Draw the polygon of 2D bounds.

    :param bounds: Any SurfaceBounds
    :param ax: Existing axes to draw into; a new figure is created otherwise
    :param segments: Segments per full turn for curved edges
    :param save: Optional path to save the figure to
    :param show_bounding_box: Also draw the bounding box, dashed
    :return: (fig, ax)
    """
    plt = _pyplot()
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))
    else:
        fig = ax.figure

    outline = _closed(bounds.vertices(segments))
    ax.fill(outline[:, 0], outline[:, 1], color=color, alpha=0.3)
    ax.plot(outline[:, 0], outline[:, 1], color=color, lw=1.5, label=type(bounds).__name__)
    if show_bounding_box:
        box = _closed(bounds.bounding_box().vertices())
        ax.plot(box[:, 0], box[:, 1], color='k', lw=0.8, ls='--')

    ax.set_aspect('equal')
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.legend(loc='upper right')
    if save:
        fig.savefig(save, dpi=150, bbox_inches='tight')
    return fig, ax


def plot_volume(volume, transform=None, ax=None, save: Optional[str] = None,
                color: Tuple[float, float, float] = (0.4, 0.6, 0.8), alpha: float = 0.4):
    """
    Draw the polyhedron of volume bounds in 3D.

    :param volume: DoubleTrapezoidVolumeBounds
    :param transform: Optional 4x4 placement
    :return: (fig, ax)
    """
    plt = _pyplot()
    from mpl_toolkits.mplot3d.art3d import Poly3DCollection

    if ax is None:
        fig = plt.figure(figsize=(8, 7))
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.figure

    poly = volume.polyhedron(transform)
    faces = [poly.vertices[list(face)] for face in poly.faces]
    ax.add_collection3d(Poly3DCollection(faces, facecolors=[color], edgecolors='k',
                                         linewidths=0.6, alpha=alpha))
    vmin, vmax = poly.extent()
    ax.set_xlim(vmin[0], vmax[0])
    ax.set_ylim(vmin[1], vmax[1])
    ax.set_zlim(vmin[2], vmax[2])
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_zlabel('z')
    if save:
        fig.savefig(save, dpi=150, bbox_inches='tight')
    return fig, ax

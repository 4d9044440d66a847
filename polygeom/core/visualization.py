"""Matplotlib plots of polygons and triangulations.

Used to inspect triangulations and to dump polygon pairs on which two
intersection predicates disagree.
"""
from __future__ import annotations

import os as _os
import matplotlib as _mpl
# Ensure a non-interactive backend in headless environments before importing pyplot
if not _os.environ.get('MPLBACKEND'):
    _mpl.use('Agg')
import numpy as np
import matplotlib.pyplot as plt

from .logging_utils import get_logger
from .polygon import Polygon2D

logger = get_logger('polygeom.viz')

__all__ = ['plot_triangulation', 'plot_polygon_pair']


def _closed(ring):
    pts = np.asarray(ring, dtype=float).reshape(-1, 2)
    if pts.shape[0] == 0:
        return pts
    return np.vstack((pts, pts[:1]))


def _draw_polygon(ax, polygon: Polygon2D, color, label=None, fill_alpha=0.25):
    outer = _closed(polygon.outer)
    if outer.shape[0] == 0:
        return
    ax.fill(outer[:, 0], outer[:, 1], color=color, alpha=fill_alpha, label=label)
    ax.plot(outer[:, 0], outer[:, 1], color=color, linewidth=1.5)
    for hole in polygon.inners:
        pts = _closed(hole)
        if pts.shape[0] == 0:
            continue
        ax.fill(pts[:, 0], pts[:, 1], color='white')
        ax.plot(pts[:, 0], pts[:, 1], color=color, linewidth=1.0, linestyle='--')


def plot_triangulation(polygon: Polygon2D, triangles, outname="triangulation.png"):
    """Plot a polygon (with holes) and its triangles to a PNG file.

    Args:
        polygon: Polygon2D that was triangulated
        triangles: iterable of triangle Polygon2D instances
        outname: output image path
    """
    fig, ax = plt.subplots(figsize=(6, 6))
    _draw_polygon(ax, polygon, color=(0.85, 0.2, 0.2), fill_alpha=0.1)
    count = 0
    for tri in triangles:
        pts = _closed(tri.outer)
        ax.plot(pts[:, 0], pts[:, 1], color='black', linewidth=0.6)
        count += 1
    ax.set_title(f'{count} triangles')
    ax.set_aspect('equal')
    fig.savefig(outname, dpi=150)
    plt.close(fig)
    logger.debug("Wrote triangulation plot %s", outname)
    return outname


def plot_polygon_pair(polygon_a: Polygon2D, polygon_b: Polygon2D, outname="pair.png", title=None):
    """Plot two polygons on the same axes (first in blue, second in orange)."""
    fig, ax = plt.subplots(figsize=(6, 6))
    _draw_polygon(ax, polygon_a, color=(0.2, 0.4, 0.85), label='a')
    _draw_polygon(ax, polygon_b, color=(0.95, 0.55, 0.1), label='b')
    if title:
        ax.set_title(title)
    ax.set_aspect('equal')
    if ax.get_legend_handles_labels()[0]:
        ax.legend(loc='upper right')
    fig.savefig(outname, dpi=150)
    plt.close(fig)
    logger.debug("Wrote polygon pair plot %s", outname)
    return outname

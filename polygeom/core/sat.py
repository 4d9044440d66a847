"""Separating Axis Theorem (SAT) intersection test for convex polygons.

Both polygons are projected onto every unit outward edge normal; two convex
polygons are disjoint iff some such axis separates their projections.
Independent of the GJK implementation and used to cross-validate it.

Touching policy mirrors gjk.intersects_convex: by default projections that
overlap by at most ``eps`` count as separated (edge/vertex contact is not an
intersection); with ``touching=True`` projections separated by at most
``eps`` count as overlapping. The two algorithms may still disagree exactly
at zero-measure contact.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from .config import IntersectionConfig
from .constants import EPS_LENGTH
from .polygon import polygon_is_degenerate, polygon_vertices, polygons_in_contact

__all__ = ['intersects', 'edge_normals', 'project']


def edge_normals(verts: np.ndarray) -> np.ndarray:
    """Unit outward normals of a counter-clockwise ring; zero-length edges are skipped."""
    edges = np.roll(verts, -1, axis=0) - verts
    lengths = np.linalg.norm(edges, axis=1)
    keep = lengths > EPS_LENGTH
    edges = edges[keep]; lengths = lengths[keep]
    # right-hand normal of a CCW edge points outward
    return np.column_stack((edges[:, 1], -edges[:, 0])) / lengths[:, None]


def project(verts: np.ndarray, axis: np.ndarray):
    """(min, max) interval of the vertices projected on axis."""
    dots = verts @ axis
    return float(dots.min()), float(dots.max())


def intersects(polygon_a, polygon_b, touching: Optional[bool] = None,
               config: Optional[IntersectionConfig] = None) -> bool:
    """Return True if two convex polygons (no holes) intersect.

    Same contract as gjk.intersects_convex. Degenerate polygons (fewer than
    3 vertices or zero area) only intersect in touching mode, when they come
    within the contact tolerance of the other polygon or lie inside it.
    """
    cfg = config or IntersectionConfig()
    touching = cfg.touching if touching is None else touching
    verts_a = polygon_vertices(polygon_a)
    verts_b = polygon_vertices(polygon_b)
    if verts_a.shape[0] == 0 or verts_b.shape[0] == 0:
        return False
    eps = cfg.tolerance(verts_a, verts_b)
    if polygon_is_degenerate(verts_a) or polygon_is_degenerate(verts_b):
        # edge normals of a flat ring do not cover its own direction
        return touching and polygons_in_contact(verts_a, verts_b, eps)
    axes = np.vstack((edge_normals(verts_a), edge_normals(verts_b)))
    for axis in axes:
        min_a, max_a = project(verts_a, axis)
        min_b, max_b = project(verts_b, axis)
        if touching:
            separated = max_a < min_b - eps or max_b < min_a - eps
        else:
            separated = max_a <= min_b + eps or max_b <= min_a + eps
        if separated:
            return False
    return True

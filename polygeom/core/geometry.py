"""Geometry primitives: points, vector algebra and segment predicates.

Points are immutable named tuples so they compare exactly, hash, and convert
directly with ``numpy.asarray``. Every function here also accepts plain
sequences or arrays of the right length.
"""
from __future__ import annotations

import math
from typing import NamedTuple, Optional

import numpy as np

from .constants import EPS_CURVATURE, EPS_LENGTH

__all__ = [
    'Point2D', 'Point3D',
    'dot', 'cross', 'norm', 'normalize', 'orient',
    'calc_distance2d', 'calc_squared_distance2d', 'calc_distance3d',
    'seg_intersect', 'segment_intersection', 'calc_curvature',
    'triangle_area', 'point_in_triangle', 'point_in_polygon',
    'point_segment_distance', 'bbox_overlap',
]


class Point2D(NamedTuple):
    x: float
    y: float


class Point3D(NamedTuple):
    x: float
    y: float
    z: float = 0.0


def _as_point(values):
    values = [float(v) for v in values]
    if len(values) == 2:
        return Point2D(*values)
    if len(values) == 3:
        return Point3D(*values)
    raise ValueError(f"Expected a 2D or 3D vector, got {len(values)} components")


def _xyz(p):
    """Return (x, y, z) for a 2D or 3D point-like (z defaults to 0)."""
    if len(p) == 2:
        return float(p[0]), float(p[1]), 0.0
    return float(p[0]), float(p[1]), float(p[2])


def dot(a, b) -> float:
    return float(np.dot(np.asarray(a, dtype=float), np.asarray(b, dtype=float)))


def cross(a, b):
    """2D scalar cross product, or the 3D cross product as a Point3D."""
    a = np.asarray(a, dtype=float); b = np.asarray(b, dtype=float)
    if a.shape[0] == 2 and b.shape[0] == 2:
        return float(a[0]*b[1] - a[1]*b[0])
    return Point3D(*np.cross(a, b).tolist())


def norm(v) -> float:
    return float(np.linalg.norm(np.asarray(v, dtype=float)))


def normalize(v):
    """Return the unit vector of v with the same dimension.

    Raises ValueError for a (near) zero vector.
    """
    arr = np.asarray(v, dtype=float)
    length = float(np.linalg.norm(arr))
    if length < EPS_LENGTH:
        raise ValueError("Cannot normalize a zero-length vector")
    return _as_point((arr / length).tolist())


def orient(a, b, c) -> float:
    """2D orientation (signed area * 2) for points a,b,c.

    Returns a positive value when (a,b,c) are counter-clockwise, negative when clockwise,
    and zero when colinear.
    """
    return float((b[0]-a[0])*(c[1]-a[1]) - (b[1]-a[1])*(c[0]-a[0]))


def calc_squared_distance2d(p1, p2) -> float:
    dx = float(p1[0]) - float(p2[0]); dy = float(p1[1]) - float(p2[1])
    return dx*dx + dy*dy


def calc_distance2d(p1, p2) -> float:
    return math.sqrt(calc_squared_distance2d(p1, p2))


def calc_distance3d(p1, p2) -> float:
    x1, y1, z1 = _xyz(p1); x2, y2, z2 = _xyz(p2)
    return math.sqrt((x1-x2)**2 + (y1-y2)**2 + (z1-z2)**2)


def seg_intersect(p1, p2, p3, p4) -> bool:
    """Return True if segment p1-p2 strictly intersects p3-p4 (excluding shared endpoints and colinear overlaps).

    Parameters accept array-like 2D points.
    """
    p1 = np.asarray(p1, dtype=float); p2 = np.asarray(p2, dtype=float)
    p3 = np.asarray(p3, dtype=float); p4 = np.asarray(p4, dtype=float)
    if (p1 == p3).all() or (p1 == p4).all() or (p2 == p3).all() or (p2 == p4).all():
        return False
    o1 = orient(p1, p2, p3); o2 = orient(p1, p2, p4)
    o3 = orient(p3, p4, p1); o4 = orient(p3, p4, p2)
    if o1 == 0 and o2 == 0 and o3 == 0 and o4 == 0:
        return False
    return (o1*o2 < 0) and (o3*o4 < 0)


def segment_intersection(p1, p2, p3, p4) -> Optional[Point3D]:
    """Intersection point of segments p1-p2 and p3-p4, or None.

    Works on the xy projection; z of the result is interpolated along p1-p2.
    Parallel and colinear segments (including identical ones) and segments
    degenerated to a point have no single intersection and return None. An
    endpoint lying on the other segment counts as an intersection.
    """
    x1, y1, z1 = _xyz(p1); x2, y2, z2 = _xyz(p2)
    x3, y3, z3 = _xyz(p3); x4, y4, _ = _xyz(p4)
    det = (x1 - x2) * (y4 - y3) - (x4 - x3) * (y1 - y2)
    if det == 0.0:
        return None
    # p = t*p1 + (1-t)*p2 = s*p3 + (1-s)*p4
    t = ((y4 - y3) * (x4 - x2) + (x3 - x4) * (y4 - y2)) / det
    s = ((y2 - y1) * (x4 - x2) + (x1 - x2) * (y4 - y2)) / det
    if t < 0.0 or t > 1.0 or s < 0.0 or s > 1.0:
        return None
    return Point3D(t*x1 + (1.0 - t)*x2, t*y1 + (1.0 - t)*y2, t*z1 + (1.0 - t)*z2)


def calc_curvature(p1, p2, p3) -> float:
    """Signed curvature of the circle through three points (xy plane).

    Positive for a counter-clockwise turn p1 -> p2 -> p3, zero for colinear
    points. Raises ValueError when two of the points coincide.
    """
    denominator = calc_distance2d(p1, p2) * calc_distance2d(p2, p3) * calc_distance2d(p3, p1)
    if abs(denominator) < EPS_CURVATURE:
        raise ValueError("Points are too close for curvature calculation")
    return 2.0 * orient(p1, p2, p3) / denominator


def triangle_area(p0, p1, p2) -> float:
    """Signed triangle area (positive for counter-clockwise)."""
    return 0.5 * orient(p0, p1, p2)


def point_in_triangle(pt, a, b, c) -> bool:
    """Barycentric containment test, boundary inclusive; False for degenerate triangles."""
    v0 = (c[0]-a[0], c[1]-a[1]); v1 = (b[0]-a[0], b[1]-a[1]); v2 = (pt[0]-a[0], pt[1]-a[1])
    den = v0[0]*v1[1] - v1[0]*v0[1]
    if abs(den) < 1e-15:
        return False
    inv_den = 1.0 / den
    u = (v2[0]*v1[1] - v1[0]*v2[1]) * inv_den
    v = (v0[0]*v2[1] - v2[0]*v0[1]) * inv_den
    return (u >= 0) and (v >= 0) and (u + v <= 1)


def point_in_polygon(x, y, ring) -> bool:
    """Even-odd ray casting test of (x, y) against an implicitly closed ring."""
    inside = False
    n = len(ring)
    for i in range(n):
        x0, y0 = ring[i][0], ring[i][1]
        x1, y1 = ring[(i+1) % n][0], ring[(i+1) % n][1]
        if (y0 > y) != (y1 > y):
            xint = (x1 - x0) * (y - y0) / (y1 - y0) + x0
            if x < xint:
                inside = not inside
    return inside


def point_segment_distance(p, a, b) -> float:
    """Euclidean distance from point p to segment a-b (2D)."""
    ax, ay = float(a[0]), float(a[1])
    dx = float(b[0]) - ax; dy = float(b[1]) - ay
    px = float(p[0]) - ax; py = float(p[1]) - ay
    length_sq = dx*dx + dy*dy
    if length_sq == 0.0:
        return math.hypot(px, py)
    t = max(0.0, min(1.0, (px*dx + py*dy) / length_sq))
    return math.hypot(px - t*dx, py - t*dy)


def bbox_overlap(minx1, maxx1, miny1, maxy1, minx2, maxx2, miny2, maxy2):
    """Vectorized bbox overlap test (boundary contact counts as overlap).

    All inputs may be scalars or arrays broadcastable to a common shape.
    """
    return np.logical_not((maxx1 < minx2) | (maxx2 < minx1) | (maxy1 < miny2) | (maxy2 < miny1))

"""Polygon2D value type and ring-level predicates.

A Polygon2D holds an outer ring and zero or more inner rings (holes). Rings
are implicitly closed. ``correct()`` normalizes orientation (outer ring
counter-clockwise, holes clockwise) and drops a repeated closing vertex; the
algorithms in this package call it before any orientation-dependent work.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

from .constants import EPS_AREA
from .geometry import (
    Point2D,
    orient,
    point_in_polygon,
    point_segment_distance,
    seg_intersect,
)

__all__ = [
    'Polygon2D', 'Ring',
    'ring_signed_area', 'polygon_area', 'polygon_vertices', 'polygon_bounds',
    'is_convex', 'is_triangle', 'polygon_has_self_intersections', 'reflex_vertices',
    'polygon_contains_point', 'polygon_boundary_distance', 'polygon_is_degenerate',
    'polygons_in_contact',
]

Ring = Tuple[Point2D, ...]


def _to_ring(points: Iterable) -> Ring:
    ring = tuple(Point2D(float(p[0]), float(p[1])) for p in points)
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring = ring[:-1]
    return ring


def ring_signed_area(ring: Sequence) -> float:
    """Shoelace signed area; positive for counter-clockwise rings."""
    if len(ring) < 3:
        return 0.0
    coords = np.asarray(ring, dtype=float)
    x = coords[:, 0]; y = coords[:, 1]
    return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))


@dataclass(frozen=True)
class Polygon2D:
    outer: Ring = ()
    inners: Tuple[Ring, ...] = ()

    @classmethod
    def from_points(cls, outer: Iterable, inners: Iterable[Iterable] = ()) -> 'Polygon2D':
        return cls(_to_ring(outer), tuple(_to_ring(h) for h in inners))

    def correct(self) -> 'Polygon2D':
        outer = _to_ring(self.outer)
        if ring_signed_area(outer) < 0:
            outer = outer[::-1]
        inners = []
        for hole in self.inners:
            hole = _to_ring(hole)
            if ring_signed_area(hole) > 0:
                hole = hole[::-1]
            inners.append(hole)
        return Polygon2D(outer, tuple(inners))

    @property
    def area(self) -> float:
        return polygon_area(self)

    def to_wkt(self) -> str:
        """Well-known-text representation (rings explicitly closed)."""
        def ring_wkt(ring):
            pts = list(ring) + list(ring[:1])
            return '(' + ','.join(f'{float(p[0])!r} {float(p[1])!r}' for p in pts) + ')'
        if not self.outer:
            return 'POLYGON EMPTY'
        rings = [ring_wkt(self.outer)] + [ring_wkt(h) for h in self.inners if h]
        return 'POLYGON(' + ','.join(rings) + ')'


def polygon_area(polygon: Polygon2D) -> float:
    """Unsigned area of the outer ring minus the areas of its holes."""
    area = abs(ring_signed_area(polygon.outer))
    for hole in polygon.inners:
        area -= abs(ring_signed_area(hole))
    return area


def polygon_vertices(polygon) -> np.ndarray:
    """(N,2) float array of the outer ring, counter-clockwise.

    Accepts a Polygon2D or any sequence of 2D points.
    """
    ring = _to_ring(polygon.outer if isinstance(polygon, Polygon2D) else polygon)
    coords = np.asarray(ring, dtype=float).reshape(-1, 2)
    if ring_signed_area(coords) < 0:
        coords = coords[::-1]
    return coords


def polygon_bounds(polygon: Polygon2D) -> Tuple[float, float, float, float]:
    """(minx, maxx, miny, maxy) of the outer ring."""
    coords = np.asarray(polygon.outer, dtype=float).reshape(-1, 2)
    if coords.size == 0:
        return (np.inf, -np.inf, np.inf, -np.inf)
    return (float(coords[:, 0].min()), float(coords[:, 0].max()),
            float(coords[:, 1].min()), float(coords[:, 1].max()))


def polygon_is_degenerate(polygon, min_area: float = EPS_AREA) -> bool:
    ring = polygon.outer if isinstance(polygon, Polygon2D) else polygon
    return len(ring) < 3 or abs(ring_signed_area(ring)) <= min_area


def is_triangle(polygon: Polygon2D) -> bool:
    return len(polygon.outer) == 3 and not any(polygon.inners)


def is_convex(polygon, strict: bool = False) -> bool:
    """True if every turn of the outer ring has the same orientation.

    With strict=True colinear (zero) turns are rejected as well.
    """
    ring = polygon.outer if isinstance(polygon, Polygon2D) else _to_ring(polygon)
    n = len(ring)
    if n < 3:
        return False
    sign = 1.0 if ring_signed_area(ring) >= 0 else -1.0
    for i in range(n):
        turn = sign * orient(ring[i-1], ring[i], ring[(i+1) % n])
        if turn < 0 or (strict and turn <= 0):
            return False
    return True


def reflex_vertices(polygon) -> list:
    """Indices of outer-ring vertices with an interior angle above 180 degrees."""
    ring = polygon.outer if isinstance(polygon, Polygon2D) else _to_ring(polygon)
    n = len(ring)
    if n < 4:
        return []
    sign = 1.0 if ring_signed_area(ring) >= 0 else -1.0
    return [i for i in range(n) if sign * orient(ring[i-1], ring[i], ring[(i+1) % n]) < 0]


def polygon_has_self_intersections(polygon) -> bool:
    """Return True if the ring contains any pair of crossing non-adjacent edges."""
    ring = polygon.outer if isinstance(polygon, Polygon2D) else _to_ring(polygon)
    n = len(ring)
    if n < 4:
        return False
    for i in range(n):
        a = ring[i]; b = ring[(i+1) % n]
        for j in range(i+2, n):
            if i == 0 and j == n - 1:
                continue
            if seg_intersect(a, b, ring[j], ring[(j+1) % n]):
                return True
    return False


def polygon_contains_point(polygon: Polygon2D, x: float, y: float) -> bool:
    """Even-odd containment against the outer ring and holes."""
    if not point_in_polygon(x, y, polygon.outer):
        return False
    return not any(point_in_polygon(x, y, hole) for hole in polygon.inners if len(hole) >= 3)


def _edges(ring):
    n = len(ring)
    if n == 1:
        return [(ring[0], ring[0])]
    return [(ring[i], ring[(i+1) % n]) for i in range(n)]


def polygon_boundary_distance(a, b) -> float:
    """Minimum distance between the outer boundaries of two polygons.

    Zero when boundaries cross or touch. Containment of one polygon inside the
    other is not detected here.
    """
    ring_a = a.outer if isinstance(a, Polygon2D) else _to_ring(a)
    ring_b = b.outer if isinstance(b, Polygon2D) else _to_ring(b)
    if not ring_a or not ring_b:
        return float('inf')
    best = float('inf')
    edges_a = _edges(ring_a); edges_b = _edges(ring_b)
    for p, q in edges_a:
        for r, s in edges_b:
            if seg_intersect(p, q, r, s):
                return 0.0
            best = min(best,
                       point_segment_distance(p, r, s), point_segment_distance(q, r, s),
                       point_segment_distance(r, p, q), point_segment_distance(s, p, q))
    return best


def polygons_in_contact(a, b, tolerance: float) -> bool:
    """True if the outer rings come within tolerance or a vertex of one lies inside the other.

    Unlike polygon_boundary_distance this also reports a flat or single-point
    ring lying inside the other polygon.
    """
    ring_a = a.outer if isinstance(a, Polygon2D) else _to_ring(a)
    ring_b = b.outer if isinstance(b, Polygon2D) else _to_ring(b)
    if not ring_a or not ring_b:
        return False
    if polygon_boundary_distance(ring_a, ring_b) <= tolerance:
        return True
    return (any(point_in_polygon(p[0], p[1], ring_b) for p in ring_a)
            or any(point_in_polygon(p[0], p[1], ring_a) for p in ring_b))

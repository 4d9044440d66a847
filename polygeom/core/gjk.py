"""Gilbert-Johnson-Keerthi (GJK) intersection test for convex polygons.

The test works in the Minkowski difference A - B, which contains the origin
iff A and B intersect. A simplex of at most three support points is evolved
toward the origin:

- Support function: the vertex of A farthest along d minus the vertex of B
  farthest along -d.
- A support point that does not pass the origin along d proves separation:
  the whole difference lies in the half-plane {x . d <= reach}.
- When the origin sits on a simplex edge, the far side of that edge is checked
  once more to tell interior overlap apart from touching.

By default only interior overlap counts (polygons sharing just an edge or a
vertex do not intersect). ``touching=True`` also reports polygons whose
boundaries are within the contact tolerance, or a flat polygon lying inside
the other.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from .config import IntersectionConfig
from .logging_utils import get_logger
from .polygon import polygon_is_degenerate, polygon_vertices, polygons_in_contact

logger = get_logger('polygeom.gjk')

__all__ = ['intersects_convex', 'minkowski_support']


def minkowski_support(verts_a: np.ndarray, verts_b: np.ndarray, direction: np.ndarray) -> np.ndarray:
    """Support point of A - B along direction."""
    return verts_a[int(np.argmax(verts_a @ direction))] - verts_b[int(np.argmin(verts_b @ direction))]


def _left_normal(v: np.ndarray) -> Optional[np.ndarray]:
    length = float(np.hypot(v[0], v[1]))
    if length == 0.0:
        return None
    return np.array([-v[1], v[0]]) / length


def _outward_normal(p: np.ndarray, q: np.ndarray, opposite: np.ndarray) -> Optional[np.ndarray]:
    """Unit normal of edge p-q pointing away from the opposite vertex."""
    n = _left_normal(q - p)
    if n is None:
        return None
    return -n if float(np.dot(n, opposite - p)) > 0.0 else n


def _interiors_overlap(verts_a, verts_b, eps, max_iterations) -> bool:
    def reach(direction):
        point = minkowski_support(verts_a, verts_b, direction)
        return point, float(np.dot(point, direction))

    direction = verts_a.mean(axis=0) - verts_b.mean(axis=0)
    if np.linalg.norm(direction) <= eps:
        direction = np.array([1.0, 0.0])
    simplex = []
    for _ in range(max_iterations):
        length = float(np.linalg.norm(direction))
        if length <= eps:
            # the origin is a support point of A - B, so it lies on the boundary
            return False
        direction = direction / length
        point, extent = reach(direction)
        if extent <= eps:
            return False
        if any(float(np.dot(point - s, direction)) <= eps for s in simplex):
            # no progress past the current simplex: the origin is within eps of its boundary
            logger.debug("GJK support point %s made no progress; reporting contact only", point)
            return False
        simplex.append(point)

        if len(simplex) == 1:
            direction = -point
            continue

        if len(simplex) == 2:
            b, a = simplex
            ab = b - a
            if float(np.dot(ab, -a)) <= 0.0:
                # origin in the vertex region of a
                simplex = [a]
                direction = -a
                continue
            normal = _left_normal(ab)
            offset = float(np.dot(normal, -a))
            if abs(offset) <= eps:
                # origin on segment ab: interior only if A - B extends to both sides
                return reach(normal)[1] > eps and reach(-normal)[1] > eps
            direction = normal if offset > 0.0 else -normal
            continue

        c, b, a = simplex
        n_ab = _outward_normal(a, b, c)
        n_ac = _outward_normal(a, c, b)
        n_bc = _outward_normal(b, c, a)
        if n_ab is None or n_ac is None or n_bc is None:
            return False
        d_ab = float(np.dot(n_ab, -a))
        d_ac = float(np.dot(n_ac, -a))
        d_bc = float(np.dot(n_bc, -b))
        if d_ab > eps:
            simplex = [b, a]
            direction = n_ab
            continue
        if d_ac > eps:
            simplex = [c, a]
            direction = n_ac
            continue
        if d_bc > eps:
            simplex = [c, b]
            direction = n_bc
            continue
        # origin inside the triangle, possibly within eps of an edge
        for distance, normal in ((d_ab, n_ab), (d_ac, n_ac), (d_bc, n_bc)):
            if distance >= -eps:
                return reach(normal)[1] > eps
        return True
    logger.debug("GJK reached the iteration cap (%d); reporting no intersection", max_iterations)
    return False


def intersects_convex(polygon_a, polygon_b, touching: Optional[bool] = None,
                      config: Optional[IntersectionConfig] = None) -> bool:
    """Return True if two convex polygons (no holes) intersect.

    Parameters
    ----------
    polygon_a, polygon_b : Polygon2D or sequence of 2D points
        Convex outer rings; any orientation. Non-convex input gives an
        undefined (but finite, exception-free) result.
    touching : bool, optional
        Override ``config.touching``. When False (default) polygons that only
        share boundary points do not intersect.
    config : IntersectionConfig, optional
        Contact tolerances and iteration cap. The tolerance grows with the
        coordinate magnitude (see ``IntersectionConfig.tolerance``).
    """
    cfg = config or IntersectionConfig()
    touching = cfg.touching if touching is None else touching
    verts_a = polygon_vertices(polygon_a)
    verts_b = polygon_vertices(polygon_b)
    if verts_a.shape[0] == 0 or verts_b.shape[0] == 0:
        return False
    tol = cfg.tolerance(verts_a, verts_b)
    if not (polygon_is_degenerate(verts_a) or polygon_is_degenerate(verts_b)):
        if _interiors_overlap(verts_a, verts_b, tol, cfg.gjk_max_iterations):
            return True
    if touching:
        return polygons_in_contact(verts_a, verts_b, tol)
    return False

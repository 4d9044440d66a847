"""Random convex and concave polygon generators.

Used to stress-test the intersection algorithms. Randomness always comes from
a caller-owned ``numpy.random.Generator``; when none is given a fresh
``default_rng()`` is created for the call, so no global random state is used.
"""
from __future__ import annotations

from typing import Optional

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from .config import RandomPolygonConfig
from .constants import EPS_AREA, EPS_COLINEAR
from .geometry import orient
from .logging_utils import get_logger
from .polygon import (
    Polygon2D,
    polygon_has_self_intersections,
    polygon_vertices,
    reflex_vertices,
    ring_signed_area,
)

logger = get_logger('polygeom.random_polygon')

__all__ = ['random_convex_polygon', 'random_concave_polygon']


def _chain_components(values, rng):
    """Split sorted coordinates into two monotone chains (Valtr).

    Returns one signed component per polygon edge; components sum to zero.
    """
    lo, hi = values[0], values[-1]
    last_a = last_b = lo
    components = []
    for v in values[1:-1]:
        if rng.random() < 0.5:
            components.append(v - last_a)
            last_a = v
        else:
            components.append(last_b - v)
            last_b = v
    components.append(hi - last_a)
    components.append(last_b - hi)
    return np.asarray(components, dtype=float)


def _convex_candidate(vertex_count, max_coordinate, rng):
    xs = np.sort(rng.uniform(0.0, max_coordinate, vertex_count))
    ys = np.sort(rng.uniform(0.0, max_coordinate, vertex_count))
    dx = _chain_components(xs, rng)
    dy = _chain_components(ys, rng)
    rng.shuffle(dy)
    # edge vectors sorted by angle and laid end to end give a CCW convex ring
    order = np.argsort(np.arctan2(dy, dx))
    px = np.concatenate(([0.0], np.cumsum(dx[order])[:-1]))
    py = np.concatenate(([0.0], np.cumsum(dy[order])[:-1]))
    px += xs[0] - px.min()
    py += ys[0] - py.min()
    coords = np.clip(np.column_stack((px, py)), 0.0, max_coordinate)
    return coords


def _is_strictly_convex(coords) -> bool:
    if abs(ring_signed_area(coords)) <= EPS_AREA:
        return False
    try:
        hull = ConvexHull(coords)
    except QhullError:
        return False
    # colinear or duplicate vertices are not hull vertices
    return len(hull.vertices) == len(coords)


def _validate_args(vertex_count, max_coordinate, min_vertices):
    if int(vertex_count) < min_vertices:
        raise ValueError(f"vertex_count must be >= {min_vertices}, got {vertex_count}")
    if not max_coordinate > 0:
        raise ValueError(f"max_coordinate must be positive, got {max_coordinate}")


def random_convex_polygon(vertex_count: int, max_coordinate: float,
                          rng: Optional[np.random.Generator] = None,
                          config: Optional[RandomPolygonConfig] = None) -> Polygon2D:
    """Return a random strictly convex, counter-clockwise polygon.

    The polygon has exactly ``vertex_count`` vertices with coordinates in
    ``[0, max_coordinate]``. Candidates with colinear or duplicate vertices
    are regenerated; RuntimeError is raised if ``config.max_attempts``
    candidates all fail (practically unreachable for floating-point input).
    """
    _validate_args(vertex_count, max_coordinate, 3)
    rng = rng if rng is not None else np.random.default_rng()
    cfg = config or RandomPolygonConfig()
    for attempt in range(cfg.max_attempts):
        coords = _convex_candidate(int(vertex_count), float(max_coordinate), rng)
        if _is_strictly_convex(coords):
            return Polygon2D.from_points(coords).correct()
        logger.debug("Discarding degenerate convex candidate (attempt %d)", attempt)
    raise RuntimeError(f"Could not build a convex polygon with {vertex_count} vertices "
                       f"in {cfg.max_attempts} attempts")


def _pick_non_adjacent(n, count, rng):
    chosen = []
    for i in rng.permutation(n):
        i = int(i)
        if any(abs(i - j) in (1, n - 1) for j in chosen):
            continue
        chosen.append(i)
        if len(chosen) == count:
            break
    return chosen


def _is_valid_concave(polygon: Polygon2D) -> bool:
    ring = polygon.outer
    n = len(ring)
    if len(set(ring)) != n or abs(ring_signed_area(ring)) <= EPS_AREA:
        return False
    if any(abs(orient(ring[i-1], ring[i], ring[(i+1) % n])) <= EPS_COLINEAR for i in range(n)):
        return False
    if polygon_has_self_intersections(polygon):
        return False
    return bool(reflex_vertices(polygon))


def random_concave_polygon(vertex_count: int, max_coordinate: float,
                           rng: Optional[np.random.Generator] = None,
                           config: Optional[RandomPolygonConfig] = None) -> Optional[Polygon2D]:
    """Return a random simple polygon with at least one reflex vertex, or None.

    A random convex polygon is dented by pulling one or more non-adjacent
    vertices toward its vertex centroid. Candidates that self-intersect or end
    up without a reflex vertex are retried; after ``config.max_attempts``
    failures None is returned and callers are expected to skip the sample.
    """
    _validate_args(vertex_count, max_coordinate, 4)
    rng = rng if rng is not None else np.random.default_rng()
    cfg = config or RandomPolygonConfig()
    n = int(vertex_count)
    max_dents = max(1, cfg.max_dents if cfg.max_dents is not None else n // 2)
    for attempt in range(cfg.max_attempts):
        coords = _convex_candidate(n, float(max_coordinate), rng)
        if not _is_strictly_convex(coords):
            continue
        coords = polygon_vertices(coords).copy()
        centroid = coords.mean(axis=0)
        dents = _pick_non_adjacent(n, int(rng.integers(1, max_dents + 1)), rng)
        for i in dents:
            fraction = rng.uniform(cfg.dent_min, cfg.dent_max)
            coords[i] += fraction * (centroid - coords[i])
        candidate = Polygon2D.from_points(coords).correct()
        if _is_valid_concave(candidate):
            return candidate
        logger.debug("Rejected concave candidate with %d dents (attempt %d)", len(dents), attempt)
    logger.debug("No concave polygon with %d vertices after %d attempts", n, cfg.max_attempts)
    return None

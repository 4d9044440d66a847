"""Ear-clipping triangulation of simple polygons with optional holes.

Holes are merged into the outer ring with bridge edges, producing one weakly
simple ring that is then ear-clipped:

- Each hole is bridged from its rightmost vertex. A ray cast toward +x finds
  the nearest boundary edge; its right endpoint is the bridge target unless
  a vertex inside the triangle (hole vertex, hit point, endpoint) hides it,
  in which case the hidden vertex closest in angle to the ray is used.
- Bridge endpoints are duplicated, so the merged ring visits the same
  coordinates twice. The ear test compares interior wedges at such repeated
  positions instead of treating them as ordinary blocking vertices.

Output triangles are counter-clockwise Polygon2D instances whose areas sum to
the polygon area.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .config import TriangulationConfig
from .geometry import orient, triangle_area
from .logging_utils import get_logger
from .polygon import Polygon2D, polygon_area, ring_signed_area

logger = get_logger('polygeom.triangulation')

__all__ = [
    'triangulate',
    'triangles_area',
    'ear_clip_triangulation',
    'merge_holes',
]


def triangles_area(triangles: Sequence[Polygon2D]) -> float:
    """Sum of unsigned triangle areas."""
    return float(sum(abs(ring_signed_area(t.outer)) for t in triangles))


def _sub(p, q):
    return (p[0] - q[0], p[1] - q[1])


def _cross(u, v) -> float:
    return u[0]*v[1] - u[1]*v[0]


def _in_closed_triangle(p, a, b, c) -> bool:
    """Containment in the closed triangle a, b, c of either orientation."""
    d1 = orient(a, b, p); d2 = orient(b, c, p); d3 = orient(c, a, p)
    has_neg = d1 < 0 or d2 < 0 or d3 < 0
    has_pos = d1 > 0 or d2 > 0 or d3 > 0
    return not (has_neg and has_pos)


def _wedge_is_empty(u, v) -> bool:
    return _cross(u, v) == 0 and u[0]*v[0] + u[1]*v[1] > 0


def _in_wedge(u, v, d) -> bool:
    """True if direction d lies strictly inside the wedge swept counter-clockwise from u to v.

    A wedge whose sides point the same way is empty.
    """
    after_u = _cross(u, d) > 0
    before_v = _cross(d, v) > 0
    turn = _cross(u, v)
    if turn > 0:
        return after_u and before_v
    if turn < 0 or u[0]*v[0] + u[1]*v[1] < 0:
        return after_u or before_v
    return False


def _wedges_overlap(u1, v1, u2, v2) -> bool:
    if _in_wedge(u1, v1, u2) or _in_wedge(u2, v2, u1):
        return True
    # open wedges leaving along the same ray share the directions just after it
    if _cross(u1, u2) == 0 and u1[0]*u2[0] + u1[1]*u2[1] > 0:
        return not _wedge_is_empty(u1, v1) and not _wedge_is_empty(u2, v2)
    return False


def _locally_inside(coords, ring, k, point) -> bool:
    """True if point is seen from ring[k] through the interior wedge at that vertex."""
    n = len(ring)
    a = coords[ring[k]]; prev = coords[ring[k-1]]; nxt = coords[ring[(k+1) % n]]
    if orient(prev, a, nxt) > 0:
        return orient(a, point, nxt) <= 0 and orient(a, prev, point) <= 0
    return orient(a, point, prev) > 0 or orient(a, nxt, point) > 0


def _sector_contains_sector(coords, ring, km, kp) -> bool:
    n = len(ring)
    m = coords[ring[km]]
    return (orient(coords[ring[km-1]], m, coords[ring[kp-1]]) > 0
            and orient(coords[ring[(kp+1) % n]], m, coords[ring[(km+1) % n]]) > 0)


def _find_bridge(coords, boundary, anchor) -> Optional[int]:
    """Position in boundary of the vertex the hole vertex ``anchor`` is bridged to."""
    hx, hy = coords[anchor]
    n = len(boundary)
    hit_x = np.inf
    best = None
    for k in range(n):
        p = coords[boundary[k]]; q = coords[boundary[(k+1) % n]]
        # only upward edges have the interior on the side the ray comes from
        if p[1] <= hy <= q[1] and p[1] != q[1]:
            x = p[0] + (hy - p[1]) * (q[0] - p[0]) / (q[1] - p[1])
            if hx <= x < hit_x:
                hit_x = x
                best = k if p[0] > q[0] else (k+1) % n
                if x == hx:
                    return best
    if best is None:
        return None

    mx, my = coords[boundary[best]]
    tri = ((hx, hy), (hit_x, hy), (mx, my))
    tan_min = np.inf
    start = best
    for step in range(n):
        k = (start + step) % n
        px, py = coords[boundary[k]]
        if not (hx < px <= mx) or not _in_closed_triangle((px, py), *tri):
            continue
        tan = abs(hy - py) / (px - hx)
        if not _locally_inside(coords, boundary, k, (hx, hy)):
            continue
        bx = coords[boundary[best]][0]
        if tan < tan_min or (tan == tan_min and (
                px < bx or (px == bx and _sector_contains_sector(coords, boundary, best, k)))):
            best = k
            tan_min = tan
    return best


def merge_holes(coords, boundary: List[int], holes: List[List[int]]) -> List[int]:
    """Splice hole index rings into the boundary ring with bridge edges.

    coords is the shared vertex list; boundary is counter-clockwise and every
    hole clockwise. Holes are processed by decreasing rightmost x, so a hole
    can bridge to the outer ring or to a hole merged before it. A hole with
    no bridge vertex is dropped with a warning.
    """
    order = sorted(holes, key=lambda h: max(coords[i][0] for i in h), reverse=True)
    for hole in order:
        # rightmost vertex, ties broken by lowest y
        anchor_pos = max(range(len(hole)), key=lambda p: (coords[hole[p]][0], -coords[hole[p]][1]))
        anchor = hole[anchor_pos]
        bridge_pos = _find_bridge(coords, boundary, anchor)
        if bridge_pos is None:
            logger.warning("No visible bridge for hole with %d vertices; hole ignored", len(hole))
            continue
        logger.debug("Bridging hole vertex %s to %s", coords[anchor], coords[boundary[bridge_pos]])
        rotated = hole[anchor_pos:] + hole[:anchor_pos]
        # duplicate anchor and bridge vertex as new indices so the ring stays index-unique
        coords.append(coords[anchor])
        anchor_dup = len(coords) - 1
        coords.append(coords[boundary[bridge_pos]])
        bridge_dup = len(coords) - 1
        boundary = (boundary[:bridge_pos+1] + rotated + [anchor_dup, bridge_dup]
                    + boundary[bridge_pos+1:])
    return boundary


def _drop_repeated(coords, verts):
    """Remove vertices that repeat the coordinates of their successor."""
    n = len(verts)
    return [v for k, v in enumerate(verts) if coords[v] != coords[verts[(k+1) % n]]]


def _is_ear(coords, verts, i, min_area, strict=True):
    """Ear test for position i of the ring.

    Vertices strictly inside the candidate triangle block it. A vertex on the
    triangle boundary blocks it only if its own interior wedge reaches into
    the triangle there, which lets repeated bridge vertices pass. With
    strict=False a vertex touching the closing diagonal blocks only when one
    of its edges enters the triangle.
    """
    m = len(verts)
    a = coords[verts[i-1]]; b = coords[verts[i]]; c = coords[verts[(i+1) % m]]
    if orient(a, b, c) <= min_area:
        return False
    corners = ((i-1) % m, i, (i+1) % m)
    for k in range(m):
        if k in corners:
            continue
        p = coords[verts[k]]
        d_ab = orient(a, b, p); d_bc = orient(b, c, p); d_ca = orient(c, a, p)
        if d_ab < 0 or d_bc < 0 or d_ca < 0:
            continue
        if d_ab > 0 and d_bc > 0 and d_ca > 0:
            return False
        on_diagonal = False
        if p == a:
            cone = (_sub(b, a), _sub(c, a))
        elif p == b:
            cone = (_sub(c, b), _sub(a, b))
        elif p == c:
            cone = (_sub(a, c), _sub(b, c))
        elif d_ab == 0:
            cone = (_sub(b, a), _sub(a, b))
        elif d_bc == 0:
            cone = (_sub(c, b), _sub(b, c))
        else:
            cone = (_sub(a, c), _sub(c, a))
            on_diagonal = True
        u = _sub(coords[verts[(k+1) % m]], p)
        v = _sub(coords[verts[k-1]], p)
        if on_diagonal and not strict:
            if _in_wedge(*cone, u) or _in_wedge(*cone, v):
                return False
        elif _wedges_overlap(u, v, *cone):
            return False
    return True


def _ear_clip(coords, verts, config: TriangulationConfig):
    """Clip ears off an index ring; returns (triangles as index triplets, leftover ring)."""
    verts = _drop_repeated(coords, list(verts))
    min_area = config.min_triangle_area
    tris_out = []
    max_iter = config.iteration_cap(len(verts))
    iter_count = 0
    while len(verts) > 3 and iter_count < max_iter:
        iter_count += 1
        m = len(verts)
        ear = next((i for i in range(m) if _is_ear(coords, verts, i, min_area)), None)
        if ear is None:
            # no ear: drop a zero-area vertex (colinear or spike) without emitting a triangle
            flat = next((i for i in range(m)
                         if abs(orient(coords[verts[i-1]], coords[verts[i]], coords[verts[(i+1) % m]])) <= min_area),
                        None)
            if flat is not None:
                logger.debug("Dropping degenerate vertex %s at %s", verts[flat], coords[verts[flat]])
                del verts[flat]
                verts = _drop_repeated(coords, verts)
                continue
            ear = next((i for i in range(m) if _is_ear(coords, verts, i, min_area, strict=False)), None)
            if ear is None:
                break
            logger.debug("Clipping ear at %s with a diagonal touching the boundary", coords[verts[ear]])
        tris_out.append((verts[ear-1], verts[ear], verts[(ear+1) % m]))
        del verts[ear]
        verts = _drop_repeated(coords, verts)
    if len(verts) == 3:
        a, b, c = verts
        area = triangle_area(coords[a], coords[b], coords[c])
        if area >= min_area:
            tris_out.append((a, b, c))
            verts = []
        elif abs(area) < min_area:
            verts = []
        # a clockwise remainder comes from an invalid ring and is left over
    elif len(verts) < 3:
        verts = []
    return tris_out, verts


def ear_clip_triangulation(points, config: Optional[TriangulationConfig] = None):
    """Ear-clip a single ring given as a sequence of 2D points.

    Returns a list of index triplets into ``points`` (counter-clockwise).
    Rings with fewer than 3 points give an empty list.
    """
    cfg = config or TriangulationConfig()
    coords = [(float(p[0]), float(p[1])) for p in points]
    if len(coords) < 3:
        return []
    verts = list(range(len(coords)))
    if ring_signed_area(coords) < 0:
        verts = verts[::-1]
    tris, _ = _ear_clip(coords, verts, cfg)
    return tris


def triangulate(polygon: Polygon2D, config: Optional[TriangulationConfig] = None) -> List[Polygon2D]:
    """Decompose a simple polygon (with optional holes) into triangles.

    The polygon is normalized with ``correct()`` first. Fewer than 3 outer
    vertices yields an empty list. Inner rings with fewer than 3 vertices or
    zero area are skipped. If ear clipping stalls (invalid or numerically
    degenerate input) the triangles found so far are returned and a warning
    is logged.
    """
    cfg = config or TriangulationConfig()
    poly = polygon.correct()
    if len(poly.outer) < 3:
        return []
    coords = [(p.x, p.y) for p in poly.outer]
    boundary = list(range(len(coords)))
    holes = []
    for hole in poly.inners:
        if len(hole) < 3 or abs(ring_signed_area(hole)) <= cfg.min_triangle_area:
            logger.debug("Skipping degenerate inner ring with %d vertices", len(hole))
            continue
        start = len(coords)
        coords.extend((p.x, p.y) for p in hole)
        holes.append(list(range(start, len(coords))))
    if holes:
        boundary = merge_holes(coords, boundary, holes)
    tris, leftover = _ear_clip(coords, boundary, cfg)
    if leftover:
        logger.warning("Ear clipping stalled with %d vertices left; returning partial triangulation "
                       "(%d triangles, area %.6g of %.6g)", len(leftover), len(tris),
                       sum(abs(triangle_area(coords[a], coords[b], coords[c])) for a, b, c in tris),
                       polygon_area(poly))
    return [Polygon2D.from_points([coords[a], coords[b], coords[c]]).correct() for a, b, c in tris]

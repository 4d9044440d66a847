"""Polygon intersection through triangle decomposition.

Concave polygons (and polygons with holes) are triangulated and every triangle
pair is handed to a convex predicate such as gjk.intersects_convex or
sat.intersects. The predicate is a plain callable so callers can plug in their
own test.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

from .config import GeometryConfig, IntersectionConfig
from .geometry import bbox_overlap
from .gjk import intersects_convex
from .logging_utils import get_logger
from .polygon import Polygon2D, polygon_bounds, polygon_vertices
from . import sat
from .triangulation import triangulate

logger = get_logger('polygeom.intersection')

ConvexTest = Callable[[Polygon2D, Polygon2D], bool]

CONVEX_TESTS: Dict[str, Callable[..., bool]] = {
    'gjk': intersects_convex,
    'sat': sat.intersects,
}

__all__ = ['test_intersection', 'intersects', 'CONVEX_TESTS', 'ConvexTest']


def test_intersection(triangles_a: Sequence[Polygon2D], triangles_b: Sequence[Polygon2D],
                      test: ConvexTest, margin: float = 0.0) -> bool:
    """Return True if any triangle of the first set intersects any of the second.

    Bounding boxes, widened by ``margin`` on every side, are compared first;
    pairs whose boxes are disjoint are not passed to ``test``. Empty sets
    never intersect.
    """
    if not triangles_a or not triangles_b:
        return False
    bounds_b = [_widened(polygon_bounds(tb), margin) for tb in triangles_b]
    for ta in triangles_a:
        box_a = _widened(polygon_bounds(ta), margin)
        for tb, box_b in zip(triangles_b, bounds_b):
            if not bbox_overlap(*box_a, *box_b):
                continue
            if test(ta, tb):
                return True
    return False


def _widened(box, margin):
    minx, maxx, miny, maxy = box
    return (minx - margin, maxx + margin, miny - margin, maxy + margin)


# keep pytest from collecting the orchestrator as a test function
test_intersection.__test__ = False


def intersects(polygon_a: Polygon2D, polygon_b: Polygon2D, method: str = 'gjk',
               touching: Optional[bool] = None,
               config: Optional[GeometryConfig] = None) -> bool:
    """Return True if two simple polygons (holes allowed) intersect.

    Both polygons are triangulated and compared with the convex test named by
    ``method`` ('gjk' or 'sat'). ``touching`` overrides
    ``config.intersection.touching``.
    """
    try:
        convex_test = CONVEX_TESTS[method]
    except KeyError:
        raise ValueError(f"Unknown intersection method {method!r}; expected one of {sorted(CONVEX_TESTS)}") from None
    cfg = config or GeometryConfig()
    icfg: IntersectionConfig = cfg.intersection
    if touching is None:
        touching = icfg.touching
    tris_a = triangulate(polygon_a, cfg.triangulation)
    tris_b = triangulate(polygon_b, cfg.triangulation)
    # touching pairs may sit up to the contact tolerance apart
    margin = icfg.tolerance(polygon_vertices(polygon_a), polygon_vertices(polygon_b)) if touching else 0.0
    logger.debug("intersects(%s): %d x %d triangles", method, len(tris_a), len(tris_b))
    return test_intersection(tris_a, tris_b,
                             lambda ta, tb: convex_test(ta, tb, touching=touching, config=icfg),
                             margin=margin)

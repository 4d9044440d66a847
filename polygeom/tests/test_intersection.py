import numpy as np
import pytest

from polygeom.core import sat
from polygeom.core.config import GeometryConfig
from polygeom.core.gjk import intersects_convex
from polygeom.core.intersection import CONVEX_TESTS, intersects, test_intersection
from polygeom.core.polygon import Polygon2D
from polygeom.core.triangulation import triangulate


M_SHAPE = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (2.0, 2.0), (0.0, 4.0)]
BIG_HOLE = [(1.0, 1.0), (3.0, 1.0), (3.0, 3.0), (1.0, 3.0)]


@pytest.mark.parametrize("test", [intersects_convex, sat.intersects], ids=['gjk', 'sat'])
class TestTriangulatedIntersection:

    def test_polygon_inside_hole_does_not_intersect(self, test):
        outer = triangulate(Polygon2D.from_points(M_SHAPE, [BIG_HOLE]))
        inner = triangulate(Polygon2D.from_points([(1.5, 1.5), (2.5, 1.5), (2.5, 2.5), (1.5, 2.5)]))
        assert not test_intersection(outer, inner, test)

    def test_polygon_overlapping_hole_rim_intersects(self, test):
        outer = triangulate(Polygon2D.from_points(M_SHAPE, [BIG_HOLE]))
        other = triangulate(Polygon2D.from_points([(0.5, 0.5), (2.5, 0.5), (2.5, 2.0), (0.5, 2.0)]))
        assert test_intersection(outer, other, test)

    def test_concave_polygons_in_notch(self, test):
        m = triangulate(Polygon2D.from_points(M_SHAPE))
        in_notch = triangulate(Polygon2D.from_points([(1.8, 3.0), (2.2, 3.0), (2.0, 3.5)]))
        crossing = triangulate(Polygon2D.from_points([(1.8, 1.5), (2.2, 1.5), (2.0, 3.5)]))
        assert not test_intersection(m, in_notch, test)
        assert test_intersection(m, crossing, test)


def test_empty_triangle_sets():
    tri = triangulate(Polygon2D.from_points([(0, 0), (1, 0), (0, 1)]))
    assert not test_intersection([], tri, intersects_convex)
    assert not test_intersection(tri, [], intersects_convex)


def test_bbox_prefilter_skips_predicate():
    calls = []

    def recording(a, b):
        calls.append((a, b))
        return True

    left = triangulate(Polygon2D.from_points([(0, 0), (1, 0), (1, 1), (0, 1)]))
    right = triangulate(Polygon2D.from_points([(5, 5), (6, 5), (6, 6), (5, 6)]))
    assert not test_intersection(left, right, recording)
    assert calls == []
    assert test_intersection(left, left, recording)
    assert len(calls) == 1


def test_any_pair_short_circuits():
    calls = []

    def first_true(a, b):
        calls.append(1)
        return True

    square = triangulate(Polygon2D.from_points([(0, 0), (2, 0), (2, 2), (0, 2)]))
    assert test_intersection(square, square, first_true)
    assert len(calls) == 1


def test_registry():
    assert CONVEX_TESTS['gjk'] is intersects_convex
    assert CONVEX_TESTS['sat'] is sat.intersects


@pytest.mark.parametrize("method", ['gjk', 'sat'])
def test_polygon_level_intersects(method):
    m = Polygon2D.from_points(M_SHAPE)
    holed = Polygon2D.from_points(M_SHAPE, [BIG_HOLE])
    in_hole = Polygon2D.from_points([(1.5, 1.5), (2.5, 1.5), (2.5, 2.5), (1.5, 2.5)])
    touching = Polygon2D.from_points([(4.0, 0.0), (5.0, 0.0), (5.0, 1.0)])
    assert intersects(m, in_hole, method=method)
    assert not intersects(holed, in_hole, method=method)
    assert not intersects(m, touching, method=method)
    assert intersects(m, touching, method=method, touching=True)
    cfg = GeometryConfig.from_dict({'intersection': {'touching': True}})
    assert intersects(m, touching, method=method, config=cfg)


def test_unknown_method_raises():
    square = Polygon2D.from_points([(0, 0), (1, 0), (1, 1), (0, 1)])
    with pytest.raises(ValueError):
        intersects(square, square, method='boost')


def test_random_concave_self_pairs_intersect():
    from polygeom.core.random_polygon import random_concave_polygon
    rng = np.random.default_rng(5)
    for n in range(4, 10):
        poly = random_concave_polygon(n, 1000.0, rng=rng)
        if poly is None:
            continue
        tris = triangulate(poly)
        assert test_intersection(tris, tris, intersects_convex)
        assert test_intersection(tris, tris, sat.intersects)


@pytest.mark.parametrize("method", ['gjk', 'sat'])
def test_touching_across_gap_below_tolerance(method):
    left = Polygon2D.from_points([(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)])
    right = Polygon2D.from_points([(1.000000000000005, 0.0), (2.0, 0.0), (2.0, 1.0)])
    assert intersects(left, right, method=method, touching=True)
    assert not intersects(left, right, method=method)


def test_bbox_margin_widens_prefilter():
    calls = []

    def recording(a, b):
        calls.append((a, b))
        return True

    left = triangulate(Polygon2D.from_points([(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]))
    right = triangulate(Polygon2D.from_points([(1.000000000000005, 0.0), (2.0, 0.0), (2.0, 1.0)]))
    assert not test_intersection(left, right, recording)
    assert calls == []
    assert test_intersection(left, right, recording, margin=1e-14)
    assert len(calls) == 1

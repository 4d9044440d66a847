"""Unit tests for geometry primitives."""
import math

import numpy as np
import pytest

from polygeom.core.geometry import (
    Point2D,
    Point3D,
    bbox_overlap,
    calc_curvature,
    calc_distance2d,
    calc_distance3d,
    calc_squared_distance2d,
    cross,
    dot,
    norm,
    normalize,
    orient,
    point_in_polygon,
    point_in_triangle,
    point_segment_distance,
    seg_intersect,
    segment_intersection,
    triangle_area,
)


class TestVectorAlgebra:

    def test_dot_and_norm(self):
        assert dot((1.0, 2.0), (3.0, 4.0)) == 11.0
        assert norm((3.0, 4.0)) == 5.0
        assert norm(Point3D(1.0, 2.0, 2.0)) == 3.0

    def test_cross_2d_is_scalar(self):
        assert cross((1.0, 0.0), (0.0, 1.0)) == 1.0
        assert cross((0.0, 1.0), (1.0, 0.0)) == -1.0

    def test_cross_3d_is_point(self):
        c = cross(Point3D(1.0, 0.0, 0.0), Point3D(0.0, 1.0, 0.0))
        assert isinstance(c, Point3D)
        assert c == Point3D(0.0, 0.0, 1.0)

    def test_normalize(self):
        n = normalize((3.0, 4.0))
        assert abs(n.x - 0.6) < 1e-12 and abs(n.y - 0.8) < 1e-12

    def test_normalize_zero_vector_raises(self):
        with pytest.raises(ValueError):
            normalize((0.0, 0.0))

    def test_orient_sign(self):
        assert orient((0, 0), (1, 0), (0, 1)) > 0
        assert orient((0, 0), (0, 1), (1, 0)) < 0
        assert orient((0, 0), (1, 1), (2, 2)) == 0

    def test_points_convert_to_arrays(self):
        arr = np.asarray([Point2D(1.0, 2.0), Point2D(3.0, 4.0)])
        assert arr.shape == (2, 2)


class TestDistances:

    def test_distance2d_ignores_z(self):
        p1 = Point3D(0.0, 0.0, 0.0); p2 = Point3D(3.0, 4.0, 12.0)
        assert calc_distance2d(p1, p2) == 5.0
        assert calc_squared_distance2d(p1, p2) == 25.0

    def test_distance3d(self):
        assert calc_distance3d(Point3D(0.0, 0.0, 0.0), Point3D(3.0, 4.0, 12.0)) == 13.0

    def test_point_segment_distance(self):
        assert point_segment_distance((0.5, 1.0), (0.0, 0.0), (1.0, 0.0)) == 1.0
        assert point_segment_distance((2.0, 0.0), (0.0, 0.0), (1.0, 0.0)) == 1.0
        assert point_segment_distance((3.0, 4.0), (0.0, 0.0), (0.0, 0.0)) == 5.0


class TestSegmentIntersection:

    def test_normally_crossing(self):
        p = segment_intersection((0, -1, 0), (0, 1, 0), (-1, 0, 0), (1, 0, 0))
        assert p is not None
        assert abs(p.x) < 1e-12 and abs(p.y) < 1e-12 and abs(p.z) < 1e-12

    def test_no_crossing(self):
        assert segment_intersection((0, -1), (0, 1), (1, 0), (3, 0)) is None

    def test_point_segment_on_other_segment(self):
        assert segment_intersection((0, -1), (0, 1), (0, 0), (0, 0)) is None

    def test_point_segment_off_other_segment(self):
        assert segment_intersection((0, -1), (0, 1), (1, 0), (1, 0)) is None

    def test_both_points_same_position(self):
        assert segment_intersection((0, 0), (0, 0), (0, 0), (0, 0)) is None

    def test_both_points_different_position(self):
        assert segment_intersection((0, 1), (0, 1), (1, 0), (1, 0)) is None

    def test_identical_segments(self):
        assert segment_intersection((0, -1), (0, 1), (0, -1), (0, 1)) is None

    def test_endpoint_on_other_segment(self):
        p = segment_intersection((0, -1, 0), (0, 1, 0), (0, 0, 0), (1, 0, 0))
        assert p is not None
        assert abs(p.x) < 1e-12 and abs(p.y) < 1e-12

    def test_shared_endpoint(self):
        p = segment_intersection((0, -1, 0), (0, 1, 0), (0, -1, 0), (2, -1, 0))
        assert p is not None
        assert abs(p.x) < 1e-12 and abs(p.y + 1.0) < 1e-12 and abs(p.z) < 1e-12

    def test_z_interpolated_along_first_segment(self):
        p = segment_intersection((0, -1, 0), (0, 1, 2), (-1, 0, 5), (1, 0, 5))
        assert abs(p.z - 1.0) < 1e-12

    def test_seg_intersect_is_strict(self):
        assert seg_intersect((0, -1), (0, 1), (-1, 0), (1, 0))
        # touching at an endpoint or sharing an endpoint is not a proper crossing
        assert not seg_intersect((0, -1), (0, 1), (0, 0), (1, 0))
        assert not seg_intersect((0, -1), (0, 1), (0, -1), (2, -1))
        assert not seg_intersect((0, 0), (2, 0), (1, 0), (3, 0))


class TestCurvature:

    def test_straight_line(self):
        assert calc_curvature((0, 0, 0), (1, 0, 0), (2, 0, 0)) == 0.0

    @pytest.mark.parametrize("p2, p3, expected", [
        ((1.0, 1.0), (2.0, 0.0), -1.0),
        ((5.0, 5.0), (10.0, 0.0), -0.2),
        ((-1.0, 1.0), (-2.0, 0.0), 1.0),
        ((-5.0, 5.0), (-10.0, 0.0), 0.2),
    ])
    def test_circle_through_points(self, p2, p3, expected):
        assert calc_curvature((0.0, 0.0), p2, p3) == pytest.approx(expected, rel=1e-12)

    def test_coincident_points_raise(self):
        p1 = (0.0, 0.0, 0.0); p2 = (1.0, 0.0, 0.0)
        for args in ((p1, p1, p1), (p1, p1, p2), (p1, p2, p1), (p1, p2, p2)):
            with pytest.raises(ValueError):
                calc_curvature(*args)


class TestContainment:

    def test_triangle_area_signed(self):
        assert triangle_area((0, 0), (1, 0), (0, 1)) == 0.5
        assert triangle_area((0, 0), (0, 1), (1, 0)) == -0.5

    def test_point_in_triangle_inclusive(self):
        a, b, c = (0, 0), (2, 0), (0, 2)
        assert point_in_triangle((0.5, 0.5), a, b, c)
        assert point_in_triangle((1.0, 0.0), a, b, c)
        assert not point_in_triangle((2.0, 2.0), a, b, c)

    def test_point_in_polygon_concave(self):
        m_shape = [(0, 0), (4, 0), (4, 4), (2, 2), (0, 4)]
        assert point_in_polygon(1.0, 1.0, m_shape)
        assert not point_in_polygon(2.0, 3.0, m_shape)

    def test_bbox_overlap_scalar_and_vector(self):
        assert bool(bbox_overlap(0, 1, 0, 1, 1, 2, 1, 2))
        assert not bool(bbox_overlap(0, 1, 0, 1, 1.5, 2, 0, 1))
        res = bbox_overlap(np.array([0.0, 0.0]), np.array([1.0, 1.0]), 0.0, 1.0, np.array([0.5, 3.0]),
                           np.array([2.0, 4.0]), 0.0, 1.0)
        assert res.tolist() == [True, False]
        assert math.isclose(calc_distance2d((0, 0), (1, 1)), math.sqrt(2.0))

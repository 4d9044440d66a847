import numpy as np

from polygeom.core import sat
from polygeom.core.gjk import intersects_convex
from polygeom.core.polygon import Polygon2D
from polygeom.core.random_polygon import random_convex_polygon
from polygeom.core.validation import (
    ValidationReport,
    cross_validate,
    cross_validate_triangulated,
    format_report,
)


SQUARE = Polygon2D.from_points([(0, 0), (2, 0), (2, 2), (0, 2)])
SHIFTED = Polygon2D.from_points([(1, 1), (3, 1), (3, 3), (1, 3)])
FAR = Polygon2D.from_points([(10, 10), (11, 10), (11, 11), (10, 11)])


def _reference(a, b):
    # exact answer for the fixed squares above: only FAR is disjoint from the others
    return (a is FAR) == (b is FAR)


def test_cross_validate_counts_pairs_and_mismatches():
    polygons = [SQUARE, SHIFTED, FAR]
    report = cross_validate(polygons, {'gjk': intersects_convex, 'never': lambda a, b: False}, _reference)
    assert report.pair_count == 9
    assert report.reference_positive == 5
    assert report.mismatches['gjk'] == []
    assert len(report.mismatches['never']) == 5
    assert report.agreement('gjk') == 1.0
    assert abs(report.agreement('never') - 4.0 / 9.0) < 1e-12
    timing = report.timings['gjk']
    assert timing.count_positive == 5 and timing.count_negative == 4
    assert timing.time_positive >= 0.0 and timing.time_negative >= 0.0


def test_cross_validate_triangulated_uses_triangle_lists():
    concave = Polygon2D.from_points([(0, 0), (4, 0), (4, 4), (2, 2), (0, 4)])
    in_notch = Polygon2D.from_points([(1.8, 3.0), (2.2, 3.0), (2.0, 3.5)])
    seen = []

    def reference(a, b):
        seen.append((type(a), type(b)))
        return (a is in_notch) == (b is in_notch)

    report = cross_validate_triangulated([concave, in_notch], {'sat': sat.intersects}, reference)
    assert report.pair_count == 4
    assert report.mismatches['sat'] == []
    assert report.triangulation_time >= 0.0
    assert all(kinds == (Polygon2D, Polygon2D) for kinds in seen)


def test_random_convex_gjk_and_sat_agree():
    rng = np.random.default_rng(11)
    polygons = [random_convex_polygon(int(rng.integers(3, 10)), 1000.0, rng=rng) for _ in range(15)]
    report = cross_validate(polygons, {'sat': sat.intersects}, intersects_convex)
    assert report.pair_count == 225
    assert report.agreement('sat') == 1.0
    # every polygon intersects itself
    assert report.reference_positive >= 15


def test_report_formatting():
    report = cross_validate([SQUARE, FAR], {'gjk': intersects_convex}, _reference)
    data = report.to_dict()
    assert data['pair_count'] == 4
    assert data['reference_negative'] == 2
    assert data['predicates']['gjk']['mismatches'] == 0
    text = format_report(report)
    assert 'gjk' in text and 'reference' in text
    assert ValidationReport().agreement('missing') == 1.0

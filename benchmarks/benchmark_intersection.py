"""Benchmark GJK and SAT intersection tests against shapely.

Random convex polygons are compared pairwise (self-pairs included) with both
convex tests and with shapely's interior-overlap predicate; random concave
polygons are compared through triangulation. Timings are reported separately
for pairs the predicate found intersecting and disjoint.

Example:
    python benchmarks/benchmark_intersection.py --polygons 100 --max-vertices 10
"""

import argparse
import json
from pathlib import Path

import numpy as np
from shapely.geometry import Polygon

from polygeom import (
    configure_logging,
    cross_validate,
    cross_validate_triangulated,
    intersects_convex,
    random_concave_polygon,
    random_convex_polygon,
    sat,
)
from polygeom.core.logging_utils import get_logger
from polygeom.core.validation import format_report

logger = get_logger('polygeom.benchmark')


def shapely_reference(polygons):
    shapes = {id(p): Polygon(p.outer, [h for h in p.inners if len(h) >= 3]) for p in polygons}

    def reference(a, b):
        sa = shapes[id(a)]; sb = shapes[id(b)]
        return sa.intersects(sb) and not sa.touches(sb)
    return reference


def make_polygons(generator, count, min_vertices, max_vertices, max_coordinate, rng):
    polygons = []
    skipped = 0
    while len(polygons) < count:
        poly = generator(int(rng.integers(min_vertices, max_vertices)), max_coordinate, rng=rng)
        if poly is None:
            skipped += 1
            continue
        polygons.append(poly)
    if skipped:
        logger.info("Skipped %d failed concave constructions", skipped)
    return polygons


def dump_mismatches(label, polygons, report, plot_dir, limit=5):
    for name, pairs in report.mismatches.items():
        for i, j in pairs[:limit]:
            logger.warning("%s/%s mismatch on pair (%d, %d):\n  %s\n  %s", label, name, i, j,
                           polygons[i].to_wkt(), polygons[j].to_wkt())
            if plot_dir is not None:
                from polygeom.core.visualization import plot_polygon_pair
                out = Path(plot_dir) / f"{label}_{name}_{i}_{j}.png"
                plot_polygon_pair(polygons[i], polygons[j], str(out), title=f"{label} {name} ({i}, {j})")


def run(label, polygons, validate, plot_dir):
    predicates = {'gjk': intersects_convex, 'sat': sat.intersects}
    report = validate(polygons, predicates, shapely_reference(polygons))
    print(f"\n{'=' * 60}\n{label.upper()} POLYGONS\n{'=' * 60}")
    print(format_report(report))
    dump_mismatches(label, polygons, report, plot_dir)
    return report.to_dict()


def main():
    parser = argparse.ArgumentParser(description='Benchmark GJK / SAT polygon intersection against shapely')
    parser.add_argument('--polygons', type=int, default=100,
                        help='Number of random polygons per family (default: 100)')
    parser.add_argument('--max-vertices', type=int, default=10,
                        help='Exclusive upper bound on vertex count (default: 10)')
    parser.add_argument('--max-coordinate', type=float, default=1000.0,
                        help='Coordinates are drawn from [0, max-coordinate] (default: 1000)')
    parser.add_argument('--seed', type=int, default=0,
                        help='Seed of the numpy random generator (default: 0)')
    parser.add_argument('--skip-concave', action='store_true',
                        help='Only benchmark convex polygons')
    parser.add_argument('--plot-dir', type=str, default=None,
                        help='Write PNGs of mismatching pairs into this directory')
    parser.add_argument('--output', type=str, default=None,
                        help='Output JSON file for results')
    parser.add_argument('--log-level', type=str, default='INFO',
                        help='Logging level for the polygeom logger (default: INFO)')
    args = parser.parse_args()

    configure_logging(args.log_level)
    if args.plot_dir:
        Path(args.plot_dir).mkdir(parents=True, exist_ok=True)
    rng = np.random.default_rng(args.seed)

    results = {}
    convex = make_polygons(random_convex_polygon, args.polygons, 3, args.max_vertices,
                           args.max_coordinate, rng)
    results['convex'] = run('convex', convex, cross_validate, args.plot_dir)
    if not args.skip_concave:
        concave = make_polygons(random_concave_polygon, args.polygons, 4, args.max_vertices,
                                args.max_coordinate, rng)
        results['concave'] = run('concave', concave, cross_validate_triangulated, args.plot_dir)

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(results, f, indent=2)
        logger.info("Results saved to %s", args.output)


if __name__ == '__main__':
    main()

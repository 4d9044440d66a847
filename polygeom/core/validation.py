"""Cross-validation of intersection predicates against a reference predicate.

Every ordered pair of a polygon list (self-pairs included) is evaluated with
the reference and with each candidate predicate. The report records where a
candidate disagrees and how long it took, split by the answer it gave, so
positive and negative queries can be compared separately.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

from .intersection import test_intersection
from .logging_utils import get_logger
from .polygon import Polygon2D
from .triangulation import triangulate

logger = get_logger('polygeom.validation')

__all__ = ['ValidationReport', 'cross_validate', 'cross_validate_triangulated', 'format_report']

Predicate = Callable[[Any, Any], bool]


@dataclass
class PredicateTiming:
    time_positive: float = 0.0
    time_negative: float = 0.0
    count_positive: int = 0
    count_negative: int = 0

    def add(self, result: bool, elapsed: float) -> None:
        if result:
            self.time_positive += elapsed
            self.count_positive += 1
        else:
            self.time_negative += elapsed
            self.count_negative += 1


@dataclass
class ValidationReport:
    pair_count: int = 0
    reference_positive: int = 0
    mismatches: Dict[str, List[Tuple[int, int]]] = field(default_factory=dict)
    timings: Dict[str, PredicateTiming] = field(default_factory=dict)
    reference_timing: PredicateTiming = field(default_factory=PredicateTiming)
    triangulation_time: float = 0.0

    def agreement(self, name: str) -> float:
        """Fraction of pairs on which the named predicate matched the reference."""
        if not self.pair_count:
            return 1.0
        return 1.0 - len(self.mismatches.get(name, [])) / self.pair_count

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            'pair_count': self.pair_count,
            'reference_positive': self.reference_positive,
            'reference_negative': self.pair_count - self.reference_positive,
            'triangulation_time': self.triangulation_time,
            'reference_time_positive': self.reference_timing.time_positive,
            'reference_time_negative': self.reference_timing.time_negative,
            'predicates': {},
        }
        for name, timing in self.timings.items():
            out['predicates'][name] = {
                'mismatches': len(self.mismatches.get(name, [])),
                'agreement': self.agreement(name),
                'time_positive': timing.time_positive,
                'time_negative': timing.time_negative,
                'count_positive': timing.count_positive,
                'count_negative': timing.count_negative,
            }
        return out


def _timed(predicate, a, b):
    t0 = time.perf_counter()
    result = bool(predicate(a, b))
    return result, time.perf_counter() - t0


def _run_pairs(items: Sequence, predicates: Mapping[str, Predicate], reference: Predicate,
               reference_items: Sequence) -> ValidationReport:
    report = ValidationReport()
    report.mismatches = {name: [] for name in predicates}
    report.timings = {name: PredicateTiming() for name in predicates}
    n = len(items)
    for i in range(n):
        for j in range(n):
            expected, elapsed = _timed(reference, reference_items[i], reference_items[j])
            report.reference_timing.add(expected, elapsed)
            report.pair_count += 1
            if expected:
                report.reference_positive += 1
            for name, predicate in predicates.items():
                got, elapsed = _timed(predicate, items[i], items[j])
                report.timings[name].add(got, elapsed)
                if got != expected:
                    report.mismatches[name].append((i, j))
                    logger.debug("%s disagrees with reference on pair (%d, %d): got %s", name, i, j, got)
    for name, bad in report.mismatches.items():
        if bad:
            logger.info("%s: %d/%d mismatches", name, len(bad), report.pair_count)
    return report


def cross_validate(polygons: Sequence[Polygon2D], predicates: Mapping[str, Predicate],
                   reference: Predicate) -> ValidationReport:
    """Compare convex predicates with a reference on every ordered polygon pair."""
    return _run_pairs(polygons, predicates, reference, polygons)


def cross_validate_triangulated(polygons: Sequence[Polygon2D], predicates: Mapping[str, Predicate],
                                reference: Predicate) -> ValidationReport:
    """Compare convex predicates, applied through triangulation, with a reference.

    Each polygon is triangulated once (timed in ``triangulation_time``) and the
    candidates see the triangle lists via test_intersection. The reference is
    called with the original polygons.
    """
    t0 = time.perf_counter()
    triangulations = [triangulate(p) for p in polygons]
    triangulation_time = time.perf_counter() - t0
    wrapped = {
        name: (lambda ta, tb, _p=predicate: test_intersection(ta, tb, _p))
        for name, predicate in predicates.items()
    }
    report = _run_pairs(triangulations, wrapped, reference, polygons)
    report.triangulation_time = triangulation_time
    return report


def format_report(report: ValidationReport) -> str:
    """Human readable multi-line summary of a ValidationReport."""
    lines = [
        f"pairs: {report.pair_count}  reference positive: {report.reference_positive}  "
        f"negative: {report.pair_count - report.reference_positive}",
    ]
    if report.triangulation_time:
        lines.append(f"triangulation: {report.triangulation_time * 1000.0:.3f} ms")
    header = ["predicate", "mismatch", "agree%", "pos_ms", "neg_ms"]
    rows = [["reference", "-", "-",
             f"{report.reference_timing.time_positive * 1000.0:.3f}",
             f"{report.reference_timing.time_negative * 1000.0:.3f}"]]
    for name in sorted(report.timings):
        t = report.timings[name]
        rows.append([name, str(len(report.mismatches.get(name, []))),
                     f"{report.agreement(name) * 100.0:.3f}",
                     f"{t.time_positive * 1000.0:.3f}", f"{t.time_negative * 1000.0:.3f}"])
    col_w = [max(len(header[i]), *(len(r[i]) for r in rows)) for i in range(len(header))]

    def fmt(r):
        return " ".join(r[i].rjust(col_w[i]) for i in range(len(r)))
    lines += [fmt(header), "-" * (sum(col_w) + len(col_w) - 1)] + [fmt(r) for r in rows]
    return "\n".join(lines)

"""Configuration objects for polygeom intersection, triangulation and generators."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

import numpy as np

from .constants import (
    EPS_AREA,
    EPS_CONTACT,
    EPS_CONTACT_RELATIVE,
    GJK_MAX_ITERATIONS,
    EARCLIP_MIN_ITERATIONS,
    EARCLIP_ITERATIONS_FACTOR,
    RANDOM_POLYGON_MAX_ATTEMPTS,
)


@dataclass
class IntersectionConfig:
    """Tolerances shared by the GJK and SAT convex tests.

    - eps: absolute contact tolerance separating touching from overlapping.
    - relative_eps: contact tolerance per unit of coordinate magnitude; the
      larger of the two applies, so rounding at large coordinates stays below it.
    - touching: if True, polygons whose boundaries touch count as intersecting.
    - gjk_max_iterations: GJK iteration cap; reaching it reports no intersection.
    """
    eps: float = EPS_CONTACT
    relative_eps: float = EPS_CONTACT_RELATIVE
    touching: bool = False
    gjk_max_iterations: int = GJK_MAX_ITERATIONS

    def tolerance(self, *vertex_arrays) -> float:
        """Contact tolerance for polygons with the given vertex arrays."""
        scale = max((float(np.abs(v).max()) for v in vertex_arrays if np.size(v)), default=0.0)
        return max(self.eps, self.relative_eps * scale)


@dataclass
class TriangulationConfig:
    min_triangle_area: float = EPS_AREA
    max_iterations_factor: int = EARCLIP_ITERATIONS_FACTOR
    min_iterations: int = EARCLIP_MIN_ITERATIONS

    def iteration_cap(self, vertex_count: int) -> int:
        return max(self.min_iterations, vertex_count * self.max_iterations_factor)


@dataclass
class RandomPolygonConfig:
    """Parameters of the random polygon generators.

    - max_attempts: candidates tried before giving up (concave generator
      returns None, convex generator raises RuntimeError).
    - dent_min, dent_max: fraction of the vertex-to-centroid distance a dented
      vertex is moved by.
    - max_dents: upper bound on dented vertices; None means half the vertices.
    """
    max_attempts: int = RANDOM_POLYGON_MAX_ATTEMPTS
    dent_min: float = 0.5
    dent_max: float = 0.95
    max_dents: Optional[int] = None


@dataclass
class GeometryConfig:
    """Unified configuration.

    Attributes
    ----------
    intersection : IntersectionConfig
    triangulation : TriangulationConfig
    random_polygon : RandomPolygonConfig
    """
    intersection: IntersectionConfig = field(default_factory=IntersectionConfig)
    triangulation: TriangulationConfig = field(default_factory=TriangulationConfig)
    random_polygon: RandomPolygonConfig = field(default_factory=RandomPolygonConfig)

    @classmethod
    def from_dict(cls, values: Dict[str, Dict[str, Any]]) -> 'GeometryConfig':
        """Build from a nested mapping such as ``{'intersection': {'touching': True}}``.

        Unknown sections or keys raise ValueError.
        """
        cfg = cls()
        for section, overrides in (values or {}).items():
            target = getattr(cfg, section, None)
            if target is None:
                raise ValueError(f"Unknown configuration section: {section!r}")
            known = {f.name for f in fields(target)}
            for key, value in (overrides or {}).items():
                if key not in known:
                    raise ValueError(f"Unknown key {key!r} in section {section!r}")
                setattr(target, key, value)
        return cfg


__all__ = [
    'IntersectionConfig', 'TriangulationConfig', 'RandomPolygonConfig', 'GeometryConfig',
]

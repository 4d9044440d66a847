"""Central numerical tolerances and iteration caps.

This module centralizes tiny numeric thresholds used across the codebase so
they can be tuned consistently and referenced without scattering literals.
"""
from __future__ import annotations

# Geometry tolerances
EPS_AREA: float = 1e-12           # minimum positive (absolute) triangle/polygon area
EPS_CONTACT: float = 1e-14        # contact tolerance for GJK/SAT (touching vs overlapping)
EPS_CONTACT_RELATIVE: float = 1e-14  # contact tolerance per unit of the largest coordinate magnitude
EPS_CURVATURE: float = 1e-12      # minimum curvature denominator (product of side lengths)
EPS_COLINEAR: float = 1e-15       # near-colinearity threshold for polygon/tri tests
EPS_LENGTH: float = 1e-15         # minimum edge length considered a real edge

# Iteration caps
GJK_MAX_ITERATIONS: int = 64
EARCLIP_MIN_ITERATIONS: int = 1000
EARCLIP_ITERATIONS_FACTOR: int = 10
RANDOM_POLYGON_MAX_ATTEMPTS: int = 100

__all__ = [
    'EPS_AREA',
    'EPS_CONTACT',
    'EPS_CONTACT_RELATIVE',
    'EPS_CURVATURE',
    'EPS_COLINEAR',
    'EPS_LENGTH',
    'GJK_MAX_ITERATIONS',
    'EARCLIP_MIN_ITERATIONS',
    'EARCLIP_ITERATIONS_FACTOR',
    'RANDOM_POLYGON_MAX_ATTEMPTS',
]

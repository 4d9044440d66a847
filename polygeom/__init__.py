"""Public package API for polygeom.

This facade provides a flat import surface on top of the internal
implementation package ``polygeom.core``. The matplotlib-backed
visualization module is loaded on first use to keep ``import polygeom``
light.

Example
-------
    from polygeom import Polygon2D, triangulate, intersects_convex, sat

    square = Polygon2D.from_points([(0, 0), (2, 0), (2, 2), (0, 2)])
    tri = Polygon2D.from_points([(1, 1), (3, 1), (3, 3)])
    intersects_convex(square, tri), sat.intersects(square, tri)
"""
from importlib import import_module as _imp
import logging as _logging

try:
    from importlib.metadata import version as _pkg_version
    __version__ = _pkg_version("polygeom")  # populated when installed
except Exception:  # pragma: no cover - editable / unknown state
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

_geom = _imp('polygeom.core.geometry')
_const = _imp('polygeom.core.constants')
_config = _imp('polygeom.core.config')
_poly = _imp('polygeom.core.polygon')
_rand = _imp('polygeom.core.random_polygon')
_tri = _imp('polygeom.core.triangulation')
_gjk = _imp('polygeom.core.gjk')
_sat = _imp('polygeom.core.sat')
_inter = _imp('polygeom.core.intersection')
_valid = _imp('polygeom.core.validation')
_log = _imp('polygeom.core.logging_utils')


def _lazy_module(mod_name):
    class _ModuleProxy:
        __slots__ = ('_m',)
        def _load(self):
            try:
                return self._m
            except AttributeError:
                self._m = _imp(mod_name)
                return self._m
        def __getattr__(self, item):
            if item == '_m':
                raise AttributeError(item)
            return getattr(self._load(), item)
        def __dir__(self):
            return dir(self._load())
    return _ModuleProxy()


visualization = _lazy_module('polygeom.core.visualization')

# Geometry primitives
Point2D = _geom.Point2D
Point3D = _geom.Point3D
dot = _geom.dot
cross = _geom.cross
norm = _geom.norm
normalize = _geom.normalize
orient = _geom.orient
calc_distance2d = _geom.calc_distance2d
calc_squared_distance2d = _geom.calc_squared_distance2d
calc_distance3d = _geom.calc_distance3d
seg_intersect = _geom.seg_intersect
segment_intersection = _geom.segment_intersection
calc_curvature = _geom.calc_curvature

# Polygons
Polygon2D = _poly.Polygon2D
polygon_area = _poly.polygon_area
is_convex = _poly.is_convex

# Algorithms
random_convex_polygon = _rand.random_convex_polygon
random_concave_polygon = _rand.random_concave_polygon
triangulate = _tri.triangulate
intersects_convex = _gjk.intersects_convex
test_intersection = _inter.test_intersection
intersects = _inter.intersects
CONVEX_TESTS = _inter.CONVEX_TESTS
cross_validate = _valid.cross_validate
cross_validate_triangulated = _valid.cross_validate_triangulated
ValidationReport = _valid.ValidationReport

# Configuration and logging
IntersectionConfig = _config.IntersectionConfig
TriangulationConfig = _config.TriangulationConfig
RandomPolygonConfig = _config.RandomPolygonConfig
GeometryConfig = _config.GeometryConfig
configure_logging = _log.configure_logging
EPS_AREA = _const.EPS_AREA
EPS_CONTACT = _const.EPS_CONTACT

# Namespace submodules
geometry = _geom
constants = _const
config = _config
polygon = _poly
random_polygon = _rand
triangulation = _tri
gjk = _gjk
sat = _sat
intersection = _inter
validation = _valid

__all__ = [
    '__version__',
    # geometry primitives
    'Point2D', 'Point3D', 'dot', 'cross', 'norm', 'normalize', 'orient',
    'calc_distance2d', 'calc_squared_distance2d', 'calc_distance3d',
    'seg_intersect', 'segment_intersection', 'calc_curvature',
    # polygons
    'Polygon2D', 'polygon_area', 'is_convex',
    # algorithms
    'random_convex_polygon', 'random_concave_polygon', 'triangulate',
    'intersects_convex', 'test_intersection', 'intersects', 'CONVEX_TESTS',
    'cross_validate', 'cross_validate_triangulated', 'ValidationReport',
    # configuration / logging / tolerances
    'IntersectionConfig', 'TriangulationConfig', 'RandomPolygonConfig', 'GeometryConfig',
    'configure_logging', 'EPS_AREA', 'EPS_CONTACT',
    # submodules / namespaces
    'geometry', 'constants', 'config', 'polygon', 'random_polygon', 'triangulation',
    'gjk', 'sat', 'intersection', 'validation', 'visualization',
]

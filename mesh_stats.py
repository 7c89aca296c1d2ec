"""
Validated triangle mesh and its derived quantities.

A Mesh is filled one raw triangle at a time. Every triangle goes through
``validate`` first: degenerate triangles and triangles whose stored normal
is not a unit vector parallel to the geometric normal are rejected. The
area of every triangle seen, rejected or not, is added to
``total_surface_area``. Only accepted triangles are stored and folded into
the bounding box.
"""

import logging

import numpy as np

from geometry_ops import (EMPTY_BOUNDS, Vector3, bounding_box, expand_bounds,
                          triangle_area, triangle_cross_product)
from slicer_config import EPSILON

logger = logging.getLogger(__name__)


class Mesh:
    """Accepted triangles in source order plus running statistics.

    Attributes
    ----------
    total_surface_area : float
        Sum of the areas of every triangle passed to ``validate``.
    bounding_box : tuple[Point3, Point3]
        Bounds of the accepted vertices, EMPTY_BOUNDS while empty.
    applied_translation : Vector3
        Cumulative translation applied since the mesh was loaded.
    rejected_count : int
        Number of triangles refused by ``add_triangle``.
    """

    def __init__(self, epsilon=EPSILON):
        self.epsilon = epsilon
        self._triangles = []
        self.total_surface_area = 0.0
        self.bounding_box = EMPTY_BOUNDS
        self.applied_translation = Vector3(0.0, 0.0, 0.0)
        self.rejected_count = 0
        self._volume = None

    @classmethod
    def from_triangles(cls, triangles, epsilon=EPSILON):
        mesh = cls(epsilon=epsilon)
        for triangle in triangles:
            mesh.add_triangle(triangle)
        logger.info("Loaded %d triangles (%d rejected)", mesh.triangle_count, mesh.rejected_count)
        return mesh

    @property
    def triangles(self):
        return tuple(self._triangles)

    @property
    def triangle_count(self):
        return len(self._triangles)

    @property
    def is_empty(self):
        return not self._triangles

    @property
    def min_bound(self):
        return self.bounding_box[0]

    @property
    def max_bound(self):
        return self.bounding_box[1]

    def validate(self, triangle):
        """Check that a triangle is well formed and add its area to the total.

        Returns False for a degenerate triangle (area below epsilon), a normal
        that is not unit length, or a normal that is not parallel to the
        cross product of the edges in either orientation.
        """
        cross = triangle_cross_product(triangle)
        area = triangle_area(cross)

        self.total_surface_area += area

        if area < self.epsilon:
            logger.debug("Rejected degenerate triangle %s (area %g)", triangle, area)
            return False

        normal_length = triangle.normal.magnitude()
        if abs(normal_length - 1.0) > self.epsilon:
            logger.debug("Rejected triangle %s: normal length %g", triangle, normal_length)
            return False

        unit_cross = cross * (1.0 / (2 * area))
        dot_product = unit_cross.dot(triangle.normal)
        if abs(abs(dot_product) - 1.0) > self.epsilon:
            logger.debug("Rejected triangle %s: normal not perpendicular to face (dot %g)", triangle, dot_product)
            return False

        return True

    def add_triangle(self, triangle):
        if not self.validate(triangle):
            self.rejected_count += 1
            return False

        self._triangles.append(triangle)
        self.bounding_box = expand_bounds(self.bounding_box, triangle.vertices)
        self._volume = None
        return True

    def recompute_all(self):
        """Re-derive every statistic from the stored triangles.

        Triangles that no longer validate are dropped from the mesh.
        """
        self.total_surface_area = 0.0
        self._volume = None

        accepted = [triangle for triangle in self._triangles if self.validate(triangle)]
        if len(accepted) != len(self._triangles):
            logger.warning("Dropped %d triangles that no longer validate", len(self._triangles) - len(accepted))
        self._triangles = accepted
        self.bounding_box = bounding_box(accepted)

        return self.volume()

    def replace_triangles(self, triangles):
        """Swap in an externally modified triangle list and re-derive everything."""
        self._triangles = list(triangles)
        return self.recompute_all()

    def volume(self):
        """Enclosed volume of a closed, consistently wound mesh.

        Sums the signed volumes of the tetrahedra formed by each triangle and
        the origin. Open or inconsistently wound meshes give a meaningless
        value.
        """
        if self._volume is None:
            signed = 0.0
            for triangle in self._triangles:
                v1, v2, v3 = (np.array(v) for v in triangle.vertices)
                signed += float(np.dot(v1, np.cross(v2, v3)))
            self._volume = abs(signed) / 6.0
        return self._volume

    def translate(self, vector):
        self._triangles = [
            triangle._replace(v1=triangle.v1 + vector, v2=triangle.v2 + vector, v3=triangle.v3 + vector)
            for triangle in self._triangles
        ]
        min_point, max_point = self.bounding_box
        self.bounding_box = (min_point + vector, max_point + vector)
        self.applied_translation = self.applied_translation + vector
        self._volume = None

    def set_z_height(self, z):
        """Move the mesh vertically so its lowest point sits at z."""
        if self.is_empty:
            logger.warning("Cannot set Z height of an empty mesh")
            return
        self.translate(Vector3(0.0, 0.0, z - self.min_bound.z))

    def scale(self, factor):
        """Uniformly scale every vertex about the origin.

        A negative factor mirrors the mesh through the origin, so the box is
        rebuilt from both scaled corners. Normals are not touched.
        """
        self._triangles = [
            triangle._replace(v1=triangle.v1 * factor, v2=triangle.v2 * factor, v3=triangle.v3 * factor)
            for triangle in self._triangles
        ]
        if not self.is_empty:
            min_point, max_point = self.bounding_box
            self.bounding_box = expand_bounds(EMPTY_BOUNDS, (min_point * factor, max_point * factor))
        self._volume = None

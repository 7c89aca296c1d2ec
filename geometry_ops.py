import math
from collections import namedtuple

import numpy as np


class Vector3(namedtuple('Vector3', ['x', 'y', 'z'])):
    __slots__ = ()

    def __add__(self, other):
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other):
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, factor):
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__

    def cross(self, other):
        return Vector3(*np.cross(self, other).tolist())

    def dot(self, other):
        return self.x * other.x + self.y * other.y + self.z * other.z

    def magnitude(self):
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


class Point3(namedtuple('Point3', ['x', 'y', 'z'])):
    __slots__ = ()

    def __add__(self, vector):
        return Point3(self.x + vector.x, self.y + vector.y, self.z + vector.z)

    def __sub__(self, other):
        # point - point is a displacement, point - vector is another point
        if isinstance(other, Point3):
            return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)
        return Point3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, factor):
        return Point3(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__


Point2 = namedtuple('Point2', ['x', 'y'])
Line2 = namedtuple('Line2', ['start', 'end'])
Layer = namedtuple('Layer', ['height', 'lines'])


class Triangle(namedtuple('Triangle', ['normal', 'v1', 'v2', 'v3'])):
    __slots__ = ()

    @property
    def vertices(self):
        return (self.v1, self.v2, self.v3)


def triangle_cross_product(triangle):
    """Cross product of the triangle's two edges leaving v1."""
    edge1 = triangle.v2 - triangle.v1
    edge2 = triangle.v3 - triangle.v1
    return edge1.cross(edge2)


def triangle_area(cross):
    return 0.5 * float(np.linalg.norm(cross))


def triangle_z_range(triangle):
    min_z = min(triangle.v1.z, triangle.v2.z, triangle.v3.z)
    max_z = max(triangle.v1.z, triangle.v2.z, triangle.v3.z)
    return min_z, max_z


EMPTY_BOUNDS = (
    Point3(float('inf'), float('inf'), float('inf')),
    Point3(float('-inf'), float('-inf'), float('-inf')),
)


def expand_bounds(bounds, vertices):
    (min_x, min_y, min_z), (max_x, max_y, max_z) = bounds

    for x, y, z in vertices:
        min_x = min(min_x, x)
        min_y = min(min_y, y)
        min_z = min(min_z, z)
        max_x = max(max_x, x)
        max_y = max(max_y, y)
        max_z = max(max_z, z)

    return Point3(min_x, min_y, min_z), Point3(max_x, max_y, max_z)


def bounding_box(triangles):
    """Axis aligned bounds of every vertex, as (min Point3, max Point3).

    An empty sequence returns EMPTY_BOUNDS.
    """
    bounds = EMPTY_BOUNDS
    for triangle in triangles:
        bounds = expand_bounds(bounds, triangle.vertices)
    return bounds


def as_point3(values):
    x, y, z = values
    return Point3(float(x), float(y), float(z))


def as_vector3(values):
    x, y, z = values
    return Vector3(float(x), float(y), float(z))

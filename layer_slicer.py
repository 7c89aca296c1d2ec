"""
Z-sweep slicing of a validated mesh into horizontal layers.

Each layer i covers [layer_z, layer_z + layer_height) with
layer_z = anchor + i * layer_height. A triangle whose three vertices all lie
inside that interval contributes its three projected edges. Otherwise, a
triangle with edges crossing the plane z = layer_z contributes the segment
joining the two crossing points. Segments are emitted in mesh order; they
are not joined into loops.
"""

import logging
import math

import numpy as np

from geometry_ops import Layer, Line2, Point2, triangle_z_range
from slicer_config import SlicerConfig

logger = logging.getLogger(__name__)


def layer_count(min_z, max_z, layer_height, epsilon=0.0):
    """Number of layers needed to cover [min_z, max_z].

    Zero for an empty mesh (infinite sentinel bounds), at least one
    otherwise. epsilon absorbs floating point noise in the division so that
    an extent which is an exact multiple of layer_height does not gain an
    extra layer.
    """
    if not (math.isfinite(min_z) and math.isfinite(max_z)) or max_z < min_z:
        return 0
    return max(1, math.ceil((max_z - min_z) / layer_height - epsilon))


def is_triangle_in_layer(triangle, layer_z, thickness):
    top = layer_z + thickness
    return all(layer_z <= vertex.z < top for vertex in triangle.vertices)


def _crosses(p1, p2, layer_z):
    return (p1.z < layer_z) != (p2.z < layer_z)


def does_triangle_intersect_layer(triangle, layer_z):
    v1, v2, v3 = triangle.vertices
    return _crosses(v1, v2, layer_z) or _crosses(v2, v3, layer_z) or _crosses(v3, v1, layer_z)


def projected_triangle_lines(triangle):
    """The triangle outline dropped onto the XY plane, as three segments."""
    p1, p2, p3 = (Point2(vertex.x, vertex.y) for vertex in triangle.vertices)
    return [Line2(p1, p2), Line2(p2, p3), Line2(p3, p1)]


def triangle_plane_intersection(triangle, layer_z):
    """Points where the triangle's edges cross z = layer_z, at most two."""
    intersections = []
    vertices = triangle.vertices

    for i in range(3):
        point1 = vertices[i]
        point2 = vertices[(i + 1) % 3]

        if _crosses(point1, point2, layer_z):
            ratio = (layer_z - point1.z) / (point2.z - point1.z)
            x = point1.x + ratio * (point2.x - point1.x)
            y = point1.y + ratio * (point2.y - point1.y)
            intersections.append(Point2(x, y))

        if len(intersections) == 2:
            break

    return intersections


class LayerSlicer:
    """Slices a Mesh into Layers of constant thickness.

    The slicer reads the mesh each time slice_model is called and keeps no
    state between layers. It must not run while the mesh is being
    transformed.
    """

    def __init__(self, mesh, layer_height=None, config=None):
        self.config = config if config is not None else SlicerConfig()
        if layer_height is not None:
            self.config = SlicerConfig(
                layer_height=layer_height,
                epsilon=self.config.epsilon,
                anchor_to_origin=self.config.anchor_to_origin,
            )
        self.config.validate()
        self.mesh = mesh
        self._layers = []

    @property
    def layer_height(self):
        return self.config.layer_height

    @property
    def layers(self):
        return list(self._layers)

    def layer_heights(self):
        """Bottom Z of every layer the current mesh would produce."""
        min_bound, max_bound = self.mesh.bounding_box
        count = layer_count(min_bound.z, max_bound.z, self.layer_height, self.config.epsilon)
        anchor = 0.0 if self.config.anchor_to_origin else min_bound.z
        return [anchor + i * self.layer_height for i in range(count)]

    def slice_model(self):
        triangles = self.mesh.triangles
        heights = self.layer_heights()

        z_ranges = np.array([triangle_z_range(triangle) for triangle in triangles], dtype=float).reshape(-1, 2)
        min_z, max_z = z_ranges[:, 0], z_ranges[:, 1]

        layers = []
        anomalies = 0
        for layer_z in heights:
            lines = []
            candidates = np.nonzero((max_z >= layer_z) & (min_z < layer_z + self.layer_height))[0]

            for index in candidates:
                triangle = triangles[index]
                if is_triangle_in_layer(triangle, layer_z, self.layer_height):
                    lines.extend(projected_triangle_lines(triangle))
                elif does_triangle_intersect_layer(triangle, layer_z):
                    intersections = triangle_plane_intersection(triangle, layer_z)
                    if len(intersections) == 2:
                        lines.append(Line2(*intersections))
                    else:
                        anomalies += 1
                        logger.warning("Unexpected number of intersection points at Z=%g: %d",
                                       layer_z, len(intersections))

            layers.append(Layer(layer_z, tuple(lines)))

        logger.info("Sliced %d triangles into %d layers of %g (%d anomalies)",
                    len(triangles), len(layers), self.layer_height, anomalies)
        self._layers = layers
        return self.layers

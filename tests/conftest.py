"""
Shared test fixtures for mesh validation and slicing tests.
"""
import sys
from pathlib import Path

import numpy as np
import pytest

# Root modules are importable without installing the project
sys.path.insert(0, str(Path(__file__).parent.parent))

from geometry_ops import Point3, Triangle, Vector3
from mesh_stats import Mesh

CUBE_CORNERS = [
    (0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0),
    (0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1),
]

# Outward facing, counter-clockwise seen from outside
CUBE_FACES = [
    (0, 2, 1), (0, 3, 2),  # bottom
    (4, 5, 6), (4, 6, 7),  # top
    (0, 1, 5), (0, 5, 4),  # y = 0
    (3, 7, 6), (3, 6, 2),  # y = 1
    (0, 4, 7), (0, 7, 3),  # x = 0
    (1, 2, 6), (1, 6, 5),  # x = 1
]


def make_triangle(v1, v2, v3, normal=None):
    """Build a Triangle, deriving the unit normal from the winding if not given."""
    p1, p2, p3 = (Point3(*map(float, v)) for v in (v1, v2, v3))
    if normal is None:
        cross = np.cross(np.subtract(p2, p1), np.subtract(p3, p1))
        length = np.linalg.norm(cross)
        normal = cross / length if length > 0 else (0.0, 0.0, 1.0)
    return Triangle(Vector3(*map(float, normal)), p1, p2, p3)


def cube_triangles(size=1.0, offset=(0.0, 0.0, 0.0)):
    corners = [np.array(c, dtype=float) * size + np.array(offset) for c in CUBE_CORNERS]
    return [make_triangle(corners[a], corners[b], corners[c]) for a, b, c in CUBE_FACES]


def trimesh_triangles(tm):
    return [
        make_triangle(v1, v2, v3, normal)
        for (v1, v2, v3), normal in zip(tm.triangles, tm.face_normals)
    ]


@pytest.fixture
def unit_cube():
    """Closed 1x1x1 cube spanning [0, 1] on every axis."""
    return Mesh.from_triangles(cube_triangles())


@pytest.fixture
def raised_cube():
    """2mm cube whose lowest face sits at z=3."""
    return Mesh.from_triangles(cube_triangles(size=2.0, offset=(-1.0, -1.0, 3.0)))


@pytest.fixture
def ascii_cube_stl(tmp_path):
    path = tmp_path / "cube.stl"
    lines = ["solid cube"]
    for t in cube_triangles():
        lines.append(f"  facet normal {t.normal.x} {t.normal.y} {t.normal.z}")
        lines.append("    outer loop")
        for v in t.vertices:
            lines.append(f"      vertex {v.x} {v.y} {v.z}")
        lines.append("    endloop")
        lines.append("  endfacet")
    lines.append("endsolid cube")
    path.write_text("\n".join(lines) + "\n")
    return path

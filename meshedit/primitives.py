# meshedit/primitives.py
from __future__ import annotations

import math
from typing import List, Sequence

from .builder import MeshBuilder
from .mesh import Mesh
from .vecmath import Vec3


# -----------------------
# Primitive constructors
# -----------------------

def polygon_mesh(points: Sequence[Vec3], faces: Sequence[Sequence[int]], name: str = "mesh") -> Mesh:
    """Build a mesh from 0-based polygon index lists (no welding)."""
    mesh = Mesh(name)
    b = MeshBuilder(mesh)
    vids: List[int] = [b.add_vertex(p) for p in points]
    for poly in faces:
        n = len(poly)
        b.add_face([b.add_edge(vids[poly[i]], vids[poly[(i + 1) % n]]) for i in range(n)])
    return mesh


def cube(size: float = 1.0, name: str = "cube") -> Mesh:
    """Axis-aligned cube centred on the origin; quads wound counter-clockwise seen from outside.

    Face order: bottom (-y), front (+z), right (+x), back (-z), left (-x), top (+y).
    """
    h = size / 2
    verts: List[Vec3] = [
        (-h, -h, -h), (h, -h, -h), (h, h, -h), (-h, h, -h),
        (-h, -h, h), (h, -h, h), (h, h, h), (-h, h, h),
    ]
    quads = [
        (0, 1, 5, 4),  # bottom
        (4, 5, 6, 7),  # front
        (1, 2, 6, 5),  # right
        (0, 3, 2, 1),  # back
        (0, 4, 7, 3),  # left
        (3, 7, 6, 2),  # top
    ]
    return polygon_mesh(verts, quads, name=name)


def ngon(sides: int = 4, radius: float = 1.0, name: str = "ngon") -> Mesh:
    """Single regular polygon in the XY plane, counter-clockwise about +Z, open boundary."""
    if sides < 3:
        raise ValueError(f"sides must be >= 3 (got {sides})")
    if radius <= 0:
        raise ValueError(f"radius must be > 0 (got {radius})")
    verts: List[Vec3] = []
    for i in range(sides):
        ang = i * 2 * math.pi / sides
        verts.append((radius * math.cos(ang), radius * math.sin(ang), 0.0))
    return polygon_mesh(verts, [list(range(sides))], name=name)

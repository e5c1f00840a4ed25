# meshedit/editors.py
"""
Topological face editors.

Both editors replace one face by new geometry attached to the face's old
boundary:

- extrude: a copy of the face pushed along a direction, joined to the old
  boundary by a ring of quads.
- inset: a copy of the face shrunk toward its centroid, joined the same way.

All checks run before the mesh is touched, so a raised
:class:`~meshedit.errors.MeshEditError` means the mesh is exactly as it was.
The old boundary half-edges are kept and handed to the side quads; nothing is
destroyed.

Example:
    mesh = cube(2.0)
    top = extrude_face(mesh, 0, (0, -1, 0), 1.5).top_face
    inset_face(mesh, top, 0.25)
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .builder import MeshBuilder
from .config import DEFAULT_TOLERANCE, MIN_FACE_VERTICES
from .errors import DegenerateDirection, DegenerateInset, InvalidFace
from .mesh import Mesh
from .queries import FaceRef, face_halfedges, face_normal, face_record
from .vecmath import Vec3, is_finite_vec, v_add, v_len, v_mean, v_scale, v_sub, vec3

logger = logging.getLogger(__name__)


@dataclass
class ExtrusionResult:
    top_face: int
    side_faces: List[int]
    new_vertices: List[int]


@dataclass
class InsetResult:
    inset_face: int
    side_faces: List[int]
    new_vertices: List[int]


def _boundary_ring(mesh: Mesh, face: FaceRef) -> Tuple[int, List[int], List[int]]:
    """(face id, ring vertices, ring half-edges) with half-edge i running ring[i] -> ring[i + 1]."""
    fid = face_record(mesh, face).id
    edges = face_halfedges(mesh, fid)
    if len(edges) < MIN_FACE_VERTICES:
        raise InvalidFace(f"Face {fid} has {len(edges)} vertices, need at least {MIN_FACE_VERTICES}")
    ring = [mesh.halfedges[h].origin for h in edges]
    return fid, ring, edges


def _replace_face(mesh: Mesh, fid: int, ring: List[int], old_edges: List[int],
                  targets: List[Vec3], tolerance: float) -> Tuple[int, List[int], List[int]]:
    """Swap face ``fid`` for a face on ``targets`` plus one side quad per old edge.

    Side quad i runs ring[i] -> ring[i+1] -> new[i+1] -> new[i]; the two radial
    edges are requested through add_edge, so neighbouring quads share one twin
    pair instead of getting parallel edges.
    """
    b = MeshBuilder(mesh)
    n = len(ring)
    b.remove_face(fid)

    # fresh vertices even if they coincide with existing ones
    new = [b.add_vertex(p, weld=False, tolerance=tolerance) for p in targets]

    cap = [b.add_edge(new[i], new[(i + 1) % n]) for i in range(n)]
    cap_face = b.add_face(cap)

    sides: List[int] = []
    for i in range(n):
        j = (i + 1) % n
        rise = b.add_edge(ring[j], new[j])
        fall = b.add_edge(new[i], ring[i])
        across = mesh.halfedges[cap[i]].twin
        sides.append(b.add_face([old_edges[i], rise, across, fall]))
    return cap_face, sides, new


def extrude_face(mesh: Mesh, face: FaceRef, direction: Iterable[float], distance: float,
                 tolerance: float = DEFAULT_TOLERANCE) -> ExtrusionResult:
    """
    Extrude ``face`` by ``distance`` along ``direction``.

    ``direction`` is normalized here; its length does not matter but it must
    not be zero. A negative distance pushes the new face the other way.

    Returns the new top face (same winding as the removed one), the ``n`` side
    quads in boundary order and the ``n`` new vertices (new_vertices[i] sits
    above the i-th boundary vertex, counting from the face anchor).

    Raises:
        InvalidFace: unknown face, missing anchor, open loop or < 3 vertices.
        DegenerateDirection: zero-length or non-finite direction, or a new
            vertex position that is not finite.
    """
    fid, ring, old_edges = _boundary_ring(mesh, face)

    d = vec3(direction)
    length = v_len(d)
    if length == 0.0 or not math.isfinite(length):
        raise DegenerateDirection(f"Cannot extrude along {d}")
    if not math.isfinite(distance):
        raise ValueError(f"distance must be finite (got {distance})")

    offset = v_scale(d, distance / length)
    targets = [v_add(mesh.vertices[v].position, offset) for v in ring]
    for vid, p in zip(ring, targets):
        if not is_finite_vec(p):
            raise DegenerateDirection(f"Extruding by {distance} moves vertex {vid} out of the finite range")

    top, sides, new = _replace_face(mesh, fid, ring, old_edges, targets, tolerance)
    logger.debug("Extruded face %d (%d-gon) by %g: top face %d, side faces %s",
                 fid, len(ring), distance, top, sides)
    return ExtrusionResult(top_face=top, side_faces=sides, new_vertices=new)


def extrude_face_along_normal(mesh: Mesh, face: FaceRef, distance: float,
                              tolerance: float = DEFAULT_TOLERANCE) -> ExtrusionResult:
    """Extrude along the face's own normal (outward for a consistently wound closed mesh)."""
    return extrude_face(mesh, face, face_normal(mesh, face), distance, tolerance)


def inset_face(mesh: Mesh, face: FaceRef, distance: float,
               tolerance: float = DEFAULT_TOLERANCE) -> InsetResult:
    """
    Inset ``face``: move a copy of every boundary vertex ``distance`` toward
    the face centroid and fill the band between old and new boundary with quads.

    Raises:
        InvalidFace: unknown face, missing anchor, open loop or < 3 vertices.
        DegenerateInset: some boundary vertex is within ``tolerance`` of the
            centroid, or no farther from it than ``distance``, or a
            new vertex position is not finite.
    """
    fid, ring, old_edges = _boundary_ring(mesh, face)
    if not math.isfinite(distance):
        raise ValueError(f"distance must be finite (got {distance})")

    positions = [mesh.vertices[v].position for v in ring]
    centroid = v_mean(positions)

    targets: List[Vec3] = []
    for vid, p in zip(ring, positions):
        to_center = v_sub(centroid, p)
        reach = v_len(to_center)
        if reach <= tolerance:
            raise DegenerateInset(f"Vertex {vid} is within {tolerance} of the centroid of face {fid}")
        if distance >= reach:
            raise DegenerateInset(
                f"Inset distance {distance} reaches the centroid of face {fid} "
                f"(vertex {vid} is {reach:.6g} away)"
            )
        target = v_add(p, v_scale(to_center, distance / reach))
        if not is_finite_vec(target):
            raise DegenerateInset(f"Inset of face {fid} moves vertex {vid} out of the finite range")
        targets.append(target)

    inner, sides, new = _replace_face(mesh, fid, ring, old_edges, targets, tolerance)
    logger.debug("Inset face %d (%d-gon) by %g: inset face %d, side faces %s",
                 fid, len(ring), distance, inner, sides)
    return InsetResult(inset_face=inner, side_faces=sides, new_vertices=new)

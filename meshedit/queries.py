# meshedit/queries.py
"""
Read-only traversal and export.

Nothing in this module mutates a mesh, so these functions may run side by side
with each other, but never while an edit is in progress.

Export buffers are numpy arrays laid out the way a GPU renderer wants them:

    positions = export_positions(mesh)         # float32, (x0, y0, z0, x1, ...)
    indices = export_triangle_indices(mesh)    # uint32, three per triangle

Indices refer to positions in buffer order (vertex store order), which is not
necessarily the vertex id once a mesh has been cleared and rebuilt.
"""
from __future__ import annotations

from typing import Dict, List, Union

import numpy as np

from .errors import InvalidFace, TopologyError
from .mesh import Face, Mesh
from .vecmath import Vec3, v_mean, v_norm

FaceRef = Union[int, Face]


def face_record(mesh: Mesh, face: FaceRef) -> Face:
    fid = face.id if isinstance(face, Face) else face
    f = mesh.faces.get(fid)
    if f is None:
        raise InvalidFace(f"Face {fid} is not part of the mesh")
    return f


def face_halfedges(mesh: Mesh, face: FaceRef) -> List[int]:
    """Boundary half-edges of a face, following ``next`` from its anchor."""
    f = face_record(mesh, face)
    if f.halfedge is None or f.halfedge not in mesh.halfedges:
        raise InvalidFace(f"Face {f.id} has no anchor half-edge")
    loop: List[int] = []
    h = f.halfedge
    # a closed loop can't be longer than the whole half-edge arena
    for _ in range(mesh.num_halfedges):
        loop.append(h)
        nxt = mesh.halfedges[h].next
        if nxt is None:
            break
        if nxt == f.halfedge:
            return loop
        h = nxt
    raise InvalidFace(f"Boundary loop of face {f.id} does not close")


def face_vertices(mesh: Mesh, face: FaceRef) -> List[int]:
    """Vertex ids around a face, in winding order."""
    return [mesh.halfedges[h].origin for h in face_halfedges(mesh, face)]


def face_positions(mesh: Mesh, face: FaceRef) -> List[Vec3]:
    return [mesh.vertices[v].position for v in face_vertices(mesh, face)]


def face_centroid(mesh: Mesh, face: FaceRef) -> Vec3:
    return v_mean(face_positions(mesh, face))


def face_normal(mesh: Mesh, face: FaceRef) -> Vec3:
    """Unit normal by Newell's method; robust for non-planar and concave loops."""
    pts = face_positions(mesh, face)
    nx = ny = nz = 0.0
    n = len(pts)
    for i in range(n):
        x0, y0, z0 = pts[i]
        x1, y1, z1 = pts[(i + 1) % n]
        nx += (y0 - y1) * (z0 + z1)
        ny += (z0 - z1) * (x0 + x1)
        nz += (x0 - x1) * (y0 + y1)
    return v_norm((nx, ny, nz))


def _vertex_index(mesh: Mesh) -> Dict[int, int]:
    return {vid: i for i, vid in enumerate(mesh.vertices)}


def face_loops(mesh: Mesh) -> List[List[int]]:
    """Per-face loops of buffer indices (see :func:`export_positions`)."""
    index = _vertex_index(mesh)
    return [[index[v] for v in face_vertices(mesh, fid)] for fid in mesh.faces]


# -------------------------
# Render buffers
# -------------------------

def export_positions(mesh: Mesh) -> np.ndarray:
    """Flat float32 buffer, one xyz triple per vertex in store order."""
    out = np.empty(3 * mesh.num_vertices, dtype=np.float32)
    for i, v in enumerate(mesh.vertices.values()):
        out[3 * i:3 * i + 3] = v.position
    return out


def export_triangle_indices(mesh: Mesh) -> np.ndarray:
    """Fan triangulation (0, i, i + 1) of every face, as a flat uint32 buffer.

    Exact for convex faces; concave faces get a fan anyway.
    """
    tris: List[int] = []
    for loop in face_loops(mesh):
        a = loop[0]
        for i in range(1, len(loop) - 1):
            tris += [a, loop[i], loop[i + 1]]
    return np.asarray(tris, dtype=np.uint32)


def mesh_summary(mesh: Mesh) -> Dict[str, int]:
    boundary = sum(1 for h in mesh.halfedges.values() if h.face is None)
    return {
        "vertices": mesh.num_vertices,
        "halfedges": mesh.num_halfedges,
        "edges": mesh.num_edges,
        "faces": mesh.num_faces,
        "boundary_halfedges": boundary,
    }


# -------------------------
# Invariant checks
# -------------------------

def find_invariant_violations(mesh: Mesh) -> List[str]:
    """
    Check the half-edge invariants and describe every violation found.

    - twin(twin(h)) == h, and twins run in opposite directions
    - next(prev(h)) == h and prev(next(h)) == h
    - following next from a face anchor closes the loop and every member
      points back to that face
    - every vertex anchor leaves that vertex
    - no face is anchored on a boundary half-edge

    An empty list means the mesh is consistent.
    """
    problems: List[str] = []
    hes = mesh.halfedges

    for h in hes.values():
        t = hes.get(h.twin)
        if t is None or t.twin != h.id:
            problems.append(f"half-edge {h.id}: twin is not mutual")
        elif t.origin == h.origin:
            problems.append(f"half-edge {h.id}: twin has the same origin")
        if h.next is None or h.next not in hes:
            problems.append(f"half-edge {h.id}: next is unset")
        elif hes[h.next].prev != h.id:
            problems.append(f"half-edge {h.id}: prev(next(h)) != h")
        elif t is not None and hes[h.next].origin != t.origin:
            problems.append(f"half-edge {h.id}: next does not start where h ends")
        if h.prev is None or h.prev not in hes:
            problems.append(f"half-edge {h.id}: prev is unset")
        elif hes[h.prev].next != h.id:
            problems.append(f"half-edge {h.id}: next(prev(h)) != h")
        if h.face is not None and h.face not in mesh.faces:
            problems.append(f"half-edge {h.id}: refers to removed face {h.face}")

    for f in mesh.faces.values():
        if f.halfedge is None or f.halfedge not in hes:
            problems.append(f"face {f.id}: missing anchor")
            continue
        if hes[f.halfedge].face is None:
            problems.append(f"face {f.id}: anchored on a boundary half-edge")
        try:
            loop = face_halfedges(mesh, f.id)
        except InvalidFace as e:
            problems.append(str(e))
            continue
        if len(loop) < 3:
            problems.append(f"face {f.id}: loop has {len(loop)} half-edges")
        for h in loop:
            if hes[h].face != f.id:
                problems.append(f"face {f.id}: loop member {h} belongs to {hes[h].face}")

    for v in mesh.vertices.values():
        if v.halfedge is None:
            continue
        h = hes.get(v.halfedge)
        if h is None or h.origin != v.id:
            problems.append(f"vertex {v.id}: anchor does not leave the vertex")

    return problems


def assert_valid(mesh: Mesh) -> None:
    problems = find_invariant_violations(mesh)
    if problems:
        raise TopologyError("; ".join(problems))

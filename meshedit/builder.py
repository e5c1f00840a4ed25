# meshedit/builder.py
from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .config import DEFAULT_TOLERANCE, MIN_FACE_VERTICES
from .errors import InvalidFace, TopologyError
from .mesh import Halfedge, Mesh
from .queries import FaceRef, face_halfedges, face_record

logger = logging.getLogger(__name__)


class MeshBuilder:
    """
    Construction primitives over a :class:`Mesh`.

    Each public call leaves the mesh satisfying the half-edge invariants:
    twins are mutual, next/prev are inverse of each other, every face loop is
    closed and owned by its face, and every vertex anchor leaves that vertex.

    The builder itself is stateless (edge table and weld index live in the
    mesh), so several builders over the same mesh are interchangeable.

    Example:
        mesh = Mesh()
        b = MeshBuilder(mesh)
        a, c, d = (b.add_vertex(p) for p in [(0, 0, 0), (1, 0, 0), (0, 1, 0)])
        b.add_face([b.add_edge(a, c), b.add_edge(c, d), b.add_edge(d, a)])
    """

    def __init__(self, mesh: Mesh) -> None:
        self.mesh = mesh

    def add_vertex(self, position: Iterable[float], weld: bool = False,
                   tolerance: float = DEFAULT_TOLERANCE) -> int:
        """Return the id of a vertex at ``position``.

        With ``weld`` an existing vertex within ``tolerance`` is returned
        instead of allocating a new one.
        """
        if weld:
            hit = self.mesh.find_vertex_near(position, tolerance)
            if hit is not None:
                return hit.id
        return self.mesh.create_vertex(position).id

    def add_edge(self, v1: int, v2: int) -> int:
        """Half-edge v1 -> v2, reusing the existing undirected edge if there is one."""
        existing = self.mesh.find_edge(v1, v2)
        if existing is not None:
            return existing
        h = self.mesh.create_edge_pair(v1, v2)
        self.mesh.relink_boundary((v1, v2))
        return h.id

    def add_face(self, loop: Sequence[int]) -> int:
        """Close ``loop`` (half-edge ids, in boundary order) into a new face."""
        loop = list(loop)
        n = len(loop)
        if n < MIN_FACE_VERTICES:
            raise InvalidFace(f"A face needs at least {MIN_FACE_VERTICES} half-edges, got {n}")
        if len(set(loop)) != n:
            raise TopologyError("Face loop repeats a half-edge")

        hes: List[Halfedge] = [self.mesh.halfedge(h) for h in loop]
        for i, he in enumerate(hes):
            if he.face is not None:
                raise TopologyError(f"Half-edge {he.id} already bounds face {he.face}")
            nxt = hes[(i + 1) % n]
            if self.mesh.destination(he.id) != nxt.origin:
                raise TopologyError(
                    f"Face loop is not contiguous: half-edge {he.id} ends at vertex "
                    f"{self.mesh.destination(he.id)}, next starts at {nxt.origin}"
                )

        face = self.mesh.create_face(hes[0].id)
        for i, he in enumerate(hes):
            he.next = hes[(i + 1) % n].id
            he.prev = hes[(i - 1) % n].id
            he.face = face.id
        self.mesh.relink_boundary(he.origin for he in hes)
        return face.id

    def remove_face(self, face: FaceRef) -> List[int]:
        """Detach a face; return its former boundary half-edges (now boundary edges)."""
        fid = face_record(self.mesh, face).id
        loop = face_halfedges(self.mesh, fid)
        for hid in loop:
            self.mesh.halfedges[hid].face = None
        self.mesh.detach_face(fid)
        self.mesh.relink_boundary(self.mesh.halfedges[h].origin for h in loop)
        logger.debug("Removed face %d, released %d half-edges", fid, len(loop))
        return loop

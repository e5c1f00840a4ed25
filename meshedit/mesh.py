# meshedit/mesh.py
"""
Half-edge mesh store.

Vertices, half-edges and faces live in three insertion-ordered arenas keyed by
integer ids. Every cross reference (twin, next, prev, face, anchors) is an id
into one of those arenas; ``None`` means "not set", and for ``Halfedge.face``
it marks a boundary half-edge.

The mutators here keep pointers consistent (twins paired, edge table and
per-vertex adjacency in sync) but do not by themselves keep face loops closed;
that is the job of :class:`meshedit.builder.MeshBuilder`.
"""
from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import TopologyError
from .vecmath import Vec3, is_finite_vec, v_dist, vec3

logger = logging.getLogger(__name__)

EdgeKey = Tuple[int, int]
GridKey = Tuple[float, float, float]


def edge_key(v1: int, v2: int) -> EdgeKey:
    return (v1, v2) if v1 < v2 else (v2, v1)


def _cell_index(c: float, cell: float) -> float:
    s = c / cell
    if math.isfinite(s):
        return math.floor(s)
    # past the float range two distinct coordinates are always more than a cell apart
    return c


# --------------
# Records
# --------------

@dataclass
class Vertex:
    id: int
    position: Vec3
    halfedge: Optional[int] = None  # anchor: any half-edge leaving this vertex


@dataclass
class Halfedge:
    id: int
    origin: int
    twin: int
    next: Optional[int] = None
    prev: Optional[int] = None
    face: Optional[int] = None

    @property
    def is_boundary(self) -> bool:
        return self.face is None


@dataclass
class Face:
    id: int
    halfedge: Optional[int] = None  # anchor of the boundary loop


# --------------
# Store
# --------------

class Mesh:
    """Arena of vertices, half-edges and faces addressed by stable ids.

    Ids are handed out from per-kind counters and are never reused, not even
    after :meth:`clear`, so an id kept by a caller can go stale but can never
    alias a different element.
    """

    def __init__(self, name: str = "mesh") -> None:
        self.name = name
        self.vertices: Dict[int, Vertex] = {}
        self.halfedges: Dict[int, Halfedge] = {}
        self.faces: Dict[int, Face] = {}
        self._next_vertex = 0
        self._next_halfedge = 0
        self._next_face = 0
        # (lo, hi) vertex pair -> half-edge leaving lo
        self._edges: Dict[EdgeKey, int] = {}
        self._outgoing: Dict[int, List[int]] = {}
        # spatial hash for welding; built lazily for one cell size at a time
        self._grid: Dict[GridKey, List[int]] = {}
        self._grid_cell: Optional[float] = None

    def __repr__(self) -> str:
        return (f"Mesh(name={self.name!r}, vertices={self.num_vertices}, "
                f"halfedges={self.num_halfedges}, faces={self.num_faces})")

    # ---- counts ----
    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_halfedges(self) -> int:
        return len(self.halfedges)

    @property
    def num_edges(self) -> int:
        return len(self._edges)

    @property
    def num_faces(self) -> int:
        return len(self.faces)

    # ---- lookups ----
    def vertex(self, vid: int) -> Vertex:
        try:
            return self.vertices[vid]
        except KeyError:
            raise TopologyError(f"Unknown vertex id: {vid}") from None

    def halfedge(self, hid: int) -> Halfedge:
        try:
            return self.halfedges[hid]
        except KeyError:
            raise TopologyError(f"Unknown half-edge id: {hid}") from None

    def face(self, fid: int) -> Face:
        try:
            return self.faces[fid]
        except KeyError:
            raise TopologyError(f"Unknown face id: {fid}") from None

    def has_face(self, fid: int) -> bool:
        return fid in self.faces

    def twin(self, hid: int) -> Halfedge:
        return self.halfedges[self.halfedges[hid].twin]

    def destination(self, hid: int) -> int:
        """Vertex a half-edge points to (origin of its twin)."""
        return self.twin(hid).origin

    def outgoing(self, vid: int) -> List[int]:
        return list(self._outgoing.get(vid, ()))

    def find_edge(self, v1: int, v2: int) -> Optional[int]:
        """Half-edge running v1 -> v2, if the undirected edge exists."""
        hid = self._edges.get(edge_key(v1, v2))
        if hid is None:
            return None
        if self.halfedges[hid].origin == v1:
            return hid
        return self.halfedges[hid].twin

    def edges(self) -> List[Tuple[int, int]]:
        """Undirected edges as (lo, hi) vertex id pairs."""
        return list(self._edges)

    # ---- low-level mutators ----
    def create_vertex(self, position: Iterable[float]) -> Vertex:
        pos = vec3(position)
        if not is_finite_vec(pos):
            raise ValueError(f"Vertex position must be finite, got {pos}")
        v = Vertex(self._next_vertex, pos)
        self._next_vertex += 1
        self.vertices[v.id] = v
        self._outgoing[v.id] = []
        if self._grid_cell is not None:
            self._grid.setdefault(self._grid_key(pos, self._grid_cell), []).append(v.id)
        return v

    def create_edge_pair(self, v1: int, v2: int) -> Halfedge:
        """Create the twin pair v1 -> v2 / v2 -> v1 and return the first half.

        Anchors of the endpoints are set only when they have none yet.
        """
        if v1 == v2:
            raise TopologyError(f"Cannot create an edge from vertex {v1} to itself")
        a = self.vertex(v1)
        b = self.vertex(v2)
        key = edge_key(v1, v2)
        if key in self._edges:
            raise TopologyError(f"Edge {v1}-{v2} already exists")

        h = Halfedge(self._next_halfedge, v1, self._next_halfedge + 1)
        t = Halfedge(self._next_halfedge + 1, v2, self._next_halfedge)
        self._next_halfedge += 2
        self.halfedges[h.id] = h
        self.halfedges[t.id] = t
        self._edges[key] = h.id if v1 < v2 else t.id
        self._outgoing[v1].append(h.id)
        self._outgoing[v2].append(t.id)

        if a.halfedge is None:
            a.halfedge = h.id
        if b.halfedge is None:
            b.halfedge = t.id
        return h

    def destroy_edge_pair(self, hid: int) -> None:
        """Remove a half-edge together with its twin.

        Both halves must be boundary half-edges (no face). Endpoint anchors are
        moved to another outgoing half-edge (or cleared) and boundary loops at
        the endpoints are relinked.
        """
        h = self.halfedge(hid)
        t = self.halfedges[h.twin]
        if h.face is not None or t.face is not None:
            raise TopologyError(f"Half-edge pair {h.id}/{t.id} is still used by a face")

        del self.halfedges[h.id]
        del self.halfedges[t.id]
        del self._edges[edge_key(h.origin, t.origin)]
        for he in (h, t):
            out = self._outgoing[he.origin]
            out.remove(he.id)
            v = self.vertices[he.origin]
            if v.halfedge == he.id:
                v.halfedge = out[0] if out else None
        # only half-edges at the two endpoints can still point at the removed pair
        gone = (h.id, t.id)
        for vid in (h.origin, t.origin):
            for out_id in self._outgoing[vid]:
                for he in (self.halfedges[out_id], self.twin(out_id)):
                    if he.next in gone:
                        he.next = None
                    if he.prev in gone:
                        he.prev = None
        self.relink_boundary((h.origin, t.origin))

    def create_face(self, anchor: int) -> Face:
        self.halfedge(anchor)
        f = Face(self._next_face, anchor)
        self._next_face += 1
        self.faces[f.id] = f
        return f

    def detach_face(self, fid: int) -> Face:
        """Drop the face record only; its half-edges are left to the caller."""
        f = self.face(fid)
        del self.faces[fid]
        return f

    def clear(self) -> None:
        self.vertices.clear()
        self.halfedges.clear()
        self.faces.clear()
        self._edges.clear()
        self._outgoing.clear()
        self._grid.clear()
        self._grid_cell = None

    def copy(self) -> "Mesh":
        return copy.deepcopy(self)

    # ---- boundary loops ----
    def relink_boundary(self, vertex_ids: Iterable[int]) -> None:
        """Recompute next/prev of boundary half-edges arriving at the given vertices.

        For a boundary half-edge arriving at ``w``, the successor is found by
        rotating around ``w`` through face-owned half-edges until the next
        outgoing boundary half-edge. An edge with no face on either side folds
        back onto its own twin.
        """
        for w in set(vertex_ids):
            for out_id in self._outgoing.get(w, ()):
                incoming = self.twin(out_id)
                if incoming.face is not None:
                    continue
                succ = self._boundary_successor(incoming)
                if succ is None:
                    logger.debug("No boundary successor for half-edge %d at vertex %d", incoming.id, w)
                    continue
                incoming.next = succ.id
                succ.prev = incoming.id

    def _boundary_successor(self, incoming: Halfedge) -> Optional[Halfedge]:
        w = self.halfedges[incoming.twin].origin
        g = self.halfedges[incoming.twin]
        for _ in range(len(self._outgoing[w]) + 1):
            if g.face is None:
                return g
            if g.prev is None:
                return None
            g = self.twin(g.prev)
        return None

    # ---- spatial lookup ----
    @staticmethod
    def _grid_key(p: Vec3, cell: float) -> GridKey:
        return (_cell_index(p[0], cell), _cell_index(p[1], cell), _cell_index(p[2], cell))

    def _rebuild_grid(self, cell: float) -> None:
        self._grid = {}
        self._grid_cell = cell
        for v in self.vertices.values():
            self._grid.setdefault(self._grid_key(v.position, cell), []).append(v.id)

    def find_vertex_near(self, position: Iterable[float], tolerance: float) -> Optional[Vertex]:
        """Closest vertex within ``tolerance`` (Euclidean) of ``position``, if any."""
        if not tolerance > 0:
            raise ValueError(f"tolerance must be > 0 (got {tolerance})")
        pos = vec3(position)
        if self._grid_cell != tolerance:
            self._rebuild_grid(tolerance)
        kx, ky, kz = self._grid_key(pos, tolerance)
        best: Optional[Vertex] = None
        best_d = tolerance
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for dz in (-1, 0, 1):
                    for vid in self._grid.get((kx + dx, ky + dy, kz + dz), ()):
                        v = self.vertices[vid]
                        d = v_dist(v.position, pos)
                        if d < best_d or (d == best_d and (best is None or vid < best.id)):
                            best, best_d = v, d
        return best

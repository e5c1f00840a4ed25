# meshedit/obj.py
"""
Wavefront OBJ import into a half-edge mesh.

Only geometry is read:

    v x y z            vertex, numbered 1, 2, 3, ... in file order
    f i j k ...        polygon; 1-based indices, negative = relative to the
                       vertices read so far; "i/t/n" keeps only "i"
    # ...              comment to end of line

Everything else (vt, vn, o, g, usemtl, ...) is ignored. Polygons keep their
arity; nothing is triangulated on import.

Vertices whose positions round to the same key (see compute_weld_map) become
one mesh vertex, and faces sharing an edge share its twin pair.

Bad input is skipped rather than fatal unless ``strict=True``:

- a ``v`` record without three finite numbers still takes its index, so
  later indices keep their meaning, but any face that uses it is skipped;
- a face with a non-integer, zero or out-of-range index is skipped;
- a face the builder cannot close (its directed edge is already used by
  another face: inconsistent winding or non-manifold input) is skipped;
- a face left with fewer than 3 distinct corners after welding is dropped.

In strict mode the first bad record raises MalformedImportRecord instead; the
mesh is then left partially built.
"""
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .builder import MeshBuilder
from .config import DEFAULT_TOLERANCE, MIN_FACE_VERTICES
from .errors import MalformedImportRecord, MeshEditError
from .mesh import Mesh
from .vecmath import Vec3

logger = logging.getLogger(__name__)


@dataclass
class ParseReport:
    vertex_records: int = 0
    face_records: int = 0
    faces_built: int = 0
    faces_dropped: int = 0  # fewer than 3 corners; not an error
    skipped_lines: List[int] = field(default_factory=list)


# -------------------------
# Welding
# -------------------------

def compute_weld_map(positions: Sequence[Optional[Vec3]], tolerance: float = DEFAULT_TOLERANCE) -> List[int]:
    """Map every position index to the first index with the same rounded position.

    Coordinates are scaled by 10**ceil(-log10(tolerance)) and rounded to
    integers; equal integer triples weld. Missing (None) positions map to
    themselves.
    """
    if not tolerance > 0:
        raise ValueError(f"tolerance must be > 0 (got {tolerance})")
    shift = 10.0 ** math.ceil(-math.log10(tolerance))

    def q(c: float) -> float:
        s = c * shift
        return round(s) if math.isfinite(s) else c

    first: Dict[Tuple[float, float, float], int] = {}
    out: List[int] = []
    for i, p in enumerate(positions):
        if p is None:
            out.append(i)
            continue
        k = (q(p[0]), q(p[1]), q(p[2]))
        out.append(first.setdefault(k, i))
    return out


# -------------------------
# Record parsing
# -------------------------

def _parse_vertex(parts: List[str]) -> Vec3:
    if len(parts) < 4:
        raise MalformedImportRecord(f"vertex needs 3 coordinates, got {len(parts) - 1}")
    try:
        x, y, z = (float(s) for s in parts[1:4])
    except ValueError:
        raise MalformedImportRecord(f"unparseable vertex coordinates {parts[1:4]}") from None
    if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
        raise MalformedImportRecord(f"non-finite vertex coordinates {parts[1:4]}")
    return (x, y, z)


def _parse_face(parts: List[str], count: int) -> List[int]:
    """0-based position indices; negative ones resolved against ``count`` vertices read so far."""
    out: List[int] = []
    for tok in parts[1:]:
        head = tok.split("/", 1)[0]
        try:
            i = int(head)
        except ValueError:
            raise MalformedImportRecord(f"bad vertex reference {tok!r}") from None
        if i == 0:
            raise MalformedImportRecord("vertex reference 0 (OBJ indices start at 1)")
        i = i - 1 if i > 0 else count + i
        if i < 0:
            raise MalformedImportRecord(f"relative vertex reference {tok!r} points before the first vertex")
        out.append(i)
    return out


def _collapse_repeats(vids: List[int]) -> List[int]:
    out: List[int] = []
    for v in vids:
        if not out or out[-1] != v:
            out.append(v)
    while len(out) > 1 and out[0] == out[-1]:
        out.pop()
    return out


# -------------------------
# Import
# -------------------------

def parse_obj(builder: MeshBuilder, text: str, tolerance: float = DEFAULT_TOLERANCE,
              strict: bool = False) -> ParseReport:
    """
    Replace the builder's mesh contents with the geometry in ``text``.

    Parameters
    ----------
    builder:
        Builder over the target mesh; the mesh is cleared first.
    text:
        OBJ source.
    tolerance:
        Weld distance for coincident vertex records.
    strict:
        Raise MalformedImportRecord on the first bad record instead of
        skipping it.

    Returns
    -------
    ParseReport:
        What was read, built and skipped.
    """
    mesh = builder.mesh
    mesh.clear()
    report = ParseReport()

    def reject(err: MalformedImportRecord, line_no: int, line: str) -> None:
        if strict:
            raise MalformedImportRecord(str(err), line_no, line) from err
        report.skipped_lines.append(line_no)
        logger.warning("Skipping OBJ line %d (%s): %s", line_no, line.strip(), err)

    # pass 1: positions and raw index lists
    positions: List[Optional[Vec3]] = []
    faces: List[Tuple[int, str, List[int]]] = []
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        parts = line.split()
        tag = parts[0]
        if tag == "v":
            report.vertex_records += 1
            try:
                positions.append(_parse_vertex(parts))
            except MalformedImportRecord as e:
                positions.append(None)  # keep numbering
                reject(e, line_no, raw)
        elif tag == "f":
            report.face_records += 1
            try:
                idx = _parse_face(parts, len(positions))
            except MalformedImportRecord as e:
                reject(e, line_no, raw)
                continue
            faces.append((line_no, raw, idx))

    # pass 2: weld, then build faces
    weld = compute_weld_map(positions, tolerance)
    vertex_of: Dict[int, int] = {}  # canonical position index -> vertex id
    halfedge_of: Dict[Tuple[int, int], int] = {}  # directed vertex pair -> half-edge id

    for line_no, raw, idx in faces:
        if len(idx) < MIN_FACE_VERTICES:
            report.faces_dropped += 1
            logger.debug("Dropping face on line %d: %d corners", line_no, len(idx))
            continue
        try:
            vids = []
            for i in idx:
                if i >= len(positions):
                    raise MalformedImportRecord(f"vertex reference {i + 1} is out of range ({len(positions)} vertices)")
                c = weld[i]
                pos = positions[c]
                if pos is None:
                    raise MalformedImportRecord(f"face uses malformed vertex {i + 1}")
                vid = vertex_of.get(c)
                if vid is None:
                    vid = builder.add_vertex(pos, weld=True, tolerance=tolerance)
                    vertex_of[c] = vid
                vids.append(vid)
        except MalformedImportRecord as e:
            reject(e, line_no, raw)
            continue

        vids = _collapse_repeats(vids)
        if len(vids) < MIN_FACE_VERTICES:
            report.faces_dropped += 1
            logger.debug("Dropping face on line %d: collapsed to %d corners by welding", line_no, len(vids))
            continue

        loop: List[int] = []
        created: List[int] = []
        for a, b in zip(vids, vids[1:] + vids[:1]):
            h = halfedge_of.get((a, b))
            if h is None:
                h = builder.add_edge(a, b)
                halfedge_of[(a, b)] = h
                halfedge_of[(b, a)] = mesh.halfedges[h].twin
                created.append(h)
            loop.append(h)

        try:
            builder.add_face(loop)
        except MeshEditError as e:
            # drop the edges only this face introduced
            for h in created:
                he = mesh.halfedges[h]
                if he.face is None and mesh.halfedges[he.twin].face is None:
                    a, b = he.origin, mesh.halfedges[he.twin].origin
                    del halfedge_of[(a, b)]
                    del halfedge_of[(b, a)]
                    mesh.destroy_edge_pair(h)
            reject(MalformedImportRecord(f"face cannot be added: {e}"), line_no, raw)
            continue
        report.faces_built += 1

    report.skipped_lines.sort()
    logger.debug("OBJ import: %d vertex records -> %d vertices, %d/%d faces built, %d lines skipped",
                 report.vertex_records, mesh.num_vertices, report.faces_built,
                 report.face_records, len(report.skipped_lines))
    return report


def import_mesh(text: str, tolerance: float = DEFAULT_TOLERANCE, strict: bool = False,
                name: str = "mesh") -> Mesh:
    """Build a new mesh from OBJ text."""
    mesh = Mesh(name)
    parse_obj(MeshBuilder(mesh), text, tolerance=tolerance, strict=strict)
    return mesh


def load_obj(path: str, tolerance: float = DEFAULT_TOLERANCE, strict: bool = False) -> Mesh:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    name = os.path.splitext(os.path.basename(path))[0] or "mesh"
    return import_mesh(text, tolerance=tolerance, strict=strict, name=name)

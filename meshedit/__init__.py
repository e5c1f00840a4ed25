"""
meshedit: half-edge polygon meshes with topology-preserving face edits.

Highlights
---------
• Arena-backed half-edge store with stable integer ids
• Builder primitives: welded vertex insertion, shared-edge reuse, face closing
• Face extrude and inset that keep every twin/next/prev invariant intact
• Wavefront OBJ import with vertex welding (n-gons preserved)
• Render export: flat float32 positions + fan-triangulated uint32 indices
• Tiny CLI: python -m meshedit --help
"""
from .builder import MeshBuilder
from .config import DEFAULT_TOLERANCE
from .editors import (
    ExtrusionResult,
    InsetResult,
    extrude_face,
    extrude_face_along_normal,
    inset_face,
)
from .errors import (
    DegenerateDirection,
    DegenerateInset,
    InvalidFace,
    MalformedImportRecord,
    MeshEditError,
    TopologyError,
)
from .mesh import Face, Halfedge, Mesh, Vertex
from .obj import ParseReport, compute_weld_map, import_mesh, load_obj, parse_obj
from .primitives import cube, ngon, polygon_mesh
from .queries import (
    assert_valid,
    export_positions,
    export_triangle_indices,
    face_centroid,
    face_halfedges,
    face_loops,
    face_normal,
    face_vertices,
    find_invariant_violations,
    mesh_summary,
)

__version__ = "0.1.0"

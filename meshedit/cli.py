# meshedit/cli.py
from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Sequence

from .config import DEFAULT_TOLERANCE
from .editors import extrude_face, extrude_face_along_normal, inset_face
from .errors import MeshEditError
from .logging_config import setup_logging
from .mesh import Mesh
from .obj import load_obj
from .primitives import cube
from .queries import export_triangle_indices, find_invariant_violations, mesh_summary

logger = logging.getLogger(__name__)

_DEF_HELP = """
FACE is a position in the mesh's current face list (0 = first live face).
Edits run in the order given.

Examples:
  python -m meshedit --cube 2 --extrude-normal 0 1.5 --inset 0 0.25
  python -m meshedit model.obj --extrude 0 0 1 0 5 --inset 0 1
"""


class _EditAction(argparse.Action):
    """Collect edits of every kind into one ordered list of (kind, args)."""

    def __call__(self, parser, namespace, values, option_string=None):
        edits = list(getattr(namespace, self.dest, None) or [])
        edits.append((self.const, values))
        setattr(namespace, self.dest, edits)


def _face_at(mesh: Mesh, position: str) -> int:
    faces = list(mesh.faces)
    k = int(position)
    if not -len(faces) <= k < len(faces):
        raise MeshEditError(f"Face position {k} out of range ({len(faces)} faces)")
    return faces[k]


def apply_edit(mesh: Mesh, kind: str, args: Sequence[str], tolerance: float) -> None:
    face = _face_at(mesh, args[0])
    if kind == "extrude":
        dx, dy, dz, dist = (float(a) for a in args[1:])
        r = extrude_face(mesh, face, (dx, dy, dz), dist, tolerance)
        logger.info("extrude face %d -> top face %d, %d side faces", face, r.top_face, len(r.side_faces))
    elif kind == "extrude_normal":
        r = extrude_face_along_normal(mesh, face, float(args[1]), tolerance)
        logger.info("extrude face %d along its normal -> top face %d", face, r.top_face)
    elif kind == "inset":
        r2 = inset_face(mesh, face, float(args[1]), tolerance)
        logger.info("inset face %d -> inset face %d, %d side faces", face, r2.inset_face, len(r2.side_faces))
    else:
        raise ValueError(f"Unknown edit {kind!r}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="meshedit", description="meshedit: half-edge face extrude/inset",
                                epilog=_DEF_HELP, formatter_class=argparse.RawTextHelpFormatter)
    p.add_argument("obj", nargs="?", help="OBJ file to load (default: a cube, see --cube)")
    p.add_argument("--cube", type=float, default=1.0, metavar="SIZE", help="Cube size when no OBJ is given")
    p.add_argument("--tolerance", type=float, default=DEFAULT_TOLERANCE)
    p.add_argument("--strict", action="store_true", help="Fail on malformed OBJ records instead of skipping them")
    p.add_argument("--extrude", nargs=5, metavar=("FACE", "DX", "DY", "DZ", "DIST"),
                   dest="edits", action=_EditAction, const="extrude")
    p.add_argument("--extrude-normal", nargs=2, metavar=("FACE", "DIST"),
                   dest="edits", action=_EditAction, const="extrude_normal")
    p.add_argument("--inset", nargs=2, metavar=("FACE", "DIST"),
                   dest="edits", action=_EditAction, const="inset")
    p.add_argument("-v", "--verbose", action="store_true")
    p.add_argument("--log-file")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        if args.obj:
            mesh = load_obj(args.obj, tolerance=args.tolerance, strict=args.strict)
        else:
            mesh = cube(args.cube)
    except OSError as e:
        logger.error("Cannot read %s: %s", args.obj, e)
        return 1
    except MeshEditError as e:
        logger.error("Import failed: %s", e)
        return 2
    logger.info("loaded %r", mesh)

    for kind, values in args.edits or []:
        try:
            apply_edit(mesh, kind, values, args.tolerance)
        except ValueError as e:
            logger.error("%s %s failed: %s", kind, " ".join(values), e)
            return 2

    problems = find_invariant_violations(mesh)
    for msg in problems:
        logger.error("invariant violated: %s", msg)

    summary = mesh_summary(mesh)
    summary["triangles"] = len(export_triangle_indices(mesh)) // 3
    for key, value in summary.items():
        print(f"{key}: {value}")
    return 1 if problems else 0

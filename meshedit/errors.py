"""Exceptions raised by mesh construction, editing and import."""
from __future__ import annotations

from typing import Optional


class MeshEditError(ValueError):
    """Base class; a failed operation leaves the mesh as it was."""


class TopologyError(MeshEditError):
    """A builder call would break half-edge connectivity (or refers to unknown ids)."""


class InvalidFace(MeshEditError):
    """Face is unknown, has no anchor half-edge, or its boundary loop is too short."""


class DegenerateDirection(MeshEditError):
    """Extrusion direction has zero (or non-finite) length, or the offset leaves the float range."""


class DegenerateInset(MeshEditError):
    """Inset would collapse the face onto (or past) its centroid, or leave the float range."""


class MalformedImportRecord(MeshEditError):
    """An OBJ record could not be turned into geometry."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.line = line

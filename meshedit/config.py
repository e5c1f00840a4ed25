"""
Package-wide defaults.

Every operation takes these as keyword arguments, so callers override them per
call; nothing here is read from files or the environment.

Exports:
    DEFAULT_TOLERANCE (float): distance below which two positions are treated
        as the same point (vertex welding, centroid checks).
    MIN_FACE_VERTICES (int): smallest polygon a face may have.
    LOGGER_NAME (str): root of the package's logger hierarchy.
"""

DEFAULT_TOLERANCE: float = 1e-10
MIN_FACE_VERTICES: int = 3
LOGGER_NAME: str = "meshedit"

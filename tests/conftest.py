"""Pytest configuration and shared fixtures."""
import logging
import sys
from pathlib import Path

import pytest

# Let the tests run from a plain checkout as well as from an installed package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from meshedit import Mesh, import_mesh  # noqa: E402
from meshedit.vecmath import Vec3  # noqa: E402


# Box spanning x in [-4.73, 4.73], y and z in [-1, 1]; face 1 is the +y side.
DEMO_CUBE_OBJ = """
  v 4.726442 1.000000 -1.000000
  v 4.726442 -1.000000 -1.000000
  v 4.726442 1.000000 1.000000
  v 4.726442 -1.000000 1.000000
  v -4.726442 1.000000 -1.000000
  v -4.726442 -1.000000 -1.000000
  v -4.726442 1.000000 1.000000
  v -4.726442 -1.000000 1.000000
  f 1/1/1 5/2/1 7/3/1 3/4/1
  f 4/5/2 3/4/2 7/6/2 8/7/2
  f 8/8/3 7/9/3 5/10/3 6/11/3
  f 6/12/4 2/13/4 4/5/4 8/14/4
  f 2/13/5 1/1/5 3/4/5 4/5/5
  f 6/11/6 5/10/6 1/1/6 2/13/6
"""

UNIT_SQUARE_OBJ = """
v -0.5 -0.5 0
v 0.5 -0.5 0
v 0.5 0.5 0
v -0.5 0.5 0
f 1 2 3 4
"""


def vertex_at(mesh: Mesh, position: Vec3, tol: float = 1e-9) -> int:
    """Id of the vertex at ``position``; fails the test when absent."""
    for v in mesh.vertices.values():
        if all(abs(a - b) <= tol for a, b in zip(v.position, position)):
            return v.id
    raise AssertionError(f"no vertex at {position}")


def first_face(mesh: Mesh) -> int:
    return next(iter(mesh.faces))


@pytest.fixture
def demo_cube_text() -> str:
    return DEMO_CUBE_OBJ


@pytest.fixture
def demo_cube() -> Mesh:
    return import_mesh(DEMO_CUBE_OBJ)


@pytest.fixture
def unit_square() -> Mesh:
    return import_mesh(UNIT_SQUARE_OBJ)


@pytest.fixture
def reset_meshedit_logger():
    yield
    logger = logging.getLogger("meshedit")
    for h in logger.handlers:
        h.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)

import numpy as np
import pytest

from meshedit import (
    InvalidFace,
    MeshBuilder,
    TopologyError,
    assert_valid,
    cube,
    export_positions,
    export_triangle_indices,
    face_halfedges,
    face_loops,
    face_normal,
    find_invariant_violations,
    mesh_summary,
    ngon,
    parse_obj,
)

from conftest import first_face


class TestExport(object):

    def test_dtypes_and_lengths(self, demo_cube) -> None:
        pos = export_positions(demo_cube)
        idx = export_triangle_indices(demo_cube)
        assert pos.dtype == np.float32 and pos.shape == (24,)
        assert idx.dtype == np.uint32 and idx.shape == (36,)
        assert idx.max() < demo_cube.num_vertices

    def test_pentagon_fan(self) -> None:
        m = ngon(5)
        assert export_triangle_indices(m).tolist() == [0, 1, 2, 0, 2, 3, 0, 3, 4]

    def test_export_is_repeatable(self, demo_cube) -> None:
        np.testing.assert_array_equal(export_triangle_indices(demo_cube), export_triangle_indices(demo_cube))
        np.testing.assert_array_equal(export_positions(demo_cube), export_positions(demo_cube))

    def test_face_loops(self) -> None:
        m = cube(1.0)
        loops = face_loops(m)
        assert len(loops) == 6
        assert loops[0] == [0, 1, 5, 4]
        assert loops[5] == [3, 7, 6, 2]

    def test_indices_are_buffer_positions(self, demo_cube, demo_cube_text) -> None:
        parse_obj(MeshBuilder(demo_cube), demo_cube_text)
        assert min(demo_cube.vertices) >= 8  # ids keep counting after clear()
        idx = export_triangle_indices(demo_cube)
        assert idx.max() == 7
        assert len(export_positions(demo_cube)) == 24

    def test_empty_mesh(self) -> None:
        m = cube(1.0)
        m.clear()
        assert export_positions(m).shape == (0,)
        assert export_triangle_indices(m).shape == (0,)


class TestFaceQueries(object):

    def test_demo_top_normal(self, demo_cube) -> None:
        assert face_normal(demo_cube, first_face(demo_cube)) == pytest.approx((0, 1, 0))

    def test_cube_normals_point_outward(self) -> None:
        m = cube(2.0)
        expected = [(0, -1, 0), (0, 0, 1), (1, 0, 0), (0, 0, -1), (-1, 0, 0), (0, 1, 0)]
        for fid, n in zip(m.faces, expected):
            assert face_normal(m, fid) == pytest.approx(n)

    def test_broken_loop(self, demo_cube) -> None:
        fid = first_face(demo_cube)
        h = demo_cube.faces[fid].halfedge
        demo_cube.halfedges[h].next = None
        with pytest.raises(InvalidFace):
            face_halfedges(demo_cube, fid)

    def test_summary(self) -> None:
        assert mesh_summary(cube(1.0)) == {
            "vertices": 8, "halfedges": 24, "edges": 12, "faces": 6, "boundary_halfedges": 0}
        assert mesh_summary(ngon(5))["boundary_halfedges"] == 5


class TestInvariants(object):

    def test_clean_meshes(self, demo_cube, unit_square) -> None:
        assert find_invariant_violations(demo_cube) == []
        assert find_invariant_violations(unit_square) == []
        assert_valid(cube(3.0))

    def test_corrupted_twin_is_reported(self) -> None:
        m = cube(1.0)
        h = m.halfedges[0]
        h.twin = h.next
        problems = find_invariant_violations(m)
        assert any("half-edge 0" in p for p in problems)
        with pytest.raises(TopologyError):
            assert_valid(m)

    def test_stale_face_reference(self) -> None:
        m = cube(1.0)
        m.detach_face(0)
        assert any("removed face 0" in p for p in find_invariant_violations(m))

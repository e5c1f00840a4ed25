import pytest

from meshedit.cli import build_parser, main

pytestmark = pytest.mark.usefixtures("reset_meshedit_logger")


def _summary(out: str) -> dict:
    pairs = (line.split(": ", 1) for line in out.splitlines() if ": " in line and " - " not in line)
    return {k: v for k, v in pairs}


class TestMain(object):

    def test_cube_extrude_then_inset(self, capsys) -> None:
        assert main(["--cube", "2", "--extrude-normal", "0", "1.5", "--inset", "0", "0.25"]) == 0
        s = _summary(capsys.readouterr().out)
        assert s["faces"] == "14"
        assert s["vertices"] == "16"
        assert s["boundary_halfedges"] == "0"
        assert s["triangles"] == "28"

    def test_default_cube(self, capsys) -> None:
        assert main([]) == 0
        s = _summary(capsys.readouterr().out)
        assert (s["vertices"], s["faces"], s["edges"]) == ("8", "6", "12")

    def test_failed_inset(self, capsys) -> None:
        assert main(["--inset", "0", "5"]) == 2
        assert "faces:" not in capsys.readouterr().out

    def test_bad_face_position(self) -> None:
        assert main(["--extrude", "99", "0", "1", "0", "1"]) == 2

    def test_obj_file(self, tmp_path, capsys, demo_cube_text) -> None:
        path = tmp_path / "demo.obj"
        path.write_text(demo_cube_text, encoding="utf-8")
        assert main([str(path), "--extrude", "0", "0", "1", "0", "5"]) == 0
        s = _summary(capsys.readouterr().out)
        assert s["faces"] == "10" and s["vertices"] == "12"

    def test_missing_file(self, tmp_path) -> None:
        assert main([str(tmp_path / "nope.obj")]) == 1

    def test_strict_import_failure(self, tmp_path) -> None:
        path = tmp_path / "bad.obj"
        path.write_text("v 0 0 0\nv 1 0\nv 0 1 0\nf 1 2 3\n", encoding="utf-8")
        assert main([str(path), "--strict"]) == 2


def test_edits_keep_command_line_order() -> None:
    args = build_parser().parse_args(["--inset", "1", "0.1", "--extrude", "0", "0", "0", "1", "2", "--inset", "2", "0.3"])
    assert [k for k, _ in args.edits] == ["inset", "extrude", "inset"]

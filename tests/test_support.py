import logging

import pytest

from meshedit import DegenerateInset, MalformedImportRecord, MeshEditError
from meshedit.logging_config import setup_logging
from meshedit.vecmath import v_cross, v_mean, v_norm


class TestErrors(object):

    def test_hierarchy(self) -> None:
        assert issubclass(DegenerateInset, MeshEditError)
        assert issubclass(MeshEditError, ValueError)

    def test_import_record_carries_line(self) -> None:
        err = MalformedImportRecord("bad vertex", 7, "v x y z")
        assert str(err) == "line 7: bad vertex"
        assert err.line_number == 7 and err.line == "v x y z"
        assert str(MalformedImportRecord("bad")) == "bad"


class TestVecmath(object):

    def test_norm_of_zero_is_zero(self) -> None:
        assert v_norm((0, 0, 0)) == (0.0, 0.0, 0.0)

    def test_cross(self) -> None:
        assert v_cross((1, 0, 0), (0, 1, 0)) == (0, 0, 1)

    def test_mean(self) -> None:
        assert v_mean([(0, 0, 0), (2, 4, 6)]) == (1.0, 2.0, 3.0)
        with pytest.raises(ValueError):
            v_mean([])


@pytest.mark.usefixtures("reset_meshedit_logger")
class TestSetupLogging(object):

    def test_handlers_do_not_stack(self, tmp_path) -> None:
        setup_logging()
        logger = setup_logging(logging.DEBUG, str(tmp_path / "run.log"))
        assert logger.name == "meshedit"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2

    def test_file_output(self, tmp_path) -> None:
        path = tmp_path / "run.log"
        logger = setup_logging(logging.INFO, str(path))
        logging.getLogger("meshedit.obj").info("hello from the importer")
        for h in logger.handlers:
            h.flush()
        assert "meshedit.obj - INFO - hello from the importer" in path.read_text(encoding="utf-8")

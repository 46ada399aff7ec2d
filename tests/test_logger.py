import io
import json
import os

import numpy as np
import pytest

from segtree import logger
from segtree.logger import make_output_format, Logger, HumanOutputFormat, ScopedConfigure

KEY_VALUES = {
    "test": 1,
    "b": -3.14,
    "8": 9.9,
    "l": [1, 2],
    "a": np.array([1, 2, 3]),
    "f": np.array(1),
    "g": np.array([[[1]]]),
}


@pytest.mark.parametrize('_format', ['stdout', 'log', 'json', 'csv'])
def test_make_output(tmp_path, _format):
    """
    test make output

    :param _format: (str) output format
    """
    writer = make_output_format(_format, str(tmp_path))
    writer.writekvs(KEY_VALUES)
    writer.close()


def test_make_output_fail(tmp_path):
    """
    test value error on logger
    """
    with pytest.raises(ValueError):
        make_output_format('dummy_format', str(tmp_path))


def test_levels():
    stream = io.StringIO()
    current = Logger(folder=None, output_formats=[HumanOutputFormat(stream)])
    current.log("hi")
    current.log("shouldn't appear", level=logger.DEBUG)
    current.set_level(logger.DEBUG)
    current.log("should", "appear", level=logger.DEBUG)
    current.set_level(logger.DISABLED)
    current.log("oh", level=logger.ERROR)
    assert stream.getvalue() == "hi\nshould appear\n"


def test_dump_table():
    stream = io.StringIO()
    current = Logger(folder=None, output_formats=[HumanOutputFormat(stream)])
    current.name2val["b"] = -33.5
    current.name2val["a"] = 5
    current.dumpkvs()
    assert stream.getvalue().splitlines()[1:3] == ["| a | 5        |", "| b | -33.5    |"]
    assert len(current.name2val) == 0


def test_scoped_configure_json(tmp_path):
    folder = str(tmp_path / "scoped")
    previous = Logger.CURRENT
    with ScopedConfigure(folder, ["json"]):
        assert Logger.CURRENT.dir == folder
        logger.logkvs({"b": -2.5, "n": np.int64(3)})
        with logger.ProfileKV("block"):
            pass
        logger.dumpkvs()
    assert Logger.CURRENT is previous
    with open(os.path.join(folder, "progress.json"), "rt") as file_handler:
        row = json.loads(file_handler.readline())
    assert row["b"] == -2.5 and row["n"] == 3
    assert row["wait_block"] >= 0.0


def test_csv_new_keys(tmp_path):
    writer = make_output_format('csv', str(tmp_path))
    writer.writekvs({"a": 1})
    writer.writekvs({"a": 2, "b": 3})
    writer.close()
    with open(os.path.join(str(tmp_path), "progress.csv"), "rt") as file_handler:
        lines = file_handler.read().splitlines()
    assert lines == ["a,b", "1,", "2,3"]


def test_configure_from_env(tmp_path, monkeypatch):
    folder = str(tmp_path / "env")
    monkeypatch.setenv('SEGTREE_LOGDIR', folder)
    monkeypatch.setenv('SEGTREE_LOG_FORMAT', 'log')
    with ScopedConfigure():
        assert Logger.CURRENT.dir == folder
        logger.warn("written to the log file")
        logger.debug("filtered out")
    assert Logger.CURRENT is Logger.DEFAULT
    with open(os.path.join(folder, "log.txt"), "rt") as file_handler:
        content = file_handler.read()
    assert "written to the log file" in content
    assert "filtered out" not in content

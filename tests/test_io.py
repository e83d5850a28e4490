import json
import logging

import pytest

from leaderboard import config
from leaderboard.analysis.scoring import normalized_values
from leaderboard.logging_config import setup_logging
from leaderboard.main import main
from leaderboard.model.io import DataLoader, DataLoadError
from leaderboard.model.matrix import ValueMatrix
from leaderboard.model.normalization import NormalizationRelation


def write_tables(path, features=None, normalize=None, **optional):
    (path / config.FEATURES_FILE).write_text(
        json.dumps(features if features is not None else {"A": {"x": 10, "y": 5}, "B": {"x": 20, "y": 4}}),
        encoding="utf-8",
    )
    (path / config.NORMALIZE_FILE).write_text(
        json.dumps(normalize if normalize is not None else {"x": "y", "y": None}), encoding="utf-8"
    )
    files = {
        "localization": config.LOCALIZATION_FILE,
        "links": config.LINKS_FILE,
        "groups": config.GROUPS_FILE,
    }
    for name, content in optional.items():
        (path / files[name]).write_text(json.dumps(content), encoding="utf-8")


class TestDataLoader:
    def test_load_required_tables(self, tmp_path):
        write_tables(tmp_path)
        data = DataLoader.load(str(tmp_path))
        assert data.matrix.projects == ["A", "B"]
        assert data.normalization.get("x") == "y"
        assert data.names == {}
        assert data.links == {}
        assert data.groups == {}

    def test_load_optional_tables(self, tmp_path):
        write_tables(
            tmp_path,
            localization={"descriptions": {"x": {"en": "Size"}, "y": {"en": "Count"}}},
            links={"A": {"x": {"source": "https://example.org"}}},
            groups={"x": "size", "y": ["y", "x"]},
        )
        data = DataLoader.load(str(tmp_path))
        assert data.locale("en").feature_name("x") == "Size"
        assert data.groups == {"x": ["size"], "y": ["y", "x"]}
        assert data.links["A"]["x"]["source"] == "https://example.org"

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DataLoadError):
            DataLoader.load(str(tmp_path / "nope"))

    def test_missing_required_file(self, tmp_path):
        write_tables(tmp_path)
        (tmp_path / config.NORMALIZE_FILE).unlink()
        with pytest.raises(DataLoadError):
            DataLoader.load(str(tmp_path))

    def test_invalid_json(self, tmp_path):
        write_tables(tmp_path)
        (tmp_path / config.FEATURES_FILE).write_text("{not json", encoding="utf-8")
        with pytest.raises(DataLoadError):
            DataLoader.load(str(tmp_path))

    def test_tables_must_be_objects(self, tmp_path):
        write_tables(tmp_path, features=[1, 2, 3])
        with pytest.raises(DataLoadError):
            DataLoader.load(str(tmp_path))

    def test_non_numeric_values_load_as_zero(self, tmp_path):
        write_tables(tmp_path, features={"A": {"x": "n/a", "y": 2}, "B": None})
        data = DataLoader.load(str(tmp_path))
        assert data.matrix.raw("A", "x") == 0.0
        assert data.matrix.raw("A", "y") == 2.0
        assert data.matrix.raw("B", "y") == 0.0


class TestCommandLine:
    def test_report(self, tmp_path, capsys):
        write_tables(tmp_path, normalize={})
        assert main([str(tmp_path), "--mode", "mean"]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "A"
        assert "66.7%" in out
        assert "Total:" in out

    def test_feature_scope(self, tmp_path, capsys):
        write_tables(tmp_path, normalize={})
        assert main([str(tmp_path), "--feature", "x", "--mode", "rank"]) == 0
        out = capsys.readouterr().out
        assert "#2" in out and "#1" in out

    def test_load_failure(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing")]) == 1
        assert "Could not load" in capsys.readouterr().err


def test_setup_logging_does_not_stack_handlers(tmp_path):
    log_file = tmp_path / "run.log"
    setup_logging(level=logging.DEBUG, log_file=str(log_file))
    setup_logging(level=logging.INFO)
    logger = logging.getLogger("leaderboard")
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO


def test_repeated_warning_logged_once(capsys):
    setup_logging(level=logging.WARNING)
    try:
        matrix = ValueMatrix({"A": {"x": 1}})
        relation = NormalizationRelation({"x": "missing"})
        for _ in range(3):
            normalized_values(matrix, relation)
        relation.set("x", "gone")
        normalized_values(matrix, relation)
    finally:
        logging.getLogger("leaderboard").handlers.clear()
    out = capsys.readouterr().out
    assert out.count("Divisor 'missing' of 'x'") == 1
    assert out.count("Divisor 'gone' of 'x'") == 1

"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from bayesian_text_classifier.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestStemCommand:
    def test_prints_stems(self, runner: CliRunner):
        result = runner.invoke(main, ["stem", "running", "caresses"])
        assert result.exit_code == 0
        assert "run" in result.output
        assert "caress" in result.output

    def test_requires_words(self, runner: CliRunner):
        result = runner.invoke(main, ["stem"])
        assert result.exit_code != 0


class TestClassifyCommand:
    def test_json_output(self, runner: CliRunner, corpus_dir: Path):
        result = runner.invoke(
            main, ["classify", str(corpus_dir), "run ball goal", "--text", "--output", "json"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["most_likely"] == "sports"
        assert set(data["scores"]) == {"cooking", "sports"}

    def test_softmax_json(self, runner: CliRunner, corpus_dir: Path):
        result = runner.invoke(
            main,
            ["classify", str(corpus_dir), "oven bread", "--text", "--softmax", "-o", "json"],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["most_likely"] == "cooking"
        assert sum(data["scores"].values()) == pytest.approx(1.0)

    def test_document_file_and_rich_output(self, runner: CliRunner, corpus_dir: Path, tmp_path: Path):
        doc = tmp_path / "query.txt"
        doc.write_text("bake bread", encoding="utf-8")
        result = runner.invoke(main, ["classify", str(corpus_dir), str(doc), "--depth", "2"])
        assert result.exit_code == 0, result.output
        assert "cooking" in result.output

    def test_stopwords_option(self, runner: CliRunner, corpus_dir: Path, tmp_path: Path):
        stop = tmp_path / "stop.txt"
        stop.write_text("ball", encoding="utf-8")
        result = runner.invoke(
            main,
            ["classify", str(corpus_dir), "run goal", "--text", "--stopwords", str(stop), "-o", "json"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["most_likely"] == "sports"

    def test_env_configuration(self, runner: CliRunner, corpus_dir: Path):
        result = runner.invoke(
            main,
            ["classify", str(corpus_dir), "run", "--text"],
            env={"BAYES_ALPHA": "-1"},
        )
        assert result.exit_code == 1
        assert "alpha" in result.output

    def test_invalid_depth(self, runner: CliRunner, corpus_dir: Path):
        result = runner.invoke(main, ["classify", str(corpus_dir), "run", "--text", "--depth", "0"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_document_file(self, runner: CliRunner, corpus_dir: Path, tmp_path: Path):
        result = runner.invoke(main, ["classify", str(corpus_dir), str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "is not a file" in result.output

    def test_empty_corpus(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(main, ["classify", str(tmp_path), "run", "--text"])
        assert result.exit_code == 1
        assert "not yet trained" in result.output


class TestEvaluateCommand:
    def test_cross_validation_table(self, runner: CliRunner, corpus_dir: Path):
        result = runner.invoke(main, ["evaluate", str(corpus_dir), "--folds", "2"])
        assert result.exit_code == 0, result.output
        assert "mean" in result.output
        assert "Accuracy" in result.output
        assert "100.00%" in result.output

    def test_invalid_alpha(self, runner: CliRunner, corpus_dir: Path):
        result = runner.invoke(main, ["evaluate", str(corpus_dir), "--alpha", "0"])
        assert result.exit_code == 1
        assert "alpha" in result.output

    def test_rejects_single_fold(self, runner: CliRunner, corpus_dir: Path):
        result = runner.invoke(main, ["evaluate", str(corpus_dir), "--folds", "1"])
        assert result.exit_code != 0

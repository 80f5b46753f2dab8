"""Tests for the command line interface."""

from pathlib import Path

import pytest

from hybrid_search import cli
from hybrid_search.datasets import loader
from hybrid_search.search import router

from tests.helpers import length_embedder

SAMPLE = """# Sample Document

Phoenix and LiveView work great together.

PostgreSQL full-text search ships with BM25 ranking functionality.
"""


@pytest.fixture(autouse=True)
def fake_embedder(monkeypatch):
    """Keep the CLI away from the real model."""
    monkeypatch.setattr(loader, "default_embedder", length_embedder)
    monkeypatch.setattr(router, "default_embedder", length_embedder)
    monkeypatch.setattr(cli, "default_embedder", length_embedder)


@pytest.fixture
def db(tmp_path: Path) -> str:
    return str(tmp_path / "cli.db")


@pytest.fixture
def loaded(tmp_path: Path, db: str) -> str:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "sample.md").write_text(SAMPLE, encoding="utf-8")
    assert cli.main(["--db", db, "load", str(docs), "--chunk-size", "120"]) == 0
    return db


class TestLoad:
    def test_missing_directory(self, db, tmp_path):
        assert cli.main(["--db", db, "load", str(tmp_path / "nope")]) == 1

    def test_reports_file_errors(self, db, tmp_path):
        docs = tmp_path / "docs"
        docs.mkdir()
        (docs / "bad.md").write_bytes(b"\xff\xfe")
        assert cli.main(["--db", db, "load", str(docs)]) == 1


class TestSearch:
    def test_bm25(self, loaded, capsys):
        assert cli.main(["--db", loaded, "search", "PostgreSQL", "--metric", "bm25"]) == 0
        out = capsys.readouterr().out
        assert "sample.md#1 (Sample Document)" in out
        assert "<b>PostgreSQL</b>" in out

    def test_vector_metric(self, loaded, capsys):
        assert cli.main(["--db", loaded, "search", "anything", "--metric", "l2", "--limit", "1"]) == 0
        out = capsys.readouterr().out
        assert "[distance " in out
        assert out.count("sample.md#") == 1

    def test_no_results(self, loaded, capsys):
        assert cli.main(["--db", loaded, "search", "django", "--metric", "bm25"]) == 0
        assert "No results found for: django" in capsys.readouterr().out

    def test_unknown_metric_is_rejected(self, loaded):
        with pytest.raises(SystemExit):
            cli.main(["--db", loaded, "search", "x", "--metric", "manhattan"])


class TestInfoAndBench:
    def test_info(self, loaded, capsys):
        assert cli.main(["--db", loaded, "info"]) == 0
        out = capsys.readouterr().out
        assert "Documents: 1" in out
        assert "Chunks: 2" in out
        assert "With dense embedding: 2" in out

    def test_info_missing_database(self, db):
        assert cli.main(["--db", db, "info"]) == 1

    def test_bench(self, loaded, capsys):
        assert cli.main(["--db", loaded, "bench", "--query", "phoenix", "--runs", "1"]) == 0
        out = capsys.readouterr().out
        assert "bm25" in out
        assert "vector cosine" in out
        assert "vector jaccard" in out

    def test_bench_empty_dataset(self, db):
        assert cli.main(["--db", db, "bench", "--runs", "1"]) == 1

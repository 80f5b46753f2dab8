"""Tests for file and directory ingestion."""

from pathlib import Path

import pytest

from hybrid_search.datasets import load_directory, load_file
from hybrid_search.datasets.loader import guess_title
from hybrid_search.embedders import zero_bits

from tests.helpers import DIM, length_embedder, unit_vector

SAMPLE = """# Sample Document

Phoenix and LiveView work great together.

PostgreSQL full-text search ships with BM25 ranking functionality.
"""


def failing_embedder(texts):
    raise RuntimeError("provider offline")


@pytest.fixture
def docs(tmp_path: Path) -> Path:
    directory = tmp_path / "docs"
    directory.mkdir()
    (directory / "sample.md").write_text(SAMPLE, encoding="utf-8")
    return directory


class TestLoadFile:
    """Chunking, embedding and upserting one document."""

    def test_persists_chunks_in_order(self, store, docs):
        result = load_file(docs / "sample.md", store=store, chunk_size=120, embedder=length_embedder)

        assert result.ok
        assert result.chunks == 2
        chunks = store.list_chunks()
        assert [c.chunk_index for c in chunks] == [0, 1]
        assert {c.source_path for c in chunks} == {"sample.md"}
        assert {c.document_title for c in chunks} == {"Sample Document"}
        assert chunks[0].content == "# Sample Document\n\nPhoenix and LiveView work great together."

    def test_stores_dense_and_binary_vectors(self, store, docs):
        load_file(docs / "sample.md", store=store, chunk_size=120, embedder=length_embedder)

        chunk = store.get_chunk("sample.md", 0)
        position = len(chunk.content) % DIM
        assert chunk.embedding == unit_vector(position)
        assert chunk.embedding_binary == "0" * position + "1" + "0" * (DIM - position - 1)

    def test_reingest_is_idempotent(self, store, docs):
        path = docs / "sample.md"
        load_file(path, store=store, chunk_size=120, embedder=length_embedder)
        before = [(c.id, c.key) for c in store.list_chunks()]

        load_file(path, store=store, chunk_size=120, embedder=length_embedder)

        assert [(c.id, c.key) for c in store.list_chunks()] == before

    def test_provider_failure_stores_text_only(self, store, docs):
        result = load_file(docs / "sample.md", store=store, chunk_size=120, embedder=failing_embedder)

        assert result.ok
        assert result.chunks == 2
        for chunk in store.list_chunks():
            assert chunk.embedding is None
            assert chunk.embedding_binary == zero_bits(DIM)

    def test_short_provider_result_leaves_gaps(self, store, docs):
        def one_vector(texts):
            return [unit_vector(0)]

        load_file(docs / "sample.md", store=store, chunk_size=120, embedder=one_vector)

        first, second = store.list_chunks()
        assert first.embedding == unit_vector(0)
        assert second.embedding is None
        assert second.embedding_binary == zero_bits(DIM)

    def test_failure_keeps_earlier_chunks(self, store, docs):
        def encoder(dense):
            return [zero_bits(DIM), "2" * DIM]

        result = load_file(
            docs / "sample.md",
            store=store,
            chunk_size=120,
            embedder=length_embedder,
            binary_encoder=encoder,
        )

        assert not result.ok
        assert result.chunks == 1
        assert "embedding_binary" in result.error
        assert [c.chunk_index for c in store.list_chunks()] == [0]

    def test_wrong_dimension_rejects_first_chunk(self, store, docs):
        result = load_file(
            docs / "sample.md",
            store=store,
            chunk_size=120,
            embedder=lambda texts: [[1.0, 0.0, 0.0] for _ in texts],
        )

        assert not result.ok
        assert result.chunks == 0
        assert store.count_chunks()["chunks"] == 0

    def test_missing_file_is_unreadable(self, store, tmp_path):
        result = load_file(tmp_path / "missing.md", store=store, embedder=length_embedder)
        assert result.error.startswith("unreadable")
        assert result.chunks == 0

    def test_invalid_utf8_is_unreadable(self, store, tmp_path):
        path = tmp_path / "latin1.md"
        path.write_bytes(b"caf\xe9 au lait")

        result = load_file(path, store=store, embedder=length_embedder)

        assert result.error.startswith("unreadable")

    def test_empty_file_has_no_chunks(self, store, tmp_path):
        path = tmp_path / "empty.md"
        path.write_text("\n\n", encoding="utf-8")

        result = load_file(path, store=store, embedder=failing_embedder)

        assert result.ok
        assert result.chunks == 0

    def test_source_path_relative_to_base_dir(self, store, docs):
        nested = docs / "guides"
        nested.mkdir()
        (nested / "intro.md").write_text("Intro text", encoding="utf-8")

        result = load_file(nested / "intro.md", store=store, base_dir=docs, embedder=length_embedder)

        assert result.path == "guides/intro.md"
        assert store.get_chunk("guides/intro.md", 0) is not None


class LineChunker:
    """One chunk per non-empty line."""

    def chunk(self, text):
        return [line.strip() for line in text.splitlines() if line.strip()]


class TestCustomChunker:
    """A ``ChunkingStrategy`` replaces the paragraph chunker."""

    def test_load_file_uses_chunker(self, store, docs):
        result = load_file(
            docs / "sample.md", store=store, embedder=length_embedder, chunker=LineChunker()
        )

        assert result.chunks == 3
        assert [c.content for c in store.list_chunks()] == [
            "# Sample Document",
            "Phoenix and LiveView work great together.",
            "PostgreSQL full-text search ships with BM25 ranking functionality.",
        ]

    def test_load_directory_passes_chunker(self, store, docs):
        result = load_directory(docs, store=store, embedder=length_embedder, chunker=LineChunker())

        assert result.chunks == 3
        assert [c.chunk_index for c in store.list_chunks()] == [0, 1, 2]

    def test_paragraph_chunker_matches_chunk_size(self, store, docs):
        from hybrid_search.chunkers import ParagraphChunker

        load_file(
            docs / "sample.md",
            store=store,
            embedder=length_embedder,
            chunker=ParagraphChunker(max_chars=120),
        )

        assert store.count_chunks()["chunks"] == 2


class TestGuessTitle:
    def test_first_heading(self):
        assert guess_title("intro\n\n## Setup Guide\n\n# Later", "x.md") == "Setup Guide"

    def test_empty_heading_is_skipped(self):
        assert guess_title("#\n\n# Real Title", "x.md") == "Real Title"

    def test_falls_back_to_file_name(self):
        assert guess_title("no headings here", "notes/my_cool-notes.md") == "My Cool Notes"


class TestLoadDirectory:
    """Aggregation across matching files."""

    def test_loads_matching_files(self, store, docs):
        (docs / "second.md").write_text("# Second\n\nMore text.", encoding="utf-8")
        (docs / "ignored.txt").write_text("Not markdown", encoding="utf-8")

        result = load_directory(docs, store=store, chunk_size=120, embedder=length_embedder)

        assert result.ok
        assert result.files == 2
        assert result.chunks == 3
        assert store.count_chunks()["documents"] == 2

    def test_custom_glob(self, store, docs):
        (docs / "notes.txt").write_text("Plain notes", encoding="utf-8")

        result = load_directory(docs, store=store, glob="*.txt", embedder=length_embedder)

        assert result.files == 1
        assert store.list_chunks()[0].source_path == "notes.txt"

    def test_recursive_glob_keeps_relative_paths(self, store, docs):
        nested = docs / "sub"
        nested.mkdir()
        (nested / "deep.md").write_text("Deep text", encoding="utf-8")

        load_directory(docs, store=store, glob="**/*.md", embedder=length_embedder)

        assert {c.source_path for c in store.list_chunks()} == {"sample.md", "sub/deep.md"}

    def test_errors_are_collected_per_file(self, store, docs):
        broken = docs / "broken.md"
        broken.write_bytes(b"\xff\xfe\xfa")

        result = load_directory(docs, store=store, chunk_size=120, embedder=length_embedder)

        assert not result.ok
        assert result.files == 2
        assert result.chunks == 2
        assert len(result.errors) == 1
        path, reason = result.errors[0]
        assert path.endswith("broken.md")
        assert reason.startswith("unreadable")

    def test_empty_directory(self, store, tmp_path):
        result = load_directory(tmp_path, store=store, embedder=length_embedder)
        assert result.ok
        assert result.files == 0
        assert result.chunks == 0

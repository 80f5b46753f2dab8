"""Tests for paragraph-based Markdown chunking."""

import pytest

from hybrid_search.chunkers import ParagraphChunker, chunk_markdown

SAMPLE = """# Title

Elixir makes concurrent programming approachable.

Phoenix LiveView keeps stateful connections without JavaScript.

Ecto offers a composable query DSL.
"""


class TestChunkMarkdown:
    """Greedy merging of paragraphs under a character budget."""

    def test_merges_paragraphs_up_to_the_limit(self):
        assert chunk_markdown(SAMPLE, 80) == [
            "# Title\n\nElixir makes concurrent programming approachable.",
            "Phoenix LiveView keeps stateful connections without JavaScript.",
            "Ecto offers a composable query DSL.",
        ]

    def test_large_budget_yields_single_chunk(self):
        chunks = chunk_markdown(SAMPLE, 10_000)
        assert len(chunks) == 1
        assert chunks[0].startswith("# Title\n\n")
        assert chunks[0].endswith("composable query DSL.")

    def test_chunks_respect_the_budget(self):
        for limit in (70, 80, 120, 200):
            for chunk in chunk_markdown(SAMPLE, limit):
                assert len(chunk) <= limit

    def test_oversized_paragraph_is_kept_whole(self):
        long_paragraph = "a" * 200
        text = f"short\n\n{long_paragraph}\n\ntail"
        assert chunk_markdown(text, 50) == ["short", long_paragraph, "tail"]

    def test_crlf_blank_lines_separate_paragraphs(self):
        assert chunk_markdown("one\r\n\r\ntwo", 3) == ["one", "two"]

    def test_single_newline_does_not_split(self):
        assert chunk_markdown("line one\nline two", 5) == ["line one\nline two"]

    def test_whitespace_only_input_has_no_chunks(self):
        assert chunk_markdown("", 100) == []
        assert chunk_markdown("  \n\n \t\n\n", 100) == []

    def test_paragraphs_are_trimmed(self):
        assert chunk_markdown("  first  \n\n\n   second\t", 100) == ["first\n\nsecond"]

    def test_is_deterministic(self):
        assert chunk_markdown(SAMPLE, 70) == chunk_markdown(SAMPLE, 70)

    @pytest.mark.parametrize("limit", [0, -5])
    def test_non_positive_limit_raises(self, limit):
        with pytest.raises(ValueError, match="max_chars"):
            chunk_markdown(SAMPLE, limit)


class TestParagraphChunker:
    """Object form used where a chunking strategy is injected."""

    def test_uses_configured_limit(self):
        chunker = ParagraphChunker(max_chars=80)
        assert chunker.chunk(SAMPLE) == chunk_markdown(SAMPLE, 80)

    def test_satisfies_protocol(self):
        from hybrid_search.protocols import ChunkingStrategy

        assert isinstance(ParagraphChunker(), ChunkingStrategy)

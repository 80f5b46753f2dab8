"""Text chunking strategies."""

from hybrid_search.chunkers.paragraph_chunker import ParagraphChunker, chunk_markdown

__all__ = ["ParagraphChunker", "chunk_markdown"]

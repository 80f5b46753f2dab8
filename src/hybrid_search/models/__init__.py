"""Data models for hybrid search."""

from hybrid_search.models.chunk import DatasetChunk

__all__ = ["DatasetChunk"]

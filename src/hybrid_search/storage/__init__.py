"""SQLite storage for dataset chunks."""

from hybrid_search.storage.store import ChunkStore

__all__ = ["ChunkStore"]

"""Protocols for the pluggable collaborators of ingestion and search."""

from hybrid_search.protocols.chunker import ChunkingStrategy
from hybrid_search.protocols.embedder import EmbeddingProvider
from hybrid_search.protocols.store import ChunkRepository

__all__ = ["ChunkRepository", "ChunkingStrategy", "EmbeddingProvider"]

"""Hybrid search over chunked documents.

Ingests Markdown documents into a SQLite chunk store with dense and binary
embeddings, and ranks chunks by cosine, L2, L1, inner product, Hamming or
Jaccard similarity, or by BM25 full-text relevance.

Usage:
    >>> from hybrid_search import ChunkStore, load_directory, search
    >>> store = ChunkStore("dataset.db")
    >>> store.initialize()
    >>> load_directory("docs/", store=store)
    >>> search.embedding("realtime updates", store=store, limit=5)
"""

__version__ = "0.1.0"

from hybrid_search import search
from hybrid_search.datasets import load_directory, load_file
from hybrid_search.models import DatasetChunk
from hybrid_search.storage import ChunkStore

__all__ = ["ChunkStore", "DatasetChunk", "load_directory", "load_file", "search"]

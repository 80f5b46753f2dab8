"""Entry points for search strategies.

Every function takes the query text plus keyword options and returns a
list of result dicts; none of them raise for bad queries.
"""

from typing import Any, Optional

from hybrid_search.embedders.adapter import Embedder
from hybrid_search.protocols import ChunkRepository
from hybrid_search.search.metrics import (
    COSINE,
    HAMMING,
    INNER_PRODUCT,
    JACCARD,
    L1,
    L2,
    METRICS,
    Metric,
    get_metric,
)
from hybrid_search.search.report import format_results
from hybrid_search.search.router import DEFAULT_LIMIT, Result, search, search_text

LEXICAL = "bm25"
STRATEGIES = [*METRICS, LEXICAL]

__all__ = [
    "METRICS",
    "Metric",
    "STRATEGIES",
    "bm25",
    "embedding",
    "embedding_dot",
    "embedding_hamming",
    "embedding_jaccard",
    "embedding_l1",
    "embedding_l2",
    "format_results",
    "get_metric",
    "run",
    "search",
    "search_text",
]


def bm25(query: Any, *, limit: Any = DEFAULT_LIMIT, store: Optional[ChunkRepository] = None) -> list[Result]:
    """Executes a BM25 full-text search.

    The result is a list of dicts with ``chunk``, ``score`` and ``headline`` keys.
    """
    return search_text(query, limit=limit, store=store)


def embedding(
    query: Any,
    *,
    limit: Any = DEFAULT_LIMIT,
    embedder: Optional[Embedder] = None,
    store: Optional[ChunkRepository] = None,
) -> list[Result]:
    """Nearest chunks by cosine distance (``distance``, smaller is closer)."""
    return search(query, COSINE, limit=limit, embedder=embedder, store=store)


def embedding_l2(
    query: Any,
    *,
    limit: Any = DEFAULT_LIMIT,
    embedder: Optional[Embedder] = None,
    store: Optional[ChunkRepository] = None,
) -> list[Result]:
    """Nearest chunks by L2 (Euclidean) distance."""
    return search(query, L2, limit=limit, embedder=embedder, store=store)


def embedding_l1(
    query: Any,
    *,
    limit: Any = DEFAULT_LIMIT,
    embedder: Optional[Embedder] = None,
    store: Optional[ChunkRepository] = None,
) -> list[Result]:
    """Nearest chunks by L1 (Manhattan) distance."""
    return search(query, L1, limit=limit, embedder=embedder, store=store)


def embedding_dot(
    query: Any,
    *,
    limit: Any = DEFAULT_LIMIT,
    embedder: Optional[Embedder] = None,
    store: Optional[ChunkRepository] = None,
) -> list[Result]:
    """Highest inner product first, reported as ``score``.

    Useful when embeddings are normalized and dot product corresponds to similarity.
    """
    return search(query, INNER_PRODUCT, limit=limit, embedder=embedder, store=store)


def embedding_hamming(
    query: Any,
    *,
    limit: Any = DEFAULT_LIMIT,
    embedder: Optional[Embedder] = None,
    store: Optional[ChunkRepository] = None,
) -> list[Result]:
    """Nearest chunks by Hamming distance over binary embeddings."""
    return search(query, HAMMING, limit=limit, embedder=embedder, store=store)


def embedding_jaccard(
    query: Any,
    *,
    limit: Any = DEFAULT_LIMIT,
    embedder: Optional[Embedder] = None,
    store: Optional[ChunkRepository] = None,
) -> list[Result]:
    """Nearest chunks by Jaccard distance over binary embeddings."""
    return search(query, JACCARD, limit=limit, embedder=embedder, store=store)


def run(
    query: Any,
    strategy: str,
    *,
    limit: Any = DEFAULT_LIMIT,
    embedder: Optional[Embedder] = None,
    store: Optional[ChunkRepository] = None,
) -> list[Result]:
    """Dispatch to BM25 or a vector metric by strategy name.

    Raises:
        ValueError: If ``strategy`` is neither "bm25" nor a registered metric
    """
    if strategy == LEXICAL:
        return bm25(query, limit=limit, store=store)
    return search(query, strategy, limit=limit, embedder=embedder, store=store)

"""Query execution shared by every search strategy.

Query functions never raise for bad input or backend trouble: an empty or
unembeddable query, or a failing store, yields an empty list.
"""

import logging
import numbers
import re
from typing import Any, Optional

from hybrid_search.config import get_default_store
from hybrid_search.embedders import default_embedder, from_embedding
from hybrid_search.embedders.adapter import Embedder, extract_query_vector
from hybrid_search.protocols import ChunkRepository
from hybrid_search.search.metrics import BINARY, Metric, get_metric

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
TERM_PATTERN = re.compile(r"\w+", re.UNICODE)

Result = dict[str, Any]


def normalize_limit(limit: Any, default: int = DEFAULT_LIMIT) -> int:
    """Positive integer limit, or ``default`` for anything else."""
    if isinstance(limit, numbers.Integral) and not isinstance(limit, bool) and limit > 0:
        return int(limit)
    return default


def normalize_query(query: Any) -> str:
    return "" if query is None else str(query).strip()


def search(
    query: Any,
    metric: "Metric | str",
    *,
    limit: Any = DEFAULT_LIMIT,
    embedder: Optional[Embedder] = None,
    store: Optional[ChunkRepository] = None,
) -> list[Result]:
    """Rank chunks against ``query`` under a vector metric.

    Args:
        query: Search text; trimmed before use
        metric: ``Metric`` descriptor or registered metric name
        limit: Maximum results (invalid values fall back to 10)
        embedder: Provider used to embed the query (defaults to the shared model)
        store: Store to query (defaults to the store from settings)

    Returns:
        Dicts with ``chunk`` and the metric's result key ("distance" or "score")

    Raises:
        ValueError: Only for an unknown metric name
    """
    metric = get_metric(metric)
    text = normalize_query(query)
    if not text:
        return []

    limit = normalize_limit(limit)
    vector = extract_query_vector(embedder or default_embedder, text)
    if vector is None:
        return []

    try:
        store = store or get_default_store()
        value = from_embedding(vector, size=store.dimension) if metric.field == BINARY else vector
        rows = store.nearest(metric.field, metric.function, value, limit)
    except Exception as e:
        logger.warning(f"{metric.name} search failed: {e}")
        return []

    return [
        {"chunk": chunk, metric.result_key: -raw if metric.negate else raw}
        for chunk, raw in rows
    ]


def match_expression(query: str) -> str:
    """FTS5 expression requiring every word of ``query``; empty if none."""
    return " ".join(f'"{term}"' for term in TERM_PATTERN.findall(query))


def search_text(
    query: Any,
    *,
    limit: Any = DEFAULT_LIMIT,
    store: Optional[ChunkRepository] = None,
) -> list[Result]:
    """BM25 full-text search.

    Returns:
        Dicts with ``chunk``, ``score`` (higher is better) and ``headline``,
        an excerpt with matched terms wrapped in ``<b>`` tags
    """
    match = match_expression(normalize_query(query))
    if not match:
        return []

    limit = normalize_limit(limit)
    try:
        store = store or get_default_store()
        rows = store.search_text(match, limit)
    except Exception as e:
        logger.warning(f"bm25 search failed: {e}")
        return []

    return [
        {"chunk": chunk, "score": score, "headline": headline}
        for chunk, score, headline in rows
    ]

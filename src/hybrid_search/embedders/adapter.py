"""Normalization of pluggable embedding providers.

Embedders come in several shapes: an ``EmbeddingProvider`` object, or a
plain callable taking a list of texts. Their results may be a bare list of
vectors, a numpy array, a wrapped ``("ok", vectors)`` / ``("error", reason)``
pair, or an exception. Everything downstream only sees ``EmbedOutcome``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from hybrid_search.errors import ProviderError
from hybrid_search.protocols import EmbeddingProvider

logger = logging.getLogger(__name__)

Vector = list[float]
EmbedderFn = Callable[[Sequence[str]], Any]
Embedder = Union[EmbedderFn, EmbeddingProvider]

OK = "ok"
ERROR = "error"


@dataclass
class EmbedOutcome:
    """Normalized result of a batch embedding call.

    ``vectors`` always has one entry per input text, ``None`` where no
    vector is available.
    """

    ok: bool
    vectors: list[Optional[Vector]] = field(default_factory=list)
    reason: Any = None


def resolve_embedder(embedder: Embedder) -> EmbedderFn:
    """Turn a provider object or callable into a callable."""
    embed = getattr(embedder, "embed", None)
    if callable(embed):
        return embed
    if callable(embedder):
        return embedder
    raise ProviderError(f"embedder must be callable or provide embed(), got {embedder!r}")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float, np.number)) and not isinstance(value, (bool, np.bool_))


def is_flat_vector(value: Any) -> bool:
    """True for a non-empty list/tuple whose items are all numbers."""
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(is_number(item) for item in value)
    )


def to_vector(value: Any) -> Optional[Vector]:
    """Coerce one provider entry into a list of floats, or None."""
    if value is None:
        return None
    if isinstance(value, np.ndarray):
        if value.size == 0 or not np.issubdtype(value.dtype, np.number):
            return None
        return [float(v) for v in value.reshape(-1)]
    if is_flat_vector(value):
        return [float(v) for v in value]
    return None


def pad_or_truncate(items: list, expected: int) -> list:
    """Restore ``items`` to exactly ``expected`` entries, padding with None."""
    if len(items) >= expected:
        return items[:expected]
    return items + [None] * (expected - len(items))


def is_wrapped(result: Any) -> bool:
    """True for an ``("ok", payload)`` or ``("error", reason)`` pair."""
    return (
        isinstance(result, tuple)
        and len(result) == 2
        and isinstance(result[0], str)
        and result[0] in (OK, ERROR)
    )


def unwrap(result: Any) -> tuple[bool, Any]:
    """Split a provider return value into ``(ok, payload)``."""
    if isinstance(result, EmbedOutcome):
        return (True, result.vectors) if result.ok else (False, result.reason)
    if is_wrapped(result):
        status, payload = result
        return status == OK, payload
    if result is None:
        return False, "embedder returned None"
    return True, result


def batch_vectors(payload: Any) -> Optional[list[Optional[Vector]]]:
    """Interpret a successful payload as a list of per-text vectors."""
    if isinstance(payload, np.ndarray):
        if payload.ndim == 0:
            return None
        if payload.ndim == 1:
            vector = to_vector(payload)
            return [vector] if vector is not None else []
        return [to_vector(row) for row in payload]
    if isinstance(payload, (list, tuple)):
        if is_flat_vector(payload):
            return [to_vector(payload)]
        return [to_vector(item) for item in payload]
    return None


def run_embedder(embedder: Embedder, texts: Sequence[str]) -> EmbedOutcome:
    """Call ``embedder`` on a batch and normalize whatever comes back.

    Args:
        embedder: Provider object or callable
        texts: Batch of texts; the outcome always holds ``len(texts)`` entries

    Returns:
        ``EmbedOutcome``; on failure ``ok`` is False and every vector is None
    """
    count = len(texts)
    if count == 0:
        return EmbedOutcome(ok=True, vectors=[])

    try:
        result = resolve_embedder(embedder)(list(texts))
    except Exception as e:
        return _failed(e, count)

    ok, payload = unwrap(result)
    if not ok:
        return _failed(payload, count)

    vectors = batch_vectors(payload)
    if vectors is None:
        return _failed("invalid_return", count)

    if len(vectors) != count:
        logger.debug(f"Embedder returned {len(vectors)} vectors for {count} texts")
    return EmbedOutcome(ok=True, vectors=pad_or_truncate(vectors, count))


def extract_query_vector(embedder: Embedder, text: str) -> Optional[Vector]:
    """Embed a single query and pull out exactly one vector.

    Accepts a bare vector, a singleton batch or a wrapped success. Any
    failure yields None, including an exception from the embedder and a
    vector holding NaN or infinity.
    """
    try:
        result = resolve_embedder(embedder)([text])
    except Exception as e:
        logger.warning(f"Query embedding failed: {e!r}")
        return None

    ok, payload = unwrap(result)
    if not ok:
        logger.warning(f"Query embedding failed: {payload!r}")
        return None

    vector = query_vector(payload)
    if vector is not None and not np.isfinite(vector).all():
        logger.warning("Query embedding has non-finite values")
        return None
    return vector


def query_vector(payload: Any) -> Optional[Vector]:
    """The single vector held by a successful query payload, if any."""
    if isinstance(payload, np.ndarray):
        if payload.ndim == 1:
            return to_vector(payload)
        if payload.ndim == 2 and len(payload) > 0:
            return to_vector(payload[0])
        return None
    if isinstance(payload, (list, tuple)) and payload:
        if is_flat_vector(payload):
            return to_vector(payload)
        return to_vector(payload[0])
    return None


def _failed(reason: Any, count: int) -> EmbedOutcome:
    logger.warning(f"Embedding generation failed: {reason!r}")
    return EmbedOutcome(ok=False, vectors=[None] * count, reason=reason)

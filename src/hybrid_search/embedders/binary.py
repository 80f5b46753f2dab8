"""Conversion of dense embeddings into binary bitstrings ("0"/"1" strings).

A bitstring always has exactly the requested dimension. A missing vector
becomes an all-zero string, the "no signal" value; consumers must not read
it as a genuine zero embedding.
"""

import inspect
import logging
from typing import Any, Callable, Optional, Sequence

import numpy as np

from hybrid_search.embedders.adapter import ERROR, is_wrapped, pad_or_truncate, to_vector

logger = logging.getLogger(__name__)

DEFAULT_DIMENSION = 384
DEFAULT_THRESHOLD = 0.0

BinaryEncoder = Callable[..., Any]


def zero_bits(length: int) -> str:
    """Return ``length`` zero bits."""
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    return "0" * length


def pad_to_length(bitstring: str, size: int) -> str:
    """Right-pad with zeros or truncate so the result is exactly ``size`` long."""
    if len(bitstring) >= size:
        return bitstring[:size]
    return bitstring + zero_bits(size - len(bitstring))


def from_embedding(
    embedding: Any,
    size: Optional[int] = None,
    threshold: float = DEFAULT_THRESHOLD,
) -> str:
    """Convert one embedding into a bitstring.

    Bit ``i`` is "1" when ``embedding[i] > threshold``.

    Args:
        embedding: Dense vector (list, tuple, numpy array) or None
        size: Output length; defaults to the vector's own length, or
            ``DEFAULT_DIMENSION`` when there is no vector
        threshold: Values strictly above it map to "1"

    Returns:
        Bitstring of exactly ``size`` characters
    """
    vector = to_vector(embedding)
    if vector is None:
        return zero_bits(DEFAULT_DIMENSION if size is None else size)

    bits = np.asarray(vector, dtype=np.float64) > threshold
    bitstring = "".join("1" if bit else "0" for bit in bits)
    return pad_to_length(bitstring, len(vector) if size is None else size)


def infer_dimension(embeddings: Sequence[Any]) -> Optional[int]:
    """Length of the first usable vector in ``embeddings``, if any."""
    for embedding in embeddings:
        vector = to_vector(embedding)
        if vector is not None:
            return len(vector)
    return None


def from_embeddings(
    embeddings: Sequence[Any],
    size: int = DEFAULT_DIMENSION,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[str]:
    """Convert a batch of embeddings into bitstrings of one common length.

    The length comes from the first non-null vector; ``size`` is only used
    when the batch has no vectors at all.
    """
    dimension = infer_dimension(embeddings) or size
    return [from_embedding(e, size=dimension, threshold=threshold) for e in embeddings]


def ensure_bitstring(value: Any, dimension: int) -> str:
    """Coerce an encoder output entry into a bitstring of ``dimension``."""
    if value is None:
        return zero_bits(dimension)
    if isinstance(value, str):
        return pad_to_length(value, dimension)
    logger.warning(f"Unexpected binary embedding format: {value!r}")
    return zero_bits(dimension)


def run_binary_encoder(
    encoder: BinaryEncoder,
    texts: Sequence[str],
    dense: Sequence[Optional[list[float]]],
    dimension: Optional[int] = None,
) -> list[str]:
    """Call a binary encoder and normalize its output.

    The encoder receives ``(embeddings, texts)`` or just ``(embeddings)``
    depending on how many positional parameters it accepts. Failures and
    unexpected shapes degrade to all-zero bitstrings.

    Args:
        encoder: Callable producing one bitstring per embedding
        texts: Chunk texts, in the same order as ``dense``
        dense: Dense vectors (None where missing)
        dimension: Fallback length when ``dense`` holds no vectors

    Returns:
        Exactly ``len(texts)`` bitstrings of a common length
    """
    count = len(texts)
    dimension = infer_dimension(dense) or dimension or DEFAULT_DIMENSION

    try:
        if _positional_arity(encoder) >= 2:
            result = encoder(list(dense), list(texts))
        else:
            result = encoder(list(dense))
    except Exception as e:
        logger.warning(f"Binary encoder failed: {e!r}")
        return [zero_bits(dimension)] * count

    if is_wrapped(result):
        status, payload = result
        if status == ERROR:
            logger.warning(f"Binary encoder failed: {payload!r}")
            return [zero_bits(dimension)] * count
        result = payload

    if not isinstance(result, (list, tuple)):
        logger.warning(f"Binary encoder failed: unexpected return type {type(result).__name__}")
        return [zero_bits(dimension)] * count

    bitstrings = pad_or_truncate([ensure_bitstring(v, dimension) for v in result], count)
    return [ensure_bitstring(b, dimension) for b in bitstrings]


def _positional_arity(fn: Callable[..., Any]) -> int:
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return 2
    if any(p.kind is p.VAR_POSITIONAL for p in params):
        return 2
    # parameters with defaults (size, threshold) are not fed positionally
    return sum(
        1
        for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    )

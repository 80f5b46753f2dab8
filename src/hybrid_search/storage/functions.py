"""Distance functions registered on every SQLite connection.

All functions are pure and deterministic so SQLite may cache and reorder
them freely. Dense functions take two float32 BLOBs; binary functions take
two '0'/'1' strings of equal length.
"""

import sqlite3
from typing import Callable, Sequence

import numpy as np

VECTOR_DTYPE = np.float32


def encode_vector(values: Sequence[float]) -> bytes:
    """Serialize a dense vector for the ``embedding`` column."""
    return np.asarray(values, dtype=VECTOR_DTYPE).tobytes()


def decode_vector(blob: bytes) -> np.ndarray:
    """Deserialize an ``embedding`` column value."""
    return np.frombuffer(blob, dtype=VECTOR_DTYPE)


def _vectors(a: bytes, b: bytes) -> tuple[np.ndarray, np.ndarray]:
    x = decode_vector(a).astype(np.float64)
    y = decode_vector(b).astype(np.float64)
    if x.shape != y.shape:
        raise ValueError(f"different vector dimensions {x.shape[0]} and {y.shape[0]}")
    return x, y


def cosine_distance(a: bytes, b: bytes) -> float:
    """1 - cosine similarity; a zero vector has similarity 0."""
    x, y = _vectors(a, b)
    norm_x = np.linalg.norm(x)
    norm_y = np.linalg.norm(y)
    if norm_x == 0 or norm_y == 0:
        return 1.0
    return float(1.0 - np.dot(x, y) / (norm_x * norm_y))


def l2_distance(a: bytes, b: bytes) -> float:
    x, y = _vectors(a, b)
    return float(np.linalg.norm(x - y))


def l1_distance(a: bytes, b: bytes) -> float:
    x, y = _vectors(a, b)
    return float(np.abs(x - y).sum())


def negative_inner_product(a: bytes, b: bytes) -> float:
    """Inner product negated, so ascending order ranks the best match first."""
    x, y = _vectors(a, b)
    return float(-np.dot(x, y))


def _bits(a: str, b: str) -> tuple[int, int]:
    if len(a) != len(b):
        raise ValueError(f"bit strings of different lengths {len(a)} and {len(b)}")
    for value in (a, b):
        if not set(value) <= {"0", "1"}:
            raise ValueError(f"not a bit string: {value[:16]!r}")
    return int(a or "0", 2), int(b or "0", 2)


def binary_hamming_distance(a: str, b: str) -> int:
    """Population count of ``a XOR b``."""
    x, y = _bits(a, b)
    return (x ^ y).bit_count()


def binary_jaccard_distance(a: str, b: str) -> float:
    """``1 - popcount(a AND b) / popcount(a OR b)``, 0.0 when both are all zero."""
    x, y = _bits(a, b)
    union = (x | y).bit_count()
    if union == 0:
        return 0.0
    return 1.0 - (x & y).bit_count() / union


DISTANCE_FUNCTIONS: dict[str, Callable] = {
    "cosine_distance": cosine_distance,
    "l2_distance": l2_distance,
    "l1_distance": l1_distance,
    "negative_inner_product": negative_inner_product,
    "binary_hamming_distance": binary_hamming_distance,
    "binary_jaccard_distance": binary_jaccard_distance,
}


def register_functions(conn: sqlite3.Connection) -> None:
    """Make every distance function callable from SQL on ``conn``."""
    for name, fn in DISTANCE_FUNCTIONS.items():
        conn.create_function(name, 2, fn, deterministic=True)

"""Deterministic vectors and embedders for tests."""

from typing import Callable, Sequence

DIM = 384


def unit_vector(position: int, dim: int = DIM) -> list[float]:
    """One-hot dense vector."""
    return [1.0 if index == position else 0.0 for index in range(dim)]


def unit_bits(position: int, dim: int = DIM) -> str:
    """One-hot bit string."""
    return "".join("1" if index == position else "0" for index in range(dim))


def fixed_embedder(vector: list[float]) -> Callable[[Sequence[str]], tuple]:
    """Embedder that answers every query with ``vector``, wrapped as a success."""

    def embed(_texts: Sequence[str]) -> tuple:
        return ("ok", [vector])

    return embed


def length_embedder(texts: Sequence[str]) -> list[list[float]]:
    """One-hot at ``len(text) % DIM``, so equal-length texts embed alike."""
    return [unit_vector(len(text) % DIM) for text in texts]

"""Protocol for dense embedding providers."""

from typing import Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Something that turns a batch of texts into dense vectors.

    The sentence-transformers wrapper is the default implementation. Bare
    callables ``texts -> vectors`` are accepted too, and the loader and
    query router run both through ``hybrid_search.embedders.adapter``.
    """

    @property
    def dimension(self) -> int:
        """Length of each produced vector."""
        ...

    @property
    def model_name(self) -> str:
        """Identifier of the underlying model."""
        ...

    def embed(self, texts: Sequence[str]) -> np.ndarray:
        """Embed ``texts`` in order.

        Returns: array of shape (len(texts), dimension)
        """
        ...

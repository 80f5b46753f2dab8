"""Embedding providers, provider normalization and binary encoding."""

from typing import Sequence

import numpy as np

from hybrid_search.embedders.adapter import (
    EmbedOutcome,
    extract_query_vector,
    run_embedder,
)
from hybrid_search.embedders.binary import from_embedding, from_embeddings, zero_bits

__all__ = [
    "EmbedOutcome",
    "default_embedder",
    "extract_query_vector",
    "from_embedding",
    "from_embeddings",
    "run_embedder",
    "zero_bits",
]


def default_embedder(texts: Sequence[str]) -> np.ndarray:
    """Embed with the shared sentence-transformers model named in settings."""
    # Import here to avoid loading torch unless an embedding is needed
    from hybrid_search.config import get_settings
    from hybrid_search.embedders.sentence_transformer import SentenceTransformerEmbedder

    return SentenceTransformerEmbedder(get_settings().embedding_model).embed(texts)

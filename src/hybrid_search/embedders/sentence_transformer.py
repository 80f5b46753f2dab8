"""SentenceTransformer-based embedding provider."""

import logging
from typing import Sequence

import numpy as np
from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)

# Process-wide model handles, keyed by model name. Published once built;
# concurrent first callers may each build a model and the first to finish wins.
_MODELS: dict[str, SentenceTransformer] = {}


def get_model(model_name: str) -> SentenceTransformer:
    """Return the shared model for ``model_name``, loading it on first use."""
    model = _MODELS.get(model_name)
    if model is not None:
        return model

    logger.info(f"Loading embedding model {model_name}...")
    built = SentenceTransformer(model_name)
    return _MODELS.setdefault(model_name, built)


def reset_models() -> None:
    """Forget every loaded model (the next call reloads)."""
    _MODELS.clear()


class SentenceTransformerEmbedder:
    """Embedding provider using sentence-transformers library.

    Uses thenlper/gte-small by default, a 384-dimension model that
    matches the default dataset vector size.
    """

    DEFAULT_MODEL = "thenlper/gte-small"

    def __init__(self, model_name: str | None = None, normalize: bool = True):
        """Initialize the embedder.

        Args:
            model_name: Name of the sentence-transformers model to use.
                       Defaults to thenlper/gte-small.
            normalize: Scale vectors to unit length, making inner
                       product equal to cosine similarity.
        """
        self._model_name = model_name or self.DEFAULT_MODEL
        self._normalize = normalize

    @property
    def model(self) -> SentenceTransformer:
        """Shared model, loaded on first access."""
        return get_model(self._model_name)

    @property
    def dimension(self) -> int:
        """Return the embedding dimension."""
        return self.model.get_sentence_embedding_dimension()

    @property
    def model_name(self) -> str:
        """Return identifier for the model used."""
        return self._model_name

    def embed(self, texts: Sequence[str]) -> np.ndarray:
        """Generate embeddings for a batch of texts.

        Args:
            texts: List of text strings to embed

        Returns:
            numpy array of shape (len(texts), embedding_dim)
        """
        if not texts:
            return np.array([])

        return self.model.encode(
            list(texts),
            convert_to_numpy=True,
            normalize_embeddings=self._normalize,
        )

    def __call__(self, texts: Sequence[str]) -> np.ndarray:
        return self.embed(texts)

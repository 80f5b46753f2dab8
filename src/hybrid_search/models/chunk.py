"""Core data model for persisted dataset chunks."""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from hybrid_search.errors import ValidationError

BINARY_ALPHABET = frozenset("01")


@dataclass
class DatasetChunk:
    """A chunk of source content stored in the dataset.

    ``(source_path, chunk_index)`` identifies a chunk; re-ingesting the same
    document replaces the record in place.
    """

    source_path: str
    document_title: str
    chunk_index: int
    content: str
    embedding: Optional[list[float]] = None
    embedding_binary: Optional[str] = None
    id: Optional[int] = None
    inserted_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> tuple[str, int]:
        """Upsert key of this chunk."""
        return (self.source_path, self.chunk_index)

    def validate(self, dimension: int) -> None:
        """Check the record before it reaches the database.

        Args:
            dimension: Expected length of ``embedding`` and ``embedding_binary``

        Raises:
            ValidationError: If a required field is missing or malformed
        """
        for name in ("source_path", "document_title", "content"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(name, "can't be blank")

        if isinstance(self.chunk_index, bool) or not isinstance(self.chunk_index, int):
            raise ValidationError("chunk_index", "must be an integer")
        if self.chunk_index < 0:
            raise ValidationError("chunk_index", "must be greater than or equal to 0")

        if self.embedding_binary is not None:
            if len(self.embedding_binary) != dimension:
                raise ValidationError(
                    "embedding_binary", f"should be {dimension} character(s)"
                )
            if not set(self.embedding_binary) <= BINARY_ALPHABET:
                raise ValidationError("embedding_binary", "must contain only '0' and '1'")

        if self.embedding is not None:
            if len(self.embedding) != dimension:
                raise ValidationError(
                    "embedding", f"expected {dimension} dimensions, got {len(self.embedding)}"
                )
            for i, value in enumerate(self.embedding):
                try:
                    finite = math.isfinite(value)
                except TypeError:
                    finite = False
                if not finite:
                    raise ValidationError("embedding", f"non-finite value at index {i}")

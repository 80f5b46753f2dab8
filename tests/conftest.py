"""Shared fixtures for the hybrid search test suite."""

from pathlib import Path
from typing import Callable

import pytest

from hybrid_search.models import DatasetChunk
from hybrid_search.storage import ChunkStore

from tests.helpers import DIM


@pytest.fixture
def store(tmp_path: Path) -> ChunkStore:
    """Initialized store in a temporary database."""
    chunk_store = ChunkStore(tmp_path / "dataset.db", dimension=DIM)
    chunk_store.initialize()
    return chunk_store


@pytest.fixture
def make_chunk() -> Callable[..., DatasetChunk]:
    """Factory for valid chunk records with overridable fields."""

    def factory(**overrides: object) -> DatasetChunk:
        fields: dict = {
            "source_path": "doc.md",
            "document_title": "Doc",
            "chunk_index": 0,
            "content": "Some content",
        }
        fields.update(overrides)
        return DatasetChunk(**fields)

    return factory

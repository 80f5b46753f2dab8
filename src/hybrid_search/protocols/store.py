"""Protocol for chunk stores consumed by the loader and the query router."""

from typing import Protocol, Union, runtime_checkable

from hybrid_search.models import DatasetChunk


@runtime_checkable
class ChunkRepository(Protocol):
    """Keyed chunk persistence with ranked vector and full-text retrieval.

    ``ChunkStore`` implements it on SQLite.
    """

    dimension: int

    def upsert_chunk(self, chunk: DatasetChunk) -> DatasetChunk:
        """Insert or replace the record keyed by (source_path, chunk_index)."""
        ...

    def nearest(
        self,
        field: str,
        function: str,
        value: Union[list[float], str],
        limit: int,
    ) -> list[tuple[DatasetChunk, float]]:
        """Rows with a non-null ``field`` ordered by ``function(field, value)``."""
        ...

    def search_text(self, match: str, limit: int) -> list[tuple[DatasetChunk, float, str]]:
        """BM25-ranked ``(chunk, score, headline)`` triples."""
        ...

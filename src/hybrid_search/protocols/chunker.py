"""Protocol for text chunking strategies."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ChunkingStrategy(Protocol):
    """Splits a document into ordered chunk texts.

    The same text must always produce the same chunks, so that chunk
    indices stay stable across re-ingestion.
    """

    def chunk(self, text: str) -> list[str]:
        ...

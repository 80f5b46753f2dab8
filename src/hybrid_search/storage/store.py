"""SQLite-backed storage for dataset chunks."""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Union

from hybrid_search.errors import StoreError
from hybrid_search.models import DatasetChunk
from hybrid_search.storage.functions import (
    DISTANCE_FUNCTIONS,
    decode_vector,
    encode_vector,
    register_functions,
)
from hybrid_search.storage.schema import SCHEMA

logger = logging.getLogger(__name__)

VECTOR_FIELDS = ("embedding", "embedding_binary")
HEADLINE_START = "<b>"
HEADLINE_STOP = "</b>"
HEADLINE_ELLIPSIS = "..."
HEADLINE_TOKENS = 32

UPSERT_SQL = """
INSERT INTO dataset_chunks
    (source_path, document_title, chunk_index, content,
     embedding, embedding_binary, inserted_at, updated_at)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(source_path, chunk_index) DO UPDATE SET
    document_title = excluded.document_title,
    content = excluded.content,
    embedding = excluded.embedding,
    embedding_binary = excluded.embedding_binary,
    updated_at = excluded.updated_at
"""


class ChunkStore:
    """SQLite-backed storage for dataset chunks.

    Every operation runs on its own connection, so a store can be shared
    between threads. Concurrent upserts of the same key resolve as last
    write wins.
    """

    def __init__(self, path: Union[Path, str], dimension: int = 384):
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self.path = Path(path)
        self.dimension = dimension

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.path, timeout=30)
        conn.row_factory = sqlite3.Row
        register_functions(conn)
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create schema if not exists and pin the vector dimension.

        Raises:
            ValueError: If the database was created with another dimension
        """
        with self.connection() as conn:
            conn.executescript(SCHEMA)

        stored = self.get_metadata("dimension")
        if stored is None:
            self.set_metadata("dimension", str(self.dimension))
        elif int(stored) != self.dimension:
            raise ValueError(
                f"Dimension mismatch: {self.path} holds {stored}-d vectors, "
                f"store configured for {self.dimension}"
            )

    def upsert_chunk(self, chunk: DatasetChunk) -> DatasetChunk:
        """Insert or update a chunk, keyed by source path and chunk index.

        Args:
            chunk: Record to persist

        Returns:
            The stored record, including id and timestamps

        Raises:
            ValidationError: If the record is malformed
            StoreError: If the database rejects the write
        """
        chunk.validate(self.dimension)
        now = datetime.now(timezone.utc).isoformat()
        embedding = encode_vector(chunk.embedding) if chunk.embedding is not None else None

        try:
            with self.connection() as conn:
                conn.execute(
                    UPSERT_SQL,
                    (
                        chunk.source_path,
                        chunk.document_title,
                        chunk.chunk_index,
                        chunk.content,
                        embedding,
                        chunk.embedding_binary,
                        now,
                        now,
                    ),
                )
                row = conn.execute(
                    "SELECT * FROM dataset_chunks WHERE source_path = ? AND chunk_index = ?",
                    chunk.key,
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"upsert of {chunk.source_path}#{chunk.chunk_index} failed: {e}") from e

        return self._to_chunk(row)

    def get_chunk(self, source_path: str, chunk_index: int) -> Optional[DatasetChunk]:
        """Fetch one chunk by its key."""
        with self.connection() as conn:
            row = conn.execute(
                "SELECT * FROM dataset_chunks WHERE source_path = ? AND chunk_index = ?",
                (source_path, chunk_index),
            ).fetchone()
            return self._to_chunk(row) if row else None

    def list_chunks(self, limit: int = 50, source_path: Optional[str] = None) -> list[DatasetChunk]:
        """Chunks ordered by source path then index. Defaults to 50 rows."""
        with self.connection() as conn:
            if source_path is None:
                cursor = conn.execute(
                    """SELECT * FROM dataset_chunks
                       ORDER BY source_path, chunk_index LIMIT ?""",
                    (limit,),
                )
            else:
                cursor = conn.execute(
                    """SELECT * FROM dataset_chunks WHERE source_path = ?
                       ORDER BY chunk_index LIMIT ?""",
                    (source_path, limit),
                )
            return [self._to_chunk(row) for row in cursor]

    def count_chunks(self) -> dict[str, int]:
        """Counts of chunks, documents and chunks carrying each vector kind."""
        with self.connection() as conn:
            row = conn.execute(
                """SELECT COUNT(*) AS chunks,
                          COUNT(DISTINCT source_path) AS documents,
                          COUNT(embedding) AS embeddings,
                          COUNT(embedding_binary) AS binary_embeddings
                   FROM dataset_chunks"""
            ).fetchone()
            return dict(row)

    def nearest(
        self,
        field: str,
        function: str,
        value: Union[list[float], str],
        limit: int,
    ) -> list[tuple[DatasetChunk, float]]:
        """Rank chunks by a registered distance function, smallest value first.

        Rows where ``field`` is NULL are skipped.

        Args:
            field: "embedding" or "embedding_binary"
            function: Name of a function in ``DISTANCE_FUNCTIONS``
            value: Query vector (dense field) or bit string (binary field)
            limit: Maximum rows to return

        Returns:
            ``(chunk, function value)`` pairs in ranking order
        """
        if field not in VECTOR_FIELDS:
            raise ValueError(f"Unknown vector field: {field!r}")
        if function not in DISTANCE_FUNCTIONS:
            raise ValueError(f"Unknown distance function: {function!r}")

        param = encode_vector(value) if field == "embedding" else value

        with self.connection() as conn:
            cursor = conn.execute(
                f"""SELECT *, {function}({field}, ?) AS value
                    FROM dataset_chunks
                    WHERE {field} IS NOT NULL
                    ORDER BY value ASC, id ASC
                    LIMIT ?""",
                (param, limit),
            )
            return [(self._to_chunk(row), row["value"]) for row in cursor]

    def search_text(self, match: str, limit: int) -> list[tuple[DatasetChunk, float, str]]:
        """Full-text search over chunk content ranked by BM25.

        Args:
            match: FTS5 match expression
            limit: Maximum rows to return

        Returns:
            ``(chunk, score, headline)`` triples, best first; higher score is better
        """
        with self.connection() as conn:
            cursor = conn.execute(
                """SELECT c.*,
                          -bm25(dataset_chunks_fts) AS score,
                          snippet(dataset_chunks_fts, 0, ?, ?, ?, ?) AS headline
                   FROM dataset_chunks_fts
                   JOIN dataset_chunks c ON c.id = dataset_chunks_fts.rowid
                   WHERE dataset_chunks_fts MATCH ?
                   ORDER BY score DESC, c.id ASC
                   LIMIT ?""",
                (
                    HEADLINE_START,
                    HEADLINE_STOP,
                    HEADLINE_ELLIPSIS,
                    HEADLINE_TOKENS,
                    match,
                    limit,
                ),
            )
            return [(self._to_chunk(row), row["score"], row["headline"]) for row in cursor]

    def set_metadata(self, key: str, value: str) -> None:
        """Store a metadata key-value pair."""
        with self.connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_metadata(self, key: str) -> Optional[str]:
        """Retrieve a metadata value by key."""
        with self.connection() as conn:
            row = conn.execute(
                "SELECT value FROM metadata WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else None

    @staticmethod
    def _to_chunk(row: sqlite3.Row) -> DatasetChunk:
        embedding = row["embedding"]
        return DatasetChunk(
            id=row["id"],
            source_path=row["source_path"],
            document_title=row["document_title"],
            chunk_index=row["chunk_index"],
            content=row["content"],
            embedding=[float(v) for v in decode_vector(embedding)] if embedding is not None else None,
            embedding_binary=row["embedding_binary"],
            inserted_at=datetime.fromisoformat(row["inserted_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

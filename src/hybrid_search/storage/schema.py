"""Database schema for the chunk dataset."""

SCHEMA = """
-- Chunks table: one row per (source_path, chunk_index)
CREATE TABLE IF NOT EXISTS dataset_chunks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    source_path TEXT NOT NULL,
    document_title TEXT NOT NULL,
    chunk_index INTEGER NOT NULL CHECK (chunk_index >= 0),
    content TEXT NOT NULL,
    embedding BLOB,            -- float32 vector, NULL when no provider vector
    embedding_binary TEXT,     -- '0'/'1' string of the dataset dimension
    inserted_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS dataset_chunks_source_chunk_index
    ON dataset_chunks(source_path, chunk_index);

CREATE INDEX IF NOT EXISTS dataset_chunks_document_title_idx
    ON dataset_chunks(document_title);

-- Full-text index over chunk content, kept in sync by triggers
CREATE VIRTUAL TABLE IF NOT EXISTS dataset_chunks_fts USING fts5(
    content,
    content='dataset_chunks',
    content_rowid='id',
    tokenize='porter unicode61'
);

CREATE TRIGGER IF NOT EXISTS dataset_chunks_ai AFTER INSERT ON dataset_chunks BEGIN
    INSERT INTO dataset_chunks_fts(rowid, content) VALUES (new.id, new.content);
END;

CREATE TRIGGER IF NOT EXISTS dataset_chunks_ad AFTER DELETE ON dataset_chunks BEGIN
    INSERT INTO dataset_chunks_fts(dataset_chunks_fts, rowid, content)
    VALUES ('delete', old.id, old.content);
END;

CREATE TRIGGER IF NOT EXISTS dataset_chunks_au AFTER UPDATE ON dataset_chunks BEGIN
    INSERT INTO dataset_chunks_fts(dataset_chunks_fts, rowid, content)
    VALUES ('delete', old.id, old.content);
    INSERT INTO dataset_chunks_fts(rowid, content) VALUES (new.id, new.content);
END;

-- Metadata table: stores dataset settings such as the vector dimension
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);
"""

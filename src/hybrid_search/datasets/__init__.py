"""Dataset ingestion: loading documents into the chunk store."""

from hybrid_search.datasets.loader import (
    DirectoryLoadResult,
    FileLoadResult,
    load_directory,
    load_file,
)

__all__ = ["DirectoryLoadResult", "FileLoadResult", "load_directory", "load_file"]

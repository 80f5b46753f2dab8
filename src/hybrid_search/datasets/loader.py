"""Loader that reads Markdown files, splits them into chunks, and stores them.

Each chunk becomes a ``DatasetChunk`` row. By default the loader embeds with
the shared sentence-transformers model and derives binary vectors by
thresholding. Keyword arguments replace any step, the paragraph chunker
included.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from hybrid_search.chunkers import ParagraphChunker
from hybrid_search.embedders import default_embedder, from_embeddings
from hybrid_search.embedders.adapter import Embedder, run_embedder
from hybrid_search.embedders.binary import BinaryEncoder, run_binary_encoder
from hybrid_search.errors import HybridSearchError
from hybrid_search.models import DatasetChunk
from hybrid_search.protocols import ChunkRepository, ChunkingStrategy

logger = logging.getLogger(__name__)

DEFAULT_GLOB = "*.md"
DEFAULT_CHUNK_SIZE = 800

TITLE_SEPARATORS = re.compile(r"[_-]")


@dataclass
class FileLoadResult:
    """Outcome of loading one file.

    ``chunks`` counts the records persisted before any failure.
    """

    path: str
    chunks: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DirectoryLoadResult:
    """Aggregate outcome of loading a directory."""

    files: int = 0
    chunks: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def load_directory(
    directory: Union[str, Path],
    *,
    store: ChunkRepository,
    glob: str = DEFAULT_GLOB,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    embedder: Optional[Embedder] = None,
    binary_encoder: Optional[BinaryEncoder] = None,
    chunker: Optional[ChunkingStrategy] = None,
) -> DirectoryLoadResult:
    """Load every file that matches ``glob`` inside ``directory``.

    Files are processed in sorted path order. A failing file does not stop
    the run; its ``(path, reason)`` pair is collected in ``errors`` and the
    chunks of other files stay persisted.

    Args:
        directory: Folder to scan
        store: Destination store
        glob: File pattern relative to ``directory``
        chunk_size: Maximum characters per chunk
        embedder: Dense embedding provider (defaults to the shared model)
        binary_encoder: Callable turning dense vectors into bitstrings
        chunker: Splitting strategy (defaults to paragraphs of ``chunk_size``)

    Returns:
        Files attempted, chunks persisted, and per-file errors
    """
    directory = Path(directory).expanduser().resolve()
    result = DirectoryLoadResult()

    for path in sorted(p for p in directory.glob(glob) if p.is_file()):
        outcome = load_file(
            path,
            store=store,
            base_dir=directory,
            chunk_size=chunk_size,
            embedder=embedder,
            binary_encoder=binary_encoder,
            chunker=chunker,
        )
        result.files += 1
        result.chunks += outcome.chunks
        if outcome.ok:
            logger.info(f"  {outcome.path}: {outcome.chunks} chunks")
        else:
            logger.warning(f"  {outcome.path}: {outcome.error}")
            result.errors.append((str(path), outcome.error))

    return result


def load_file(
    path: Union[str, Path],
    *,
    store: ChunkRepository,
    base_dir: Union[str, Path, None] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    embedder: Optional[Embedder] = None,
    binary_encoder: Optional[BinaryEncoder] = None,
    chunker: Optional[ChunkingStrategy] = None,
) -> FileLoadResult:
    """Load a single Markdown file into the store.

    Upserts run one chunk at a time in index order and stop at the first
    failure; chunks written before it remain.
    """
    path = Path(path)
    base_dir = Path(base_dir) if base_dir is not None else path.parent
    source_path = relative_path(path, base_dir)

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return FileLoadResult(path=source_path, error=f"unreadable: {e}")

    chunks = (chunker or ParagraphChunker(chunk_size)).chunk(content)
    dense = run_embedder(embedder or default_embedder, chunks).vectors
    binary = run_binary_encoder(
        binary_encoder or from_embeddings, chunks, dense, dimension=store.dimension
    )
    title = guess_title(content, path)

    persisted = 0
    for index, text in enumerate(chunks):
        record = DatasetChunk(
            source_path=source_path,
            document_title=title,
            chunk_index=index,
            content=text,
            embedding=dense[index],
            embedding_binary=binary[index],
        )
        try:
            store.upsert_chunk(record)
        except HybridSearchError as e:
            return FileLoadResult(path=source_path, chunks=persisted, error=str(e))
        persisted += 1

    return FileLoadResult(path=source_path, chunks=persisted)


def relative_path(path: Path, base_dir: Path) -> str:
    """Path of ``path`` relative to ``base_dir``, in POSIX form.

    Falls back to the path relative to the working directory, then to the
    path as given.
    """
    resolved = path.expanduser().resolve()
    for base in (base_dir.expanduser().resolve(), Path.cwd()):
        try:
            return resolved.relative_to(base).as_posix()
        except ValueError:
            continue
    return path.as_posix()


def guess_title(content: str, path: Union[str, Path]) -> str:
    """Title from the first Markdown heading, else from the file name."""
    for line in content.splitlines():
        line = line.lstrip()
        if line.startswith("#"):
            heading = line.lstrip("# ").strip()
            if heading:
                return heading

    stem = Path(path).stem
    return titleize(TITLE_SEPARATORS.sub(" ", stem))


def titleize(text: str) -> str:
    return " ".join(word.capitalize() for word in text.split())

"""CLI entry point for hybrid search."""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Optional

from hybrid_search.config import Settings, get_settings
from hybrid_search.datasets import load_directory
from hybrid_search.embedders import default_embedder
from hybrid_search.embedders.adapter import Embedder, extract_query_vector
from hybrid_search.search import METRICS, STRATEGIES, format_results, run
from hybrid_search.storage import ChunkStore

logger = logging.getLogger(__name__)


def open_store(settings: Settings) -> ChunkStore:
    store = ChunkStore(settings.database_path, dimension=settings.dimension)
    store.initialize()
    return store


def load(settings: Settings, directory: str, embedder: Optional[Embedder] = None) -> int:
    """Load matching files from a directory into the store.

    Args:
        settings: Resolved settings (database, glob, chunk size)
        directory: Folder holding the documents
        embedder: Dense embedding provider (defaults to the shared model)

    Returns:
        Process exit code
    """
    if not Path(directory).is_dir():
        logger.error(f"Not a directory: {directory}")
        return 1

    store = open_store(settings)
    logger.info(f"Loading {settings.glob} from {directory} -> {settings.database_path}")

    result = load_directory(
        directory,
        store=store,
        glob=settings.glob,
        chunk_size=settings.chunk_size,
        embedder=embedder,
    )

    if result.ok:
        logger.info(f"Loaded {result.chunks} chunks from {result.files} files.")
        return 0

    logger.error(f"Loaded {result.chunks} chunks from {result.files} files with errors:")
    for path, reason in result.errors:
        logger.error(f"  {path}: {reason}")
    return 1


def search(
    settings: Settings,
    query: str,
    metric: str,
    limit: int,
    embedder: Optional[Embedder] = None,
) -> int:
    """Print ranked results for a query."""
    store = open_store(settings)
    results = run(query, metric, limit=limit, embedder=embedder, store=store)

    if not results:
        print(f"No results found for: {query}")
        return 0

    print(format_results(results))
    return 0


def bench(
    settings: Settings,
    query: str,
    limit: int,
    runs: int,
    embedder: Optional[Embedder] = None,
) -> int:
    """Time every search strategy against the current dataset.

    The query is embedded once up front so vector timings exclude the
    model. Vector strategies are skipped when embedding fails.
    """
    store = open_store(settings)
    if store.count_chunks()["chunks"] == 0:
        logger.error("Dataset is empty. Run `hybrid-search load` first.")
        return 1

    vector = extract_query_vector(embedder or default_embedder, query)
    if vector is None:
        logger.error("Failed to embed query; skipping vector benchmarks.")

    scenarios: dict[str, Callable[[], list]] = {
        "bm25": lambda: run(query, "bm25", limit=limit, store=store),
    }
    if vector is not None:

        def fixed_embedder(_texts: list[str]) -> list[list[float]]:
            return [vector]

        for name in METRICS:
            scenarios[f"vector {name}"] = lambda name=name: run(
                query, name, limit=limit, embedder=fixed_embedder, store=store
            )

    print(f"{'scenario':<20} {'avg ms':>10} {'min ms':>10} {'hits':>6}")
    for name, scenario in scenarios.items():
        timings = []
        hits = 0
        for _ in range(runs):
            start = time.perf_counter()
            hits = len(scenario())
            timings.append((time.perf_counter() - start) * 1000)
        print(f"{name:<20} {sum(timings) / len(timings):>10.2f} {min(timings):>10.2f} {hits:>6}")

    return 0


def info(settings: Settings) -> int:
    """Show information about the dataset."""
    db_path = Path(settings.database_path)
    if not db_path.exists():
        logger.error(f"Database not found: {db_path}")
        return 1

    store = open_store(settings)
    counts = store.count_chunks()

    print(f"Dataset: {db_path.name}")
    print(f"  Size: {db_path.stat().st_size / 1024:.1f} KB")
    print(f"  Dimension: {store.dimension}")
    print(f"")
    print(f"Contents:")
    print(f"  Documents: {counts['documents']}")
    print(f"  Chunks: {counts['chunks']}")
    print(f"  With dense embedding: {counts['embeddings']}")
    print(f"  With binary embedding: {counts['binary_embeddings']}")
    return 0


def serve(settings: Settings, transport: str = "stdio") -> int:
    """Start MCP server for the dataset."""
    from typing import Literal, cast

    # Import here to avoid loading MCP unless needed
    from hybrid_search.server import create_mcp_server

    store = open_store(settings)
    logger.info(f"Serving {settings.database_path} via {transport}")
    mcp = create_mcp_server(store)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hybrid-search",
        description="Hybrid search - vector and full-text search over Markdown chunks",
    )
    parser.add_argument("--db", help="SQLite database path (default: from settings)")
    parser.add_argument("--dimension", type=int, help="Embedding dimension (default: 384)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # load command
    load_parser = subparsers.add_parser("load", help="Load Markdown files into the dataset")
    load_parser.add_argument("directory", help="Folder containing the documents")
    load_parser.add_argument("--glob", help='File pattern (default: "*.md")')
    load_parser.add_argument("--chunk-size", type=int, help="Maximum characters per chunk")

    # search command
    search_parser = subparsers.add_parser("search", help="Search the dataset")
    search_parser.add_argument("query", help="Search text")
    search_parser.add_argument(
        "--metric",
        choices=STRATEGIES,
        default="cosine",
        help="Ranking strategy (default: cosine)",
    )
    search_parser.add_argument("--limit", type=int, help="Maximum results (default: 10)")

    # bench command
    bench_parser = subparsers.add_parser("bench", help="Benchmark every search strategy")
    bench_parser.add_argument("--query", default="phoenix", help="Search text")
    bench_parser.add_argument("--limit", type=int, default=5, help="Results per search")
    bench_parser.add_argument("--runs", type=int, default=20, help="Repetitions per strategy")

    # info command
    subparsers.add_parser("info", help="Show information about the dataset")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start MCP server for the dataset")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    settings = get_settings().with_overrides(
        database_path=args.db,
        dimension=args.dimension,
        glob=getattr(args, "glob", None),
        chunk_size=getattr(args, "chunk_size", None),
    )

    if args.command == "load":
        return load(settings, args.directory)
    elif args.command == "search":
        limit = args.limit if args.limit is not None else settings.default_limit
        return search(settings, args.query, args.metric, limit)
    elif args.command == "bench":
        return bench(settings, args.query, args.limit, max(1, args.runs))
    elif args.command == "info":
        return info(settings)
    elif args.command == "serve":
        return serve(settings, args.transport)
    return 1


if __name__ == "__main__":
    sys.exit(main())

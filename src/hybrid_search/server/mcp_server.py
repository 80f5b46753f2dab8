"""FastMCP server implementation for hybrid search."""

from mcp.server.fastmcp import FastMCP

from hybrid_search import search as strategies
from hybrid_search.embedders.adapter import Embedder
from hybrid_search.storage import ChunkStore


def create_mcp_server(store: ChunkStore, embedder: Embedder | None = None) -> FastMCP:
    """Create an MCP server over a chunk store.

    Design: 1 process = 1 dataset, so every tool reads the same store.

    Args:
        store: Initialized store to query
        embedder: Query embedder (defaults to the shared model)

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="hybrid-search",
    )

    @mcp.tool()
    def search(query: str, metric: str = "cosine", limit: int = 10) -> str:
        """Search the dataset.

        Use "bm25" for keyword matches and a vector metric to find content
        by meaning even when it shares no words with the query.

        Args:
            query: Natural language query or keywords
            metric: One of cosine, l2, l1, dot, hamming, jaccard, bm25
            limit: Maximum number of results to return (default: 10)

        Returns:
            Ranked list of matching chunks with their distance or score
        """
        if metric not in strategies.STRATEGIES:
            return f"Error: unknown metric {metric!r}"

        results = strategies.run(query, metric, limit=limit, embedder=embedder, store=store)
        if not results:
            return f"No results found for: {query}"
        return strategies.format_results(results)

    @mcp.tool()
    def list_chunks(limit: int = 50) -> str:
        """List stored chunks ordered by source path and index.

        Args:
            limit: Maximum number of chunks to list (default: 50)

        Returns:
            One line per chunk with its path, index and document title
        """
        chunks = store.list_chunks(limit=limit)
        if not chunks:
            return "The dataset is empty"

        return "\n".join(
            f"{c.source_path:<50} #{c.chunk_index:<4} {c.document_title}" for c in chunks
        )

    return mcp

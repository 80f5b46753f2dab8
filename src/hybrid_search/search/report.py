"""Plain-text rendering of search results for the CLI and MCP tools."""

SNIPPET_CHARS = 200


def format_results(results: list[dict]) -> str:
    """Render search results as a numbered list."""
    lines = []
    for i, r in enumerate(results, 1):
        chunk = r["chunk"]
        label = "score" if "score" in r else "distance"

        if r.get("headline"):
            text = r["headline"]
        else:
            # Truncate long text snippets
            text = chunk.content[:SNIPPET_CHARS]
            if len(chunk.content) > SNIPPET_CHARS:
                text += "..."

        lines.append(
            f"{i}. [{label} {r[label]:.4f}] {chunk.source_path}#{chunk.chunk_index} "
            f"({chunk.document_title})"
        )
        lines.append(f"   {text.replace(chr(10), ' ')}")
        lines.append("")

    return "\n".join(lines)

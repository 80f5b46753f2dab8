"""MCP server exposing hybrid search."""

from hybrid_search.server.mcp_server import create_mcp_server

__all__ = ["create_mcp_server"]

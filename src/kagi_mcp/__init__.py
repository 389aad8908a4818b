"""Kagi MCP server - Kagi search and summarization tools for AI assistants."""

SERVER_NAME = "kagi-mcp-server"
__version__ = "0.1.0"

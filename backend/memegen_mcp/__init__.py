"""Memegen MCP Server - memegen.link templates and meme URLs as MCP tools."""

__version__ = "1.0.0"

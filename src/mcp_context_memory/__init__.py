"""In-process context memory server: topics of short memory entries exposed as MCP tools."""

__version__ = "1.0.0"

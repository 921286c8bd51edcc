"""Response formatters for MCP tool output."""

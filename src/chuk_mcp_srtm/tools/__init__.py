"""MCP tool modules for chuk-mcp-srtm."""

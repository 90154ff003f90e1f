"""
chuk-mcp-srtm: SRTM3 Point Elevation MCP Server

Locates, downloads, caches and decodes the per-degree SRTM3 .hgt.zip tiles
and answers point elevation queries. Rendered and exported tiles are stored
in chuk-artifacts for downstream analysis.
"""

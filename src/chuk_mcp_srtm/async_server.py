#!/usr/bin/env python3
"""
Async SRTM MCP Server using chuk-mcp-server

Point elevation lookup over the SRTM3 v2.1 dataset. Tiles are downloaded
on first use, cached on disk as .hgt.zip archives and kept decoded in a
bounded in-memory cache.

Storage for rendered tiles is managed through chuk-mcp-server's built-in
artifact store context.
"""

import logging

from chuk_mcp_server import ChukMCPServer

from .constants import ServerConfig
from .core.srtm_manager import SRTMManager
from .tools.discovery import register_discovery_tools
from .tools.elevation import register_elevation_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer(ServerConfig.NAME)

# Provider is built lazily from the environment on first query
manager = SRTMManager()

# Register all tool modules
register_discovery_tools(mcp, manager)
register_elevation_tools(mcp, manager)

# Run the server
if __name__ == "__main__":
    logger.info("Starting SRTM MCP Server...")
    logger.info("Storage: Using chuk-mcp-server artifact store context")
    mcp.run(stdio=True)

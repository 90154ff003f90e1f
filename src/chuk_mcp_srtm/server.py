#!/usr/bin/env python3
"""
SRTM MCP Server - Entry Point

Runs the SRTM3 point elevation tools over stdio (for Claude Desktop) or
HTTP. Tile previews and exports land in a memory or filesystem artifact
store configured from the environment.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from .constants import EnvVar, ServerConfig, SessionProvider, StorageProvider

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

logger = logging.getLogger(__name__)


def _artifact_store_kwargs() -> dict[str, str]:
    """ArtifactStore arguments for CHUK_ARTIFACTS_PROVIDER / CHUK_ARTIFACTS_PATH."""
    provider = os.environ.get(EnvVar.ARTIFACTS_PROVIDER, StorageProvider.MEMORY)
    kwargs = {
        "storage_provider": StorageProvider.MEMORY,
        "session_provider": SessionProvider.MEMORY,
    }

    if provider == StorageProvider.FILESYSTEM:
        artifacts_path = os.environ.get(EnvVar.ARTIFACTS_PATH)
        if not artifacts_path:
            logger.warning(f"{EnvVar.ARTIFACTS_PATH} not set; using memory artifact store")
            return kwargs
        Path(artifacts_path).mkdir(parents=True, exist_ok=True)
        kwargs.update(storage_provider=StorageProvider.FILESYSTEM, bucket=artifacts_path)
    elif provider != StorageProvider.MEMORY:
        logger.warning(f"Unsupported artifact provider '{provider}'; using memory")

    return kwargs


def _init_artifact_store() -> bool:
    """
    Initialize the global artifact store used by preview and export tools.

    Returns:
        True if artifact store was initialized, False otherwise
    """
    kwargs = _artifact_store_kwargs()
    try:
        from chuk_artifacts import ArtifactStore
        from chuk_mcp_server import set_global_artifact_store

        set_global_artifact_store(ArtifactStore(**kwargs))
    except Exception as e:
        logger.error(f"Failed to initialize artifact store: {e}")
        return False

    logger.info(f"Artifact store initialized (provider: {kwargs['storage_provider']})")
    return True


# Import mcp instance and all registered tools from async server
from .async_server import mcp  # noqa: F401, E402


def main() -> None:
    """Main entry point for the MCP server."""
    # Initialize artifact store at startup, not at import time
    _init_artifact_store()

    parser = argparse.ArgumentParser(description=ServerConfig.DESCRIPTION)
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["stdio", "http"],
        default=None,
        help="Transport mode (stdio for Claude Desktop, http for API)",
    )
    parser.add_argument(
        "--host", default="localhost", help="Host for HTTP mode (default: localhost)"
    )
    parser.add_argument("--port", type=int, default=8004, help="Port for HTTP mode (default: 8004)")

    args = parser.parse_args()

    mode = args.mode
    detected = ""
    if mode is None:
        stdio = bool(os.environ.get(EnvVar.MCP_STDIO)) or not sys.stdin.isatty()
        mode = "stdio" if stdio else "http"
        detected = " (auto-detected)"

    if mode == "stdio":
        print(f"SRTM MCP Server starting in STDIO mode{detected}", file=sys.stderr)
        mcp.run(stdio=True)
    else:
        print(
            f"SRTM MCP Server starting in HTTP mode on {args.host}:{args.port}{detected}",
            file=sys.stderr,
        )
        mcp.run(host=args.host, port=args.port, stdio=False)


if __name__ == "__main__":
    main()

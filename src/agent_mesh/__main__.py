"""CLI entry point for agent-mesh.

This module provides the command-line interface for starting the agent-mesh
server. It can be invoked as `agent-mesh` (via the script entry point) or
`python -m agent_mesh`.
"""

import argparse
import logging
import sys

import uvicorn

from agent_mesh import __version__, create_app
from agent_mesh.config import AgentMeshSettings


def main() -> None:
    """Main entry point for the agent-mesh CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="agent-mesh",
        description="Capability-based discovery and task delegation for agent meshes",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"agent-mesh {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via AGENT_MESH_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8766, can be set via AGENT_MESH_PORT)",
    )

    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory holding the registry database (default: ., can be set via AGENT_MESH_DATA_DIR)",
    )

    parser.add_argument(
        "--mesh-base-url",
        type=str,
        default=None,
        help="Public URL agents POST async results to (can be set via AGENT_MESH_MESH_BASE_URL)",
    )

    parser.add_argument(
        "--semantic-search-url",
        type=str,
        default=None,
        help="Remote semantic-search service for discovery (can be set via AGENT_MESH_SEMANTIC_SEARCH_URL)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via AGENT_MESH_LOG_LEVEL)",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload)",
    )

    args = parser.parse_args()

    # Build settings, CLI args override environment variables
    settings_kwargs = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.data_dir is not None:
        settings_kwargs["data_dir"] = args.data_dir
    if args.mesh_base_url is not None:
        settings_kwargs["mesh_base_url"] = args.mesh_base_url
    if args.semantic_search_url is not None:
        settings_kwargs["semantic_search_url"] = args.semantic_search_url
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    settings = AgentMeshSettings(**settings_kwargs)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Create the FastAPI app
    app = create_app(settings=settings)

    # Start uvicorn
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=args.reload,
    )


if __name__ == "__main__":
    sys.exit(main())

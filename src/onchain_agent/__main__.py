"""CLI entry point for onchain-agent.

This module provides the command-line interface for starting the agent
server. It can be invoked as `onchain-agent` (via the script entry point) or
`python -m onchain_agent`.
"""

import argparse
import logging
import sys

import uvicorn

from onchain_agent import __version__, create_app
from onchain_agent.config import AgentSettings


def main() -> None:
    """Main entry point for the onchain-agent CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="onchain-agent",
        description="Tool-using swapping agent backed by MCP tool servers and Ollama",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"onchain-agent {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via ONCHAIN_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 3001, can be set via ONCHAIN_PORT)",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via ONCHAIN_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--tool-server-url",
        type=str,
        default=None,
        help="SSE URL of the tool server; the stdio command is used when unset",
    )

    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Base directory for cache and documentation (default: ., can be set via ONCHAIN_DATA_DIR)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via ONCHAIN_LOG_LEVEL)",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload)",
    )

    args = parser.parse_args()

    # CLI args override environment variables
    settings_kwargs = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.ollama_host is not None:
        settings_kwargs["ollama_host"] = args.ollama_host
    if args.tool_server_url is not None:
        settings_kwargs["tool_server_url"] = args.tool_server_url
    if args.data_dir is not None:
        settings_kwargs["data_dir"] = args.data_dir
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    settings = AgentSettings(**settings_kwargs)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=args.reload,
    )


if __name__ == "__main__":
    sys.exit(main())

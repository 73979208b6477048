"""CLI entry point for shadow-agents.

This module provides the command-line interface for starting the agent server.
It can be invoked as `shadow-agents` (via the script entry point) or
`python -m shadow_agents`.
"""

import argparse
import logging
import sys

import uvicorn

from shadow_agents import __version__, create_app
from shadow_agents.config import ShadowAgentsSettings


def main() -> None:
    """Main entry point for the shadow-agents CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="shadow-agents",
        description="Serve tool-using LLM agents over HTTP",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"shadow-agents {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via SHADOW_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via SHADOW_PORT)",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via SHADOW_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model used by the agents (default: llama3.2:latest, can be set via SHADOW_MODEL)",
    )

    parser.add_argument(
        "--agents-factory",
        type=str,
        default=None,
        help="Agent factory as 'module:function' (can be set via SHADOW_AGENTS_FACTORY)",
    )

    parser.add_argument(
        "--max-turns",
        type=int,
        default=None,
        help="Maximum model round trips per run (default: 10, can be set via SHADOW_MAX_TURNS)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via SHADOW_LOG_LEVEL)",
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
    if args.ollama_host is not None:
        settings_kwargs["ollama_host"] = args.ollama_host
    if args.model is not None:
        settings_kwargs["model"] = args.model
    if args.agents_factory is not None:
        settings_kwargs["agents_factory"] = args.agents_factory
    if args.max_turns is not None:
        settings_kwargs["max_turns"] = args.max_turns
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    settings = ShadowAgentsSettings(**settings_kwargs)

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

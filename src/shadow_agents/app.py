"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shadow_agents import __version__
from shadow_agents.agents.factory import build_agents
from shadow_agents.config import ShadowAgentsSettings
from shadow_agents.ollama import OllamaClient, OllamaModelBinding
from shadow_agents.routers import agents, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The Ollama client is opened at startup and closed on every exit path.
    Agents are built once and stored in app.state for reuse across all
    requests; each request runs its own conversation session.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: ShadowAgentsSettings = app.state.settings
    ollama_client = OllamaClient(
        host=settings.ollama_host, timeout=settings.ollama_timeout
    )
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")
    app.state.ollama_client = ollama_client

    try:
        # Check initial connectivity
        connected = await ollama_client.check_connection()
        if connected:
            logger.info("Successfully connected to Ollama")
        else:
            logger.warning("Could not connect to Ollama - check if server is running")

        binding = OllamaModelBinding(
            client=ollama_client,
            model=settings.model,
            options=settings.model_options,
        )
        app.state.agents = build_agents(binding, settings)

        yield
    finally:
        await ollama_client.close()
        logger.info("Ollama client closed")


def create_app(settings: ShadowAgentsSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI instance with all routers,
    middleware, and configuration applied. It can accept an optional
    settings object for testing or explicit configuration.

    Args:
        settings: Optional ShadowAgentsSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from shadow_agents.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="shadow-agents",
        description="Tool-using LLM agents with hierarchical delegation",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health.router)
    app.include_router(agents.router)

    return app

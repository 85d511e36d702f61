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

from onchain_agent import __version__
from onchain_agent.agents import ConversationOrchestrator
from onchain_agent.config import AgentSettings
from onchain_agent.ollama import OllamaClient
from onchain_agent.routers import agent, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The Ollama client and the agent session are created once at startup.
    An agent that fails to start aborts startup: the server never accepts
    requests without its tool set.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: AgentSettings = app.state.settings
    app.state.ollama_client = OllamaClient(host=settings.ollama_host)
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    session = ConversationOrchestrator(settings, app.state.ollama_client)
    try:
        await session.start()
    except Exception:
        await session.stop()
        await app.state.ollama_client.close()
        raise
    app.state.agent = session

    yield

    await session.stop()
    logger.info("Agent stopped")
    await app.state.ollama_client.close()
    logger.info("Ollama client closed")


def create_app(settings: AgentSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional AgentSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from onchain_agent.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="onchain-agent",
        description="Tool-using swapping agent backed by MCP tool servers and Ollama",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(agent.router)

    return app

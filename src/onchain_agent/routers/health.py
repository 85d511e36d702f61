"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from onchain_agent import __version__
from onchain_agent.models.health import HealthResponse
from onchain_agent.ollama import OllamaClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns the current health status and version of the onchain-agent,
    Ollama connectivity and the agent's model and tools once started.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    ollama_connected = None
    ollama_host = None

    if hasattr(request.app.state, "ollama_client"):
        ollama_client: OllamaClient = request.app.state.ollama_client
        ollama_host = ollama_client.host

        try:
            ollama_connected = await ollama_client.check_connection()
            logger.debug(f"Ollama connectivity check: {ollama_connected}")
        except Exception as e:
            logger.warning(f"Ollama connectivity check failed: {e}")
            ollama_connected = False

    model = None
    tools: list[str] = []
    agent = getattr(request.app.state, "agent", None)
    if agent is not None:
        model = agent.model
        tools = sorted(agent.tools or {})

    return HealthResponse(
        status="ok",
        version=__version__,
        ollama_connected=ollama_connected,
        ollama_host=ollama_host,
        model=model,
        tools=tools,
    )

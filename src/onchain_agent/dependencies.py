"""Dependency injection providers for FastAPI endpoints."""

from functools import lru_cache

from fastapi import HTTPException, Request

from onchain_agent.agents import ConversationOrchestrator
from onchain_agent.config import AgentSettings


@lru_cache
def get_settings() -> AgentSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the ONCHAIN_ prefix.

    Returns:
        AgentSettings: The application configuration settings.
    """
    return AgentSettings()


def get_agent(request: Request) -> ConversationOrchestrator:
    """Get the agent session from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        ConversationOrchestrator: The started agent session.

    Raises:
        HTTPException: If the agent is not initialized (503 Service Unavailable).
    """
    agent = getattr(request.app.state, "agent", None)
    if agent is None:
        raise HTTPException(
            status_code=503,
            detail={
                "error": {
                    "code": "agent_not_initialized",
                    "message": "Agent not initialized",
                    "details": {},
                }
            },
        )
    return agent

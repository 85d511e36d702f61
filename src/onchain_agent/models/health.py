"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of onchain-agent.
        ollama_connected: Whether Ollama is reachable, None if no client.
        ollama_host: The Ollama host URL.
        model: Model selected for the agent session.
        tools: Names of the tools available to the agent.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of onchain-agent")
    ollama_connected: bool | None = Field(
        default=None,
        description="Whether Ollama is connected",
    )
    ollama_host: str | None = Field(
        default=None,
        description="Ollama host URL",
    )
    model: str | None = Field(default=None, description="Selected model")
    tools: list[str] = Field(default_factory=list, description="Available tools")

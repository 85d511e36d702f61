"""Pydantic models for API request and response schemas."""

from onchain_agent.models.agent import AgentTaskRequest, AgentTaskResponse
from onchain_agent.models.health import HealthResponse

__all__ = ["AgentTaskRequest", "AgentTaskResponse", "HealthResponse"]

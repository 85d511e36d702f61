"""FastAPI routers for API endpoints."""

from onchain_agent.routers import agent, health

__all__ = ["agent", "health"]

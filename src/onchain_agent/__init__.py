"""onchain-agent: Tool-using swapping agent served over HTTP.

This package provides the agent orchestration engine (capability store,
MCP protocol bridge, reasoning loop and task-state handling) and a thin
FastAPI surface to drive it.
"""

__version__ = "0.1.0"

from onchain_agent.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]

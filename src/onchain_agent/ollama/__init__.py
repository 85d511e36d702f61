"""Ollama client wrapper and model selection.

This package provides the async client used as the reasoning backend and
the ordered model-candidate selection performed at session construction.
"""

from onchain_agent.ollama.client import OllamaClient
from onchain_agent.ollama.selection import select_model
from onchain_agent.ollama.types import ChatResult, ModelInfo, ToolCallRequest

__all__ = ["OllamaClient", "ModelInfo", "ChatResult", "ToolCallRequest", "select_model"]

"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient used as
the reasoning backend. The client is created once at startup and reused by
the orchestrator and by tools that need a model answer.
"""

import logging
from typing import Any

import ollama

from onchain_agent.ollama.types import ChatResult, ModelInfo

logger = logging.getLogger(__name__)


class OllamaClient:
    """Async client for interacting with Ollama API.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def get_model_info(self, model_name: str) -> ModelInfo | None:
        """Get detailed information about a specific model.

        Args:
            model_name: Name of the model to query

        Returns:
            ModelInfo | None: Model information if found, None if not found

        Raises:
            Exception: If the Ollama API request fails (except for 404)
        """
        try:
            show_response = await self._client.show(model_name)
        except ollama.ResponseError as e:
            if e.status_code == 404:
                logger.debug(f"Model not found: {model_name}")
                return None
            logger.error(f"Ollama API error for model {model_name}: {e}")
            raise

        model_info = ModelInfo.from_ollama_model(show_response, name=model_name)
        logger.debug(f"Retrieved info for model: {model_name}")
        return model_info

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        options: dict[str, Any] | None = None,
    ) -> ChatResult:
        """Run one non-streaming chat step.

        Tool calls are only reported by the model, never executed here.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format
            tools: Optional tool schemas in Ollama function format
            options: Optional model parameters (temperature, etc.)

        Returns:
            ChatResult: Assistant content, requested tool calls and token counts

        Raises:
            Exception: If the Ollama API request fails
        """
        logger.debug(
            f"Chat step with model {model}: {len(messages)} messages, "
            f"{len(tools or [])} tools"
        )
        try:
            response = await self._client.chat(
                model=model,
                messages=messages,
                tools=tools or None,
                stream=False,
                options=options,
            )
        except Exception as e:
            logger.error(f"Chat request failed: {e}")
            raise

        result = ChatResult.from_ollama_response(response)
        logger.debug(
            f"Chat step finished: done_reason={result.done_reason}, "
            f"tool_calls={[call.name for call in result.tool_calls]}"
        )
        return result

    async def close(self) -> None:
        """Close the client and clean up resources.

        ollama.AsyncClient uses httpx internally which handles cleanup.
        """
        logger.debug("OllamaClient closed")

"""Type definitions for Ollama integration.

This module contains dataclasses used for representing Ollama models and
the result of a single (non-streaming) chat call with tool support.
"""

from dataclasses import dataclass, field
from typing import Any


def _get_value(obj: Any, key: str, default: Any = None) -> Any:
    # Ollama responses are pydantic objects, tests and older clients use dicts
    if isinstance(obj, dict):
        return obj.get(key, default)
    if hasattr(obj, key):
        return getattr(obj, key, default)
    return default


@dataclass
class ModelInfo:
    """Information about an Ollama model.

    Attributes:
        name: Full model name (e.g., "qwen3:14b")
        family: Model family (e.g., "qwen3")
        parameter_size: Human-readable parameter count (e.g., "14.8B")
        capabilities: List of model capabilities (e.g., ["completion", "tools"])
        context_length: Maximum context window size in tokens
    """

    name: str
    family: str
    parameter_size: str
    capabilities: list[str]
    context_length: int

    @staticmethod
    def from_ollama_model(model_data: Any, name: str) -> "ModelInfo":
        """Create a ModelInfo instance from an Ollama show response.

        Args:
            model_data: Raw model data from Ollama API (show response)
            name: The model name that was queried

        Returns:
            ModelInfo: Parsed model information
        """
        details = _get_value(model_data, "details", {}) or {}
        family = _get_value(details, "family", "unknown") or "unknown"
        parameter_size = _get_value(details, "parameter_size", "unknown") or "unknown"

        # Default to completion if not specified
        capabilities = _get_value(model_data, "capabilities", None) or ["completion"]

        modelinfo = _get_value(model_data, "modelinfo", {}) or {}
        context_length = 2048
        context_key = f"{family}.context_length"
        if isinstance(modelinfo, dict) and context_key in modelinfo:
            context_length = int(modelinfo[context_key])
        elif isinstance(modelinfo, dict) and "context_length" in modelinfo:
            context_length = int(modelinfo["context_length"])

        return ModelInfo(
            name=name,
            family=family,
            parameter_size=parameter_size,
            capabilities=list(capabilities),
            context_length=context_length,
        )


@dataclass
class ToolCallRequest:
    """A single tool invocation requested by the model."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def to_ollama(self) -> dict[str, Any]:
        return {"function": {"name": self.name, "arguments": self.arguments}}


@dataclass
class ChatResult:
    """Result of one non-streaming chat call.

    Attributes:
        content: Text content of the assistant message (may be empty)
        tool_calls: Tool invocations requested in this step
        done_reason: Ollama's finish reason (e.g. "stop", "length")
        eval_count: Number of tokens generated
        prompt_eval_count: Number of tokens in the prompt
    """

    content: str = ""
    tool_calls: list[ToolCallRequest] = field(default_factory=list)
    done_reason: str | None = None
    eval_count: int | None = None
    prompt_eval_count: int | None = None

    @staticmethod
    def from_ollama_response(response: Any) -> "ChatResult":
        """Build a ChatResult from an Ollama chat response (object or dict)."""
        message = _get_value(response, "message", {}) or {}
        raw_calls = _get_value(message, "tool_calls", None) or []

        tool_calls: list[ToolCallRequest] = []
        for raw_call in raw_calls:
            function = _get_value(raw_call, "function", {}) or {}
            name = _get_value(function, "name", "")
            if not name:
                continue
            arguments = _get_value(function, "arguments", {}) or {}
            tool_calls.append(ToolCallRequest(name=name, arguments=dict(arguments)))

        return ChatResult(
            content=_get_value(message, "content", "") or "",
            tool_calls=tool_calls,
            done_reason=_get_value(response, "done_reason", None),
            eval_count=_get_value(response, "eval_count", None),
            prompt_eval_count=_get_value(response, "prompt_eval_count", None),
        )

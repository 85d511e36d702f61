"""Data types for the conversation history.

This module defines the role-tagged messages appended by the orchestrator
during a session and their conversion to the Ollama chat format.
"""

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class UserMessage:
    """A message from the user."""

    role: str = "user"
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'user'."""
        self.role = "user"


@dataclass
class SystemMessage:
    """A system prompt message."""

    role: str = "system"
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'system'."""
        self.role = "system"


@dataclass
class AssistantMessage:
    """A response from the LLM assistant."""

    role: str = "assistant"
    content: str = ""
    tool_calls: list[dict[str, Any]] | None = None

    def __post_init__(self) -> None:
        """Validate role is always 'assistant'."""
        self.role = "assistant"


@dataclass
class ToolMessage:
    """A tool execution result.

    ``result`` holds the raw payload returned by the callable (a Task or a
    ToolOutcome); ``content`` is its serialized form sent back to the model.
    """

    role: str = "tool"
    tool_name: str = ""
    content: str = ""
    result: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate role is always 'tool'."""
        self.role = "tool"


# Union type for all message types
Message = UserMessage | SystemMessage | AssistantMessage | ToolMessage


def serialize_result(result: Any) -> str:
    """Serialize a tool payload for the model."""
    if hasattr(result, "model_dump_json"):
        return result.model_dump_json(exclude_none=True)
    if isinstance(result, str):
        return result
    return json.dumps(result, default=str)


def to_ollama_messages(messages: list[Message]) -> list[dict[str, Any]]:
    """Convert history messages to Ollama API format.

    Args:
        messages: List of message objects

    Returns:
        List of message dicts in Ollama format: [{"role": "...", "content": "..."}, ...]
    """
    ollama_messages = []

    for msg in messages:
        ollama_msg: dict[str, Any] = {
            "role": msg.role,
            "content": msg.content,
        }

        if isinstance(msg, AssistantMessage) and msg.tool_calls:
            ollama_msg["tool_calls"] = msg.tool_calls

        if isinstance(msg, ToolMessage):
            ollama_msg["tool_name"] = msg.tool_name

        ollama_messages.append(ollama_msg)

    return ollama_messages

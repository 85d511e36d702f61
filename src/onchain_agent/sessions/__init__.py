"""Conversation message types owned by the orchestrator."""

from onchain_agent.sessions.types import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolMessage,
    UserMessage,
    to_ollama_messages,
)

__all__ = [
    "AssistantMessage",
    "Message",
    "SystemMessage",
    "ToolMessage",
    "UserMessage",
    "to_ollama_messages",
]

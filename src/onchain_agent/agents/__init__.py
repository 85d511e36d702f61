"""Conversation orchestration for the swapping agent.

This package provides the session object that owns the conversation
history, drives the reasoning loop and turns its outcome into a Task.
"""

from onchain_agent.agents.orchestrator import ConversationOrchestrator

__all__ = ["ConversationOrchestrator"]

"""Bounded multi-step reasoning loop with tool dispatch."""

from onchain_agent.reasoning.engine import ReasoningEngine, ReasoningResult

__all__ = ["ReasoningEngine", "ReasoningResult"]

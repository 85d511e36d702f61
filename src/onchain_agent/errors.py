"""Exception types raised by the agent orchestration engine.

Initialization faults are fatal to a session. Turn-level faults are raised
to the caller after being recorded in the conversation history. Tool-level
faults never appear here as raised exceptions past the bridge; they are
captured as ToolOutcome data.
"""

from typing import Any


class AgentError(Exception):
    """Base class for all agent errors."""


class AgentInitializationError(AgentError):
    """The session could not be started."""


class CapabilityError(AgentInitializationError):
    """Capabilities could not be fetched from the tool server."""


class CapabilityValidationError(CapabilityError):
    """A capabilities payload did not match the expected schema.

    Attributes:
        errors: The pydantic validation diagnostic
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class ModelSelectionError(AgentInitializationError):
    """No configured model candidate passed the health check."""


class NotInitializedError(AgentError):
    """A turn was requested before start() completed."""


class NoResultError(AgentError):
    """The reasoning loop produced neither a tool result nor text."""


class UnknownTokenError(AgentError):
    """A token symbol is not present in the capability table."""

    def __init__(self, symbol: str, available: list[str] | None = None):
        self.symbol = symbol
        self.available = available or []
        message = f"Unknown token: {symbol}."
        if self.available:
            message += f" Supported tokens: {', '.join(self.available)}"
        super().__init__(message)

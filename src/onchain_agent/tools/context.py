"""Per-session state handed to domain tools."""

from dataclasses import dataclass

from onchain_agent.bridge.client import DEFAULT_TIMEOUT_SECONDS, McpBridge
from onchain_agent.capabilities.types import CapabilityTable
from onchain_agent.ollama.client import OllamaClient


@dataclass
class ToolContext:
    """What a tool needs from the session that owns it.

    ``user_address`` is updated by the orchestrator at the start of each turn.
    ``timeout`` bounds model calls made by tools, in seconds.
    """

    bridge: McpBridge
    capabilities: CapabilityTable
    ollama_client: OllamaClient
    model: str
    user_address: str | None = None
    documentation: str = ""
    timeout: float = DEFAULT_TIMEOUT_SECONDS

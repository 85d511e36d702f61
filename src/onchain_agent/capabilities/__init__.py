"""Capability discovery, validation, caching and token indexing."""

from onchain_agent.capabilities.store import CapabilityStore
from onchain_agent.capabilities.types import (
    CapabilityTable,
    GetCapabilitiesResponse,
    TokenEntry,
)

__all__ = ["CapabilityStore", "CapabilityTable", "GetCapabilitiesResponse", "TokenEntry"]

"""Capability store with an optional on-disk cache.

The store asks the tool server what it can do, validates the answer and
indexes it as a CapabilityTable. A cached file is trusted only if it
validates; otherwise a live fetch is made.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from onchain_agent.bridge.client import McpBridge
from onchain_agent.bridge.payload import parse_tool_response_payload
from onchain_agent.capabilities.types import CapabilityTable, GetCapabilitiesResponse
from onchain_agent.errors import CapabilityError, CapabilityValidationError

logger = logging.getLogger(__name__)

CAPABILITIES_TOOL = "getCapabilities"


def _preview(data: Any, lines: int = 10) -> str:
    dumped = json.dumps(data, indent=2, default=str).split("\n")
    suffix = "\n... (truncated)" if len(dumped) > lines else ""
    return "\n".join(dumped[:lines]) + suffix


class CapabilityStore:
    """Loads and indexes the capabilities of one tool server.

    Attributes:
        bridge: Connected bridge used for live fetches
        cache_path: Location of the cache artifact
        capability_type: Capability family to request (e.g. "SWAP")
        table: The current table; empty until ``load`` runs
    """

    def __init__(
        self,
        bridge: McpBridge,
        cache_path: Path,
        capability_type: str = "SWAP",
    ) -> None:
        self.bridge = bridge
        self.cache_path = cache_path
        self.capability_type = capability_type
        self.table = CapabilityTable()

    async def load(self, cache_enabled: bool) -> CapabilityTable:
        """Load capabilities from cache if allowed and valid, else fetch live.

        Args:
            cache_enabled: Whether the cache file may be read

        Returns:
            The new capability table

        Raises:
            CapabilityError: If the live fetch fails or does not validate
        """
        response = self._read_cache() if cache_enabled else None
        if response is None:
            logger.info(f"Fetching {self.capability_type} capabilities via MCP...")
            response = await self.fetch_live()

        if response.capabilities is None:
            logger.warning(
                "No capabilities array found; continuing with an empty token table"
            )

        self.table = CapabilityTable.from_response(response)
        logger.info(f"Available tokens loaded: {self.table.available_symbols}")
        return self.table

    def _read_cache(self) -> GetCapabilitiesResponse | None:
        if not self.cache_path.exists():
            logger.info("Capability cache not found")
            return None

        logger.info(f"Loading capabilities from cache: {self.cache_path}")
        try:
            with open(self.cache_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            # ValueError covers JSONDecodeError and UnicodeDecodeError
            logger.warning(f"Error reading or parsing cache file: {e}")
            return None

        try:
            response = GetCapabilitiesResponse.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Cached capabilities validation failed: {e}")
            logger.debug(f"Data that failed validation: {_preview(data)}")
            return None

        logger.info("Cached capabilities loaded and validated successfully")
        return response

    async def fetch_live(self) -> GetCapabilitiesResponse:
        """Fetch capabilities from the tool server and refresh the cache.

        Cache write failures are logged; the fetched data is still returned.

        Raises:
            CapabilityError: If the remote call fails
            CapabilityValidationError: If the payload does not validate
        """
        try:
            result = await self.bridge.call_tool(
                CAPABILITIES_TOOL, {"type": self.capability_type}
            )
        except Exception as e:
            logger.error(f"Error fetching capabilities via MCP: {e}")
            raise CapabilityError(
                f"Failed to fetch capabilities from MCP server: {e}"
            ) from e

        data = parse_tool_response_payload(result)
        logger.debug(f"Raw capabilities payload:\n{_preview(data)}")

        try:
            response = GetCapabilitiesResponse.model_validate(data)
        except ValidationError as e:
            logger.error(f"Fetched capabilities validation failed: {e}")
            raise CapabilityValidationError(
                f"Fetched capabilities failed validation: {e}",
                errors=e.errors(include_url=False),
            ) from e

        self._write_cache(response)
        return response

    def _write_cache(self, response: GetCapabilitiesResponse) -> None:
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_path, "w", encoding="utf-8") as f:
                json.dump(response.to_wire(), f, indent=2)
            logger.info(f"Capabilities cached to {self.cache_path}")
        except OSError as e:
            logger.error(f"Failed to cache capabilities: {e}")

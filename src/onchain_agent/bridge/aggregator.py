"""Fan-out discovery across several remote tool servers."""

import asyncio
import logging

from onchain_agent.bridge.client import DEFAULT_TIMEOUT_SECONDS, McpBridge
from onchain_agent.bridge.types import CallableTool

logger = logging.getLogger(__name__)

NAME_SEPARATOR = "-"
ALL_SERVERS = "all"


def resolve_endpoint(
    server_id: str,
    server_urls: dict[str, str],
    override_url: str | None = None,
) -> str | None:
    """Resolve a server's URL; a configured override always wins."""
    return override_url or server_urls.get(server_id) or None


class ToolAggregator:
    """Collects callable tools from a configured set of servers.

    One bridge is kept per reachable server so its tools stay callable;
    ``close`` releases all of them.
    """

    def __init__(
        self,
        server_urls: dict[str, str],
        override_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.server_urls = dict(server_urls)
        self.override_url = override_url
        self.timeout = timeout
        self._bridges: list[McpBridge] = []

    def _create_bridge(self, server_id: str) -> McpBridge:
        return McpBridge(label=server_id, timeout=self.timeout)

    async def _load_server(self, server_id: str) -> dict[str, CallableTool]:
        url = resolve_endpoint(server_id, self.server_urls, self.override_url)
        if not url:
            logger.warning(f"No server URL configured for agent {server_id!r}")
            return {}

        bridge = self._create_bridge(server_id)
        try:
            if not await bridge.connect(url):
                return {}
            tools = await bridge.load_callables()
        except Exception as e:
            logger.error(f"Failed to load tools from {server_id!r}: {e}")
            await bridge.close()
            return {}

        self._bridges.append(bridge)
        return tools

    async def aggregate(self, selection: str | None = None) -> dict[str, CallableTool]:
        """Load tools for the selected server, or all servers.

        Args:
            selection: A server id, or None / "all" to fan out

        Returns:
            Tools keyed by name. Fan-out prefixes each name with its server id.
        """
        if selection and selection != ALL_SERVERS:
            logger.info(f"Loading single agent: {selection}")
            tools = await self._load_server(selection)
            logger.info(f"Single agent tools loaded: {list(tools)}")
            return tools

        server_ids = list(self.server_urls)
        logger.info(f"Loading tools from all agents: {server_ids}")
        results = await asyncio.gather(*(self._load_server(sid) for sid in server_ids))

        merged: dict[str, CallableTool] = {}
        for server_id, tools in zip(server_ids, results):
            for tool_name, tool in tools.items():
                namespaced = f"{server_id}{NAME_SEPARATOR}{tool_name}"
                merged[namespaced] = tool.renamed(namespaced)

        logger.info(f"Final combined tools: {list(merged)}")
        return merged

    async def close(self) -> None:
        bridges, self._bridges = self._bridges, []
        for bridge in bridges:
            await bridge.close()

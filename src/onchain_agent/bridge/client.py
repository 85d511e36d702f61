"""Connection to one remote tool server over the Model Context Protocol.

The bridge owns its connection exclusively. anyio cancel scopes must be
exited in the task that entered them, so the transport and session contexts
live in one owner task per connection. Connection and discovery
failures degrade to an empty tool set; invocation failures are returned as
ToolOutcome errors. Nothing raised by the remote side escapes ``invoke``.
"""

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import Any

from mcp import ClientSession, StdioServerParameters
from mcp.client.sse import sse_client
from mcp.client.stdio import stdio_client

from onchain_agent.bridge.payload import response_text
from onchain_agent.bridge.schema import convert_input_schema
from onchain_agent.bridge.types import CallableTool, RemoteToolDescriptor, ToolOutcome

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0


class McpBridge:
    """Bridge between one MCP tool server and local callable tools.

    Attributes:
        label: Name used in log messages
        timeout: Seconds allowed for every remote call
    """

    def __init__(self, label: str = "tool-server", timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.label = label
        self.timeout = timeout
        self._owner: asyncio.Task | None = None
        self._closing = asyncio.Event()
        self._session: ClientSession | None = None

    @property
    def connected(self) -> bool:
        return self._session is not None

    async def connect(self, endpoint: str | None) -> bool:
        """Connect to a server exposing an SSE endpoint.

        Args:
            endpoint: The server URL

        Returns:
            True if the session is initialized, False otherwise
        """
        if not endpoint:
            logger.error(f"[{self.label}] No server URL provided, skipping connection")
            return False

        logger.info(f"[{self.label}] Connecting to MCP server at {endpoint}")
        return await self._open(sse_client(endpoint))

    async def connect_stdio(
        self,
        command: str,
        args: list[str] | None = None,
        env: dict[str, str] | None = None,
    ) -> bool:
        """Launch a server as a subprocess and connect over stdio.

        Args:
            command: Executable to launch
            args: Command arguments
            env: Environment for the subprocess

        Returns:
            True if the session is initialized, False otherwise
        """
        logger.info(f"[{self.label}] Launching MCP server: {command} {' '.join(args or [])}")
        params = StdioServerParameters(command=command, args=args or [], env=env)
        return await self._open(stdio_client(params))

    async def _open(self, transport: Any) -> bool:
        if self._session is not None:
            logger.debug(f"[{self.label}] Already connected")
            return True

        ready: asyncio.Future = asyncio.get_running_loop().create_future()
        self._closing = asyncio.Event()
        owner = asyncio.create_task(self._own_connection(transport, ready))
        try:
            session = await ready
        except Exception as e:
            logger.error(f"[{self.label}] Error connecting MCP client: {e}")
            await owner
            return False

        self._owner = owner
        self._session = session
        logger.info(f"[{self.label}] MCP client connected")
        return True

    async def _own_connection(self, transport: Any, ready: asyncio.Future) -> None:
        """Hold the connection open until ``close`` is requested."""
        try:
            async with AsyncExitStack() as stack:
                read_stream, write_stream = await stack.enter_async_context(transport)
                session = await stack.enter_async_context(
                    ClientSession(read_stream, write_stream)
                )
                await asyncio.wait_for(session.initialize(), timeout=self.timeout)
                ready.set_result(session)
                await self._closing.wait()
        except Exception as e:
            if not ready.done():
                ready.set_exception(e)
                return
            logger.error(f"[{self.label}] Error closing MCP client: {e}")
        finally:
            if not ready.done():
                ready.cancel()

    async def discover_tools(self) -> list[RemoteToolDescriptor]:
        """List the server's tools.

        Returns:
            Tool descriptors, or an empty list if not connected or on failure
        """
        if self._session is None:
            logger.warning(f"[{self.label}] Cannot discover tools: not connected")
            return []

        try:
            response = await asyncio.wait_for(
                self._session.list_tools(), timeout=self.timeout
            )
        except Exception as e:
            logger.error(f"[{self.label}] Error discovering tools: {e}")
            return []

        descriptors = [RemoteToolDescriptor.from_mcp_tool(tool) for tool in response.tools]
        logger.info(
            f"[{self.label}] Tools discovered: {[descriptor.name for descriptor in descriptors]}"
        )
        return descriptors

    def to_callable(self, descriptor: RemoteToolDescriptor) -> CallableTool:
        """Wrap a remote tool as a local callable."""

        async def invoke(arguments: dict[str, Any]) -> ToolOutcome:
            return await self.invoke(descriptor.name, arguments)

        return CallableTool(
            name=descriptor.name,
            description=descriptor.description,
            parameters=convert_input_schema(descriptor.input_schema, descriptor.name),
            invoke=invoke,
        )

    async def load_callables(self) -> dict[str, CallableTool]:
        """Discover tools and convert each one into a callable.

        A tool whose conversion fails is skipped.
        """
        callables: dict[str, CallableTool] = {}
        for descriptor in await self.discover_tools():
            try:
                callables[descriptor.name] = self.to_callable(descriptor)
            except Exception as e:
                logger.error(f"[{self.label}] Error creating callable for {descriptor.name}: {e}")
        return callables

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """Call a remote tool and return the raw result.

        Raises:
            ConnectionError: If the bridge is not connected
            TimeoutError: If the call exceeds the timeout
            Exception: Any protocol or transport failure
        """
        if self._session is None:
            raise ConnectionError(f"MCP client for {self.label} is not connected")

        logger.debug(f"[{self.label}] Calling tool {name} with {arguments}")
        return await asyncio.wait_for(
            self._session.call_tool(name, arguments), timeout=self.timeout
        )

    async def invoke(self, name: str, arguments: dict[str, Any]) -> ToolOutcome:
        """Call a remote tool, normalizing the result into a ToolOutcome."""
        try:
            result = await self.call_tool(name, arguments)
        except TimeoutError:
            logger.error(f"[{self.label}] Tool {name} timed out after {self.timeout}s")
            return ToolOutcome.failure(
                error=f"Timed out after {self.timeout} seconds",
                message=f"Failed to execute {name}. Please try again later.",
            )
        except Exception as e:
            logger.error(f"[{self.label}] Error executing tool {name}: {e}")
            return ToolOutcome.failure(
                error=str(e),
                message=f"Failed to execute {name}. Please try again later.",
            )

        if getattr(result, "isError", False):
            error_text = response_text(result) or "Remote tool reported an error"
            logger.warning(f"[{self.label}] Tool {name} returned an error: {error_text}")
            return ToolOutcome.failure(
                error=error_text,
                message=f"Failed to execute {name}. Please try again later.",
            )

        logger.info(f"[{self.label}] Tool executed successfully: {name}")
        payload = (
            result.model_dump(mode="json", exclude_none=True)
            if hasattr(result, "model_dump")
            else result
        )
        return ToolOutcome.completed(payload)

    async def close(self) -> None:
        """Release the connection. Closing twice is a no-op."""
        owner = self._owner
        self._owner = None
        self._session = None
        if owner is None:
            return

        logger.info(f"[{self.label}] Closing MCP client...")
        self._closing.set()
        await owner
        logger.info(f"[{self.label}] MCP client closed.")

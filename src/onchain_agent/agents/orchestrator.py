"""Conversation orchestrator.

The orchestrator is the session: it owns the conversation history, the
capability store and the bridge to the tool server, and turns each user
message into exactly one Task.

Result policy: the authoritative result of a turn is the last tool result
appended during that turn's loop. Earlier tool results in the same turn
stay in history but never become the Task. When no tool ran, a plain text
answer is returned as a completed Task without resetting history.
"""

import asyncio
import logging
import os

from onchain_agent.agents.prompts import SWAPPING_SYSTEM_PROMPT
from onchain_agent.bridge.aggregator import ToolAggregator
from onchain_agent.bridge.client import McpBridge
from onchain_agent.bridge.types import CallableTool
from onchain_agent.capabilities.store import CapabilityStore
from onchain_agent.config import AgentSettings
from onchain_agent.errors import (
    AgentInitializationError,
    NoResultError,
    NotInitializedError,
)
from onchain_agent.ollama.client import OllamaClient
from onchain_agent.ollama.selection import ModelCheck, select_model, tool_capability_check
from onchain_agent.reasoning.engine import ReasoningEngine
from onchain_agent.sessions.types import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolMessage,
    UserMessage,
)
from onchain_agent.tasks.state_machine import dispose
from onchain_agent.tasks.types import Task, TaskState, task_from_tool_result
from onchain_agent.tools.context import ToolContext
from onchain_agent.tools.encyclopedia import load_documentation
from onchain_agent.tools.registry import build_swapping_tools

logger = logging.getLogger(__name__)


def last_tool_message(messages: list[Message]) -> ToolMessage | None:
    """Return the most recent tool-role message, scanning in reverse."""
    for message in reversed(messages):
        if isinstance(message, ToolMessage):
            return message
    return None


class ConversationOrchestrator:
    """One agent session serving one logical user conversation.

    Attributes:
        settings: Application settings
        ollama_client: Client for the reasoning model
        bridge: Connection to the primary tool server
        aggregator: Optional collector of remote agent tools
        capability_store: Token capabilities of the tool server
        history: Conversation messages; cleared when a task finishes
        tools: Callable tools, None until ``start`` completes
        engine: Reasoning engine, None until ``start`` completes
    """

    def __init__(
        self,
        settings: AgentSettings,
        ollama_client: OllamaClient,
        bridge: McpBridge | None = None,
        aggregator: ToolAggregator | None = None,
        model_check: ModelCheck | None = None,
    ) -> None:
        self.settings = settings
        self.ollama_client = ollama_client
        self.bridge = bridge or McpBridge(label="ember", timeout=settings.mcp_tool_timeout)
        if aggregator is None and settings.agent_server_urls:
            aggregator = ToolAggregator(
                settings.agent_server_urls,
                override_url=settings.mcp_server_url,
                timeout=settings.mcp_tool_timeout,
            )
        self.aggregator = aggregator
        self.model_check = model_check or tool_capability_check(ollama_client)
        self.capability_store = CapabilityStore(
            self.bridge,
            cache_path=settings.resolved_capability_cache_path,
            capability_type=settings.capability_type,
        )

        self.history: list[Message] = []
        self.tools: dict[str, CallableTool] | None = None
        self.engine: ReasoningEngine | None = None
        self.context: ToolContext | None = None
        self.user_address: str | None = None
        self._turn_lock = asyncio.Lock()

    @property
    def model(self) -> str | None:
        return self.engine.model if self.engine else None

    async def _connect_bridge(self) -> bool:
        if self.settings.tool_server_url:
            return await self.bridge.connect(self.settings.tool_server_url)
        env = {**os.environ, "EMBER_ENDPOINT": self.settings.ember_endpoint}
        return await self.bridge.connect_stdio(
            self.settings.tool_server_command, self.settings.tool_server_args, env=env
        )

    async def start(self) -> None:
        """Connect, load capabilities and assemble the tool set.

        Raises:
            AgentInitializationError: If any step fails; the session cannot serve turns
        """
        logger.info("Starting agent initialization...")
        try:
            model = await select_model(self.settings.model_candidates, self.model_check)

            if not await self._connect_bridge():
                raise AgentInitializationError("Could not connect to the tool server")

            table = await self.capability_store.load(
                self.settings.capability_cache_enabled
            )
            documentation = load_documentation(self.settings.resolved_encyclopedia_dir)

            self.context = ToolContext(
                bridge=self.bridge,
                capabilities=table,
                ollama_client=self.ollama_client,
                model=model,
                documentation=documentation,
                timeout=self.settings.mcp_tool_timeout,
            )
            tools = build_swapping_tools(self.context)

            if self.aggregator is not None:
                remote_tools = await self.aggregator.aggregate(self.settings.selected_agent)
                for name, tool in remote_tools.items():
                    if name in tools:
                        logger.warning(f"Remote tool {name} shadows a local tool, skipped")
                        continue
                    tools[name] = tool

            self.history = [SystemMessage(content=SWAPPING_SYSTEM_PROMPT)]
            self.engine = ReasoningEngine(self.ollama_client, model)
            self.tools = tools
        except AgentInitializationError as e:
            logger.error(f"Failed during agent initialization: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed during agent initialization: {e}")
            raise AgentInitializationError(
                "Agent initialization failed. Cannot proceed."
            ) from e

        logger.info(f"Agent initialized with tools: {list(self.tools)}")

    async def stop(self) -> None:
        """Release the tool server connections."""
        await self.bridge.close()
        if self.aggregator is not None:
            await self.aggregator.close()

    async def process_user_input(self, user_input: str, user_address: str) -> Task:
        """Drive one user turn to completion.

        Args:
            user_input: The user's message
            user_address: Identity of the user; used as the task id

        Returns:
            The Task for this turn

        Raises:
            NotInitializedError: If ``start`` has not completed
            NoResultError: If the model produced neither a tool result nor text
            Exception: Failures of the reasoning backend, after being recorded
        """
        if self.tools is None or self.engine is None:
            raise NotInitializedError("Agent not initialized. Call start() first.")

        async with self._turn_lock:
            return await self._run_turn(user_input, user_address)

    async def _run_turn(self, user_input: str, user_address: str) -> Task:
        self.user_address = user_address
        if self.context is not None:
            self.context.user_address = user_address

        if not self.history:
            self.history.append(SystemMessage(content=SWAPPING_SYSTEM_PROMPT))
        self.history.append(UserMessage(content=user_input))

        try:
            result = await self.engine.generate(
                self.history, self.tools, max_steps=self.settings.max_steps
            )
            logger.info(
                f"Reasoning finished after {result.steps} steps "
                f"({result.prompt_tokens} prompt / {result.completion_tokens} completion tokens). "
                f"Reason: {result.finish_reason}"
            )
            self.history.extend(result.messages)

            tool_message = last_tool_message(result.messages)
            if tool_message is not None:
                candidate = task_from_tool_result(tool_message.result, user_address)
                if candidate is not None:
                    logger.info(
                        f"Tool result for {tool_message.tool_name}: "
                        f"state={candidate.state}, message={candidate.text}"
                    )
                    disposition = dispose(candidate, fallback_id=user_address)
                    if disposition.reset_history:
                        self.history = []
                    return disposition.task
                logger.info("Last tool message carried no result")

            if result.text:
                logger.info("No tool task produced; returning final text as completed task")
                return Task.with_text(user_address, TaskState.COMPLETED, result.text)

            raise NoResultError(
                "Agent processing failed: No tool result task processed "
                "and no final text response available."
            )
        except Exception as e:
            logger.error(f"Error processing user input: {e}")
            self.history.append(AssistantMessage(content=str(e)))
            raise

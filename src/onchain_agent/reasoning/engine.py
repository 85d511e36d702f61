"""Multi-step reasoning loop.

Each step sends the history plus the messages produced so far to the model.
When the model requests tools, all calls of the step are dispatched
concurrently and their results are appended as tool messages, in request
order, before the next step. The loop ends on a plain answer or when the
step budget is spent.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from onchain_agent.bridge.types import CallableTool, ToolOutcome
from onchain_agent.ollama.client import OllamaClient
from onchain_agent.ollama.types import ToolCallRequest
from onchain_agent.sessions.types import (
    AssistantMessage,
    Message,
    ToolMessage,
    serialize_result,
    to_ollama_messages,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 10

FINISH_STOP = "stop"
FINISH_MAX_STEPS = "max-steps"


@dataclass
class ReasoningResult:
    """Outcome of one reasoning loop.

    Attributes:
        text: Text of the final assistant message (may be empty)
        finish_reason: "stop", a backend reason such as "length", or "max-steps"
        messages: Messages produced during the loop, in order
        steps: Number of model calls made
        prompt_tokens: Prompt tokens evaluated across all steps
        completion_tokens: Tokens generated across all steps
    """

    text: str
    finish_reason: str
    messages: list[Message] = field(default_factory=list)
    steps: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0


class ReasoningEngine:
    """Drives a model through tool calls.

    Attributes:
        client: Ollama client used for chat steps
        model: Model name selected for the session
    """

    def __init__(self, client: OllamaClient, model: str) -> None:
        self.client = client
        self.model = model

    async def generate(
        self,
        history: list[Message],
        tools: dict[str, CallableTool],
        max_steps: int = DEFAULT_MAX_STEPS,
    ) -> ReasoningResult:
        """Run the loop until a plain answer or the step budget is exhausted.

        Args:
            history: Conversation so far (not mutated)
            tools: Callable tools keyed by exposed name
            max_steps: Hard cap on model calls

        Returns:
            ReasoningResult with the new messages

        Raises:
            Exception: Failures of the model backend itself
        """
        tool_schemas = [tool.to_ollama_schema() for tool in tools.values()]
        produced: list[Message] = []
        text = ""
        prompt_tokens = 0
        completion_tokens = 0

        for step in range(1, max_steps + 1):
            result = await self.client.chat(
                model=self.model,
                messages=to_ollama_messages([*history, *produced]),
                tools=tool_schemas,
            )
            text = result.content
            prompt_tokens += result.prompt_eval_count or 0
            completion_tokens += result.eval_count or 0
            logger.debug(
                f"Step {step} tokens: prompt={result.prompt_eval_count}, "
                f"completion={result.eval_count}"
            )

            produced.append(
                AssistantMessage(
                    content=result.content,
                    tool_calls=[call.to_ollama() for call in result.tool_calls] or None,
                )
            )

            if not result.tool_calls:
                finish_reason = result.done_reason or FINISH_STOP
                logger.info(f"Step {step} finished. Reason: {finish_reason}")
                return ReasoningResult(
                    text=text,
                    finish_reason=finish_reason,
                    messages=produced,
                    steps=step,
                    prompt_tokens=prompt_tokens,
                    completion_tokens=completion_tokens,
                )

            logger.info(
                f"Step {step} finished. Tool calls: {[c.name for c in result.tool_calls]}"
            )
            outcomes = await asyncio.gather(
                *(self._dispatch(call, tools) for call in result.tool_calls)
            )
            for call, outcome in zip(result.tool_calls, outcomes):
                produced.append(
                    ToolMessage(
                        tool_name=call.name,
                        content=serialize_result(outcome),
                        result=outcome,
                    )
                )

        logger.warning(f"Step budget of {max_steps} exhausted")
        return ReasoningResult(
            text=text,
            finish_reason=FINISH_MAX_STEPS,
            messages=produced,
            steps=max_steps,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
        )

    async def _dispatch(
        self, call: ToolCallRequest, tools: dict[str, CallableTool]
    ) -> Any:
        """Validate and run one tool call; failures become ToolOutcome errors."""
        tool = tools.get(call.name)
        if tool is None:
            logger.warning(f"Model requested unknown tool: {call.name}")
            return ToolOutcome.failure(
                error=f"Unknown tool: {call.name}",
                message=f"Tool {call.name} is not available.",
            )

        try:
            validated = tool.parameters.model_validate(call.arguments)
        except ValidationError as e:
            logger.warning(f"Invalid arguments for {call.name}: {e}")
            return ToolOutcome.failure(
                error=str(e), message=f"Invalid arguments for {call.name}."
            )

        arguments = validated.model_dump(by_alias=True, exclude_unset=True)
        logger.info(f"Executing tool: {call.name}")
        try:
            return await tool.invoke(arguments)
        except Exception as e:
            logger.error(f"Error during {call.name}: {e}")
            return ToolOutcome.failure(error=str(e), message=str(e))

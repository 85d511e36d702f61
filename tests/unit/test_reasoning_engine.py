"""Unit tests for the multi-step reasoning loop."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from pydantic import BaseModel

from onchain_agent.bridge.types import CallableTool, ToolOutcome
from onchain_agent.ollama.types import ChatResult, ToolCallRequest
from onchain_agent.reasoning import ReasoningEngine
from onchain_agent.sessions import AssistantMessage, SystemMessage, ToolMessage, UserMessage


class EchoArgs(BaseModel):
    text: str


def _tool(name: str, invoke, parameters=EchoArgs) -> CallableTool:
    return CallableTool(
        name=name, description=f"{name} tool", parameters=parameters, invoke=invoke
    )


def _call(name: str, **arguments) -> ChatResult:
    return ChatResult(tool_calls=[ToolCallRequest(name=name, arguments=arguments)])


@pytest.fixture
def client():
    return AsyncMock()


@pytest.fixture
def history():
    return [SystemMessage(content="You are a test agent."), UserMessage(content="hi")]


class TestGenerate:
    """Tests for the step loop."""

    @pytest.mark.asyncio
    async def test_plain_answer_stops_after_one_step(self, client, history):
        client.chat.return_value = ChatResult(content="Hello!", done_reason="stop")
        engine = ReasoningEngine(client, "test-model")

        result = await engine.generate(history, {})

        assert result.text == "Hello!"
        assert result.finish_reason == "stop"
        assert result.steps == 1
        assert len(result.messages) == 1
        assert isinstance(result.messages[0], AssistantMessage)
        # History is not mutated
        assert len(history) == 2

    @pytest.mark.asyncio
    async def test_tool_call_then_answer(self, client, history):
        """Test that tool results are fed back before the next step."""
        echo = AsyncMock(return_value=ToolOutcome.completed({"echo": "ping"}))
        client.chat.side_effect = [
            _call("echo", text="ping"),
            ChatResult(content="The tool said ping"),
        ]
        engine = ReasoningEngine(client, "test-model")

        result = await engine.generate(history, {"echo": _tool("echo", echo)})

        echo.assert_awaited_once_with({"text": "ping"})
        assert result.steps == 2
        assert result.finish_reason == "stop"
        assert [m.role for m in result.messages] == ["assistant", "tool", "assistant"]

        tool_message = result.messages[1]
        assert tool_message.tool_name == "echo"
        assert tool_message.result.status == "completed"

        second_call_messages = client.chat.await_args_list[1].kwargs["messages"]
        assert second_call_messages[-2]["tool_calls"] == [
            {"function": {"name": "echo", "arguments": {"text": "ping"}}}
        ]
        assert second_call_messages[-1]["role"] == "tool"
        assert second_call_messages[-1]["tool_name"] == "echo"

    @pytest.mark.asyncio
    async def test_tool_schemas_are_sent(self, client, history):
        client.chat.return_value = ChatResult(content="ok")
        engine = ReasoningEngine(client, "test-model")

        await engine.generate(history, {"echo": _tool("echo", AsyncMock())})

        tools = client.chat.await_args.kwargs["tools"]
        assert tools[0]["function"]["name"] == "echo"
        assert tools[0]["function"]["parameters"]["required"] == ["text"]

    @pytest.mark.asyncio
    async def test_step_budget_exhausted(self, client, history):
        """Test that a model that keeps calling tools is stopped."""
        client.chat.return_value = ChatResult(
            content="still working",
            tool_calls=[ToolCallRequest(name="echo", arguments={"text": "again"})],
        )
        echo = AsyncMock(return_value=ToolOutcome.completed("again"))
        engine = ReasoningEngine(client, "test-model")

        result = await engine.generate(history, {"echo": _tool("echo", echo)}, max_steps=3)

        assert result.finish_reason == "max-steps"
        assert result.steps == 3
        assert client.chat.await_count == 3
        assert echo.await_count == 3
        assert result.text == "still working"

    @pytest.mark.asyncio
    async def test_token_counts_are_summed(self, client, history):
        """Test that token usage is totalled across steps."""
        first = _call("echo", text="ping")
        first.prompt_eval_count = 12
        first.eval_count = 3
        client.chat.side_effect = [
            first,
            ChatResult(content="done", prompt_eval_count=20, eval_count=5),
        ]
        echo = AsyncMock(return_value=ToolOutcome.completed("ping"))
        engine = ReasoningEngine(client, "test-model")

        result = await engine.generate(history, {"echo": _tool("echo", echo)})

        assert result.prompt_tokens == 32
        assert result.completion_tokens == 8

    @pytest.mark.asyncio
    async def test_missing_token_counts_count_as_zero(self, client, history):
        client.chat.return_value = ChatResult(content="Hello!")
        engine = ReasoningEngine(client, "test-model")

        result = await engine.generate(history, {})

        assert result.prompt_tokens == 0
        assert result.completion_tokens == 0

    @pytest.mark.asyncio
    async def test_backend_failure_propagates(self, client, history):
        client.chat.side_effect = ConnectionError("ollama down")
        engine = ReasoningEngine(client, "test-model")

        with pytest.raises(ConnectionError):
            await engine.generate(history, {})


class TestDispatch:
    """Tests for tool call validation and execution."""

    @pytest.mark.asyncio
    async def test_unknown_tool_is_reported_to_model(self, client, history):
        client.chat.side_effect = [_call("missing", text="x"), ChatResult(content="sorry")]
        engine = ReasoningEngine(client, "test-model")

        result = await engine.generate(history, {})

        outcome = result.messages[1].result
        assert outcome.status == "error"
        assert "Unknown tool" in outcome.result.error
        assert result.text == "sorry"

    @pytest.mark.asyncio
    async def test_invalid_arguments_never_invoke_tool(self, client, history):
        """Test that schema-invalid arguments become an error outcome."""
        echo = AsyncMock()
        client.chat.side_effect = [_call("echo", wrong="x"), ChatResult(content="oops")]
        engine = ReasoningEngine(client, "test-model")

        result = await engine.generate(history, {"echo": _tool("echo", echo)})

        echo.assert_not_awaited()
        assert result.messages[1].result.status == "error"
        assert "Invalid arguments" in result.messages[1].result.result.message

    @pytest.mark.asyncio
    async def test_raising_tool_becomes_error_outcome(self, client, history):
        echo = AsyncMock(side_effect=ValueError("Unknown token: DOGE."))
        client.chat.side_effect = [_call("echo", text="x"), ChatResult(content="done")]
        engine = ReasoningEngine(client, "test-model")

        result = await engine.generate(history, {"echo": _tool("echo", echo)})

        outcome = result.messages[1].result
        assert outcome.status == "error"
        assert outcome.result.error == "Unknown token: DOGE."

    @pytest.mark.asyncio
    async def test_calls_in_one_step_run_concurrently(self, client, history):
        """Test that calls of a step overlap and results keep request order."""
        released = asyncio.Event()

        async def waiter(arguments):
            await released.wait()
            return "first"

        async def releaser(arguments):
            released.set()
            return "second"

        client.chat.side_effect = [
            ChatResult(
                tool_calls=[
                    ToolCallRequest(name="waiter", arguments={"text": "a"}),
                    ToolCallRequest(name="releaser", arguments={"text": "b"}),
                ]
            ),
            ChatResult(content="both done"),
        ]
        engine = ReasoningEngine(client, "test-model")
        tools = {"waiter": _tool("waiter", waiter), "releaser": _tool("releaser", releaser)}

        result = await asyncio.wait_for(engine.generate(history, tools), timeout=2)

        tool_messages = [m for m in result.messages if isinstance(m, ToolMessage)]
        assert [m.tool_name for m in tool_messages] == ["waiter", "releaser"]
        assert [m.result for m in tool_messages] == ["first", "second"]

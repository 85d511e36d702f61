"""Unit tests for the token swap tool."""

import json
from unittest.mock import AsyncMock

import pytest

from onchain_agent.bridge.types import ToolOutcome
from onchain_agent.errors import UnknownTokenError
from onchain_agent.tools import ToolContext, build_swapping_tools, swap_tokens
from onchain_agent.tools.chains import chain_name, resolve_chain_id
from onchain_agent.tools.swapping import SwapTokensArgs

USER_ADDRESS = "0x" + "ab" * 20

PLAN = {
    "to": "0xc873fEcbd354f5A56E00E710B90EF4201db2448d",
    "data": "0x1234",
    "value": "0",
    "chainId": "42161",
}


@pytest.fixture
def bridge():
    bridge = AsyncMock()
    bridge.invoke.return_value = ToolOutcome.completed(
        {"content": [{"type": "text", "text": json.dumps(PLAN)}]}
    )
    return bridge


@pytest.fixture
def context(bridge, capability_table):
    return ToolContext(
        bridge=bridge,
        capabilities=capability_table,
        ollama_client=AsyncMock(),
        model="test-model",
        user_address=USER_ADDRESS,
    )


def _args(**kwargs) -> SwapTokensArgs:
    return SwapTokensArgs.model_validate(kwargs)


class TestChains:
    def test_resolve_by_name_alias_and_id(self):
        assert resolve_chain_id("Arbitrum") == "42161"
        assert resolve_chain_id(" arbitrum one ") == "42161"
        assert resolve_chain_id("eth") == "1"
        assert resolve_chain_id("8453") == "8453"
        assert resolve_chain_id("solana") is None

    def test_chain_name(self):
        assert chain_name("42161") == "Arbitrum"
        assert chain_name("999") == "chain 999"


class TestSwapTokens:
    """Tests for building a swap transaction plan."""

    @pytest.mark.asyncio
    async def test_builds_transaction_plan(self, context, bridge):
        """Test a swap between single-chain tokens on the same chain."""
        task = await swap_tokens(_args(fromToken="ETH", toToken="USDC", amount="1"), context)

        assert task.state == "completed"
        assert task.id == USER_ADDRESS
        assert task.artifacts[0].name == "transaction-plan"
        assert task.artifacts[0].parts[0].data == PLAN

        bridge.invoke.assert_awaited_once_with(
            "swapTokens",
            {
                "fromTokenUid": {"chainId": "1", "address": "0xEeee"},
                "toTokenUid": {"chainId": "1", "address": "0xA0b8"},
                "amount": "1000000000000000000",
                "userAddress": USER_ADDRESS,
            },
        )

    @pytest.mark.asyncio
    async def test_amount_uses_source_decimals(self, context, bridge):
        await swap_tokens(
            _args(fromToken="usdc", toToken="ARB", amount="12.5", fromChain="arbitrum"),
            context,
        )

        arguments = bridge.invoke.await_args.args[1]
        assert arguments["amount"] == "12500000"
        assert arguments["fromTokenUid"] == {"chainId": "42161", "address": "0xFF97"}

    @pytest.mark.asyncio
    async def test_ambiguous_source_chain_requires_input(self, context, bridge):
        """Test that a multi-chain token without a chain asks which chain."""
        task = await swap_tokens(
            _args(fromToken="USDC", toToken="ETH", amount="100"), context
        )

        assert task.state == "input-required"
        assert "Ethereum" in task.text
        assert "Arbitrum" in task.text
        bridge.invoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_destination_prefers_source_chain(self, context, bridge):
        await swap_tokens(_args(fromToken="ARB", toToken="USDC", amount="5"), context)

        arguments = bridge.invoke.await_args.args[1]
        assert arguments["toTokenUid"]["chainId"] == "42161"

    @pytest.mark.asyncio
    async def test_unsupported_chain_requires_input(self, context, bridge):
        task = await swap_tokens(
            _args(fromToken="ETH", toToken="USDC", amount="1", fromChain="Polygon"),
            context,
        )

        assert task.state == "input-required"
        assert "not supported on Polygon" in task.text

    @pytest.mark.asyncio
    async def test_unknown_token_raises(self, context):
        with pytest.raises(UnknownTokenError, match="Unknown token: DOGE") as exc_info:
            await swap_tokens(_args(fromToken="DOGE", toToken="USDC", amount="1"), context)

        assert exc_info.value.available == ["USDC", "ETH", "ARB"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["abc", "0", "-3", "NaN"])
    async def test_invalid_amount_fails(self, context, bridge, amount):
        task = await swap_tokens(
            _args(fromToken="ETH", toToken="USDC", amount=amount), context
        )

        assert task.state == "failed"
        bridge.invoke.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_amount_below_one_base_unit_fails(self, context):
        task = await swap_tokens(
            _args(fromToken="USDC", toToken="ARB", amount="0.0000001", fromChain="arbitrum"),
            context,
        )

        assert task.state == "failed"
        assert "too small" in task.text

    @pytest.mark.asyncio
    async def test_missing_user_address_fails(self, context):
        context.user_address = None

        task = await swap_tokens(_args(fromToken="ETH", toToken="USDC", amount="1"), context)

        assert task.state == "failed"
        assert "User address" in task.text

    @pytest.mark.asyncio
    async def test_remote_failure_fails_task(self, context, bridge):
        bridge.invoke.return_value = ToolOutcome.failure(
            error="insufficient liquidity", message="Failed to execute swapTokens."
        )

        task = await swap_tokens(_args(fromToken="ETH", toToken="USDC", amount="1"), context)

        assert task.state == "failed"
        assert task.text == "Swap failed: insufficient liquidity"


class TestRegistry:
    """Tests for the assembled tool set."""

    def test_tool_names_and_schemas(self, context):
        tools = build_swapping_tools(context)

        assert set(tools) == {"swapTokens", "askEncyclopedia"}
        schema = tools["swapTokens"].to_ollama_schema()["function"]["parameters"]
        assert set(schema["properties"]) == {
            "fromToken",
            "toToken",
            "amount",
            "fromChain",
            "toChain",
        }
        assert set(schema["required"]) == {"fromToken", "toToken", "amount"}

    @pytest.mark.asyncio
    async def test_invoke_accepts_aliased_arguments(self, context, bridge):
        tools = build_swapping_tools(context)

        task = await tools["swapTokens"].invoke(
            {"fromToken": "ETH", "toToken": "USDC", "amount": "1"}
        )

        assert task.state == "completed"
        bridge.invoke.assert_awaited_once()

"""Pytest configuration for integration tests.

Integration tests run the real agent session behind the API. Only the
edges are faked: the Ollama client and the MCP bridge to the tool server.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from onchain_agent.bridge.types import ToolOutcome
from onchain_agent.ollama import ModelInfo

CAPABILITIES = {
    "capabilities": [
        {
            "swapCapability": {
                "capabilityId": "camelot-swap",
                "supportedTokens": [
                    {
                        "symbol": "ETH",
                        "tokenUid": {"chainId": "1", "address": "0xEeee"},
                        "decimals": 18,
                    },
                    {
                        "symbol": "USDC",
                        "tokenUid": {"chainId": "1", "address": "0xA0b8"},
                        "decimals": 6,
                    },
                    {
                        "symbol": "USDC",
                        "tokenUid": {"chainId": "42161", "address": "0xaf88"},
                        "decimals": 6,
                    },
                ],
            }
        }
    ]
}

TRANSACTION_PLAN = {"to": "0xRouter", "data": "0xdeadbeef", "value": "0"}


@pytest.fixture(autouse=True)
def mock_ollama_client():
    """Mock OllamaClient for all integration tests.

    The model check sees one tool-capable model; chat responses are set
    per test through ``chat.side_effect``.
    """
    with patch("onchain_agent.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.host = "http://localhost:11434"
        mock_instance.check_connection.return_value = True
        mock_instance.get_model_info.return_value = ModelInfo(
            name="test-model",
            family="qwen3",
            parameter_size="14.8B",
            capabilities=["completion", "tools"],
            context_length=40960,
        )
        mock_client_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture(autouse=True)
def mock_bridge():
    """Mock the MCP bridge created by the agent session."""
    with patch("onchain_agent.agents.orchestrator.McpBridge") as mock_bridge_class:
        mock_instance = MagicMock()
        mock_instance.connect = AsyncMock(return_value=True)
        mock_instance.close = AsyncMock()
        mock_instance.call_tool = AsyncMock(
            return_value={
                "content": [{"type": "text", "text": json.dumps(CAPABILITIES)}]
            }
        )
        mock_instance.invoke = AsyncMock(
            return_value=ToolOutcome.completed(
                {"content": [{"type": "text", "text": json.dumps(TRANSACTION_PLAN)}]}
            )
        )
        mock_bridge_class.return_value = mock_instance
        yield mock_instance


@pytest_asyncio.fixture
async def async_client(test_app, mock_ollama_client, mock_bridge):
    """Async HTTP client over the app with a real agent session started."""
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.fixture
def transaction_plan():
    """The plan returned by the mocked remote swapTokens tool."""
    return TRANSACTION_PLAN

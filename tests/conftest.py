"""Pytest configuration and shared fixtures for onchain-agent tests.

This module provides common fixtures used across all test modules,
including test settings, a fake agent session and async client setup.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from onchain_agent import create_app
from onchain_agent.capabilities.types import CapabilityTable, TokenEntry
from onchain_agent.config import AgentSettings

USER_ADDRESS = "0x" + "ab" * 20


@pytest.fixture
def test_settings(tmp_path):
    """Create test settings with isolated temporary directories.

    Args:
        tmp_path: Pytest fixture providing a temporary directory.

    Returns:
        AgentSettings: Settings instance configured for testing.
    """
    return AgentSettings(
        host="127.0.0.1",
        port=3001,
        ollama_host="http://localhost:11434",
        model_candidates=["test-model"],
        tool_server_url="http://localhost:3010/sse",
        data_dir=str(tmp_path),
        capability_cache_path=".cache/swap_capabilities.json",
        encyclopedia_dir="encyclopedia",
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def capability_table():
    """A table with USDC on two chains and ETH, ARB on one chain each."""
    return CapabilityTable(
        tokens={
            "USDC": [
                TokenEntry(chain_id="1", address="0xA0b8", decimals=6),
                TokenEntry(chain_id="42161", address="0xFF97", decimals=6),
            ],
            "ETH": [TokenEntry(chain_id="1", address="0xEeee", decimals=18)],
            "ARB": [TokenEntry(chain_id="42161", address="0x912C", decimals=18)],
        },
        available_symbols=["USDC", "ETH", "ARB"],
    )


@pytest.fixture
def mock_ollama_client():
    """Patch the OllamaClient created by the app lifespan."""
    with patch("onchain_agent.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.host = "http://localhost:11434"
        mock_instance.check_connection.return_value = True
        mock_client_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def mock_agent():
    """Patch the agent session created by the app lifespan."""
    with patch("onchain_agent.app.ConversationOrchestrator") as mock_agent_class:
        mock_instance = MagicMock()
        mock_instance.start = AsyncMock()
        mock_instance.stop = AsyncMock()
        mock_instance.process_user_input = AsyncMock()
        mock_instance.model = "test-model"
        mock_instance.tools = {"swapTokens": object(), "askEncyclopedia": object()}
        mock_agent_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app, mock_ollama_client, mock_agent):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.
        mock_ollama_client: Patched Ollama client.
        mock_agent: Patched agent session.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

"""Unit tests for the health check endpoint."""

from unittest.mock import AsyncMock

import pytest


@pytest.mark.asyncio
async def test_health_check_returns_ok(async_client):
    """Test that health check returns status ok."""
    response = await async_client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"


@pytest.mark.asyncio
async def test_health_check_reports_agent(async_client):
    """Test that health check reports the agent's model and tools."""
    response = await async_client.get("/api/v1/health")

    data = response.json()
    assert data["model"] == "test-model"
    assert data["tools"] == ["askEncyclopedia", "swapTokens"]


@pytest.mark.asyncio
async def test_health_check_with_ollama_connected(async_client, test_app):
    """Test health check when Ollama is connected."""
    mock_client = AsyncMock()
    mock_client.host = "http://localhost:11434"
    mock_client.check_connection.return_value = True
    test_app.state.ollama_client = mock_client

    response = await async_client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["ollama_connected"] is True
    assert data["ollama_host"] == "http://localhost:11434"


@pytest.mark.asyncio
async def test_health_check_with_ollama_disconnected(async_client, test_app):
    """Test health check when Ollama is not reachable."""
    mock_client = AsyncMock()
    mock_client.host = "http://localhost:11434"
    mock_client.check_connection.return_value = False
    test_app.state.ollama_client = mock_client

    response = await async_client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"  # Server is still healthy
    assert data["ollama_connected"] is False


@pytest.mark.asyncio
async def test_health_check_ollama_check_exception(async_client, test_app):
    """Test health check when Ollama connectivity check raises exception."""
    mock_client = AsyncMock()
    mock_client.host = "http://localhost:11434"
    mock_client.check_connection.side_effect = Exception("Connection error")
    test_app.state.ollama_client = mock_client

    response = await async_client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["ollama_connected"] is False


@pytest.mark.asyncio
async def test_health_check_no_ollama_client(async_client, test_app):
    """Test health check when Ollama client is not initialized."""
    if hasattr(test_app.state, "ollama_client"):
        delattr(test_app.state, "ollama_client")

    response = await async_client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["ollama_connected"] is None
    assert data["ollama_host"] is None

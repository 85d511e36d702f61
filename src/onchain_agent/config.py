"""Configuration module for onchain-agent using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentSettings(BaseSettings):
    """Main configuration settings for onchain-agent.

    All settings can be overridden via environment variables with the ONCHAIN_ prefix.
    For example, ONCHAIN_OLLAMA_HOST will override the ollama_host setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 3001

    # Ollama
    ollama_host: str = "http://localhost:11434"
    model_candidates: list[str] = Field(
        default_factory=lambda: [
            "llama3.3:70b",
            "qwen3:14b",
            "llama3.1:8b",
        ]
    )

    # Reasoning loop
    max_steps: int = 10

    # Primary tool server (SSE URL wins over the stdio command)
    tool_server_url: str = ""
    tool_server_command: str = "npx"
    tool_server_args: list[str] = Field(
        default_factory=lambda: ["-y", "ember-mcp-tool-server"]
    )
    ember_endpoint: str = "grpc.api.emberai.xyz:50051"
    mcp_tool_timeout_ms: int = 60000

    # Capabilities
    capability_type: str = "SWAP"
    capability_cache_enabled: bool = False
    capability_cache_path: str = ".cache/swap_capabilities.json"

    # Data directories (relative to data_dir)
    data_dir: str = "."
    encyclopedia_dir: str = "encyclopedia"

    # Remote agent servers merged into the tool set
    agent_server_urls: dict[str, str] = Field(default_factory=dict)
    mcp_server_url: str | None = None
    selected_agent: str = "all"

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="ONCHAIN_")

    # --- Resolved paths (computed from data_dir + relative paths) ---

    @property
    def resolved_capability_cache_path(self) -> Path:
        """Get the full path to the capability cache file."""
        return Path(self.data_dir) / self.capability_cache_path

    @property
    def resolved_encyclopedia_dir(self) -> Path:
        """Get the full path to the encyclopedia documentation directory."""
        return Path(self.data_dir) / self.encyclopedia_dir

    @property
    def mcp_tool_timeout(self) -> float:
        """Remote call timeout in seconds."""
        return self.mcp_tool_timeout_ms / 1000

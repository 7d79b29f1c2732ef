"""Configuration module for agent-mesh using pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentMeshSettings(BaseSettings):
    """Main configuration settings for agent-mesh.

    All settings can be overridden via environment variables with the
    AGENT_MESH_ prefix. For example, AGENT_MESH_MESH_BASE_URL will override
    the mesh_base_url setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8766

    # Storage (relative to data_dir)
    data_dir: str = "."
    db_file: str = "registry.db"

    # Delegation
    mesh_base_url: str = "http://localhost:8766"
    delegation_timeout: float = 120.0
    max_delegation_depth: int = 5

    # Discovery
    resource_boost: float = 0.2
    semantic_search_url: str | None = None
    semantic_search_api_key: str | None = None

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="AGENT_MESH_")

    @property
    def resolved_db_path(self) -> Path:
        """Get the full path to the registry database file."""
        return Path(self.data_dir) / self.db_file

    @property
    def callback_base_url(self) -> str:
        """Get the mesh base URL without trailing slashes."""
        return self.mesh_base_url.rstrip("/")

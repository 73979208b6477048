"""Configuration module for shadow-agents using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shadow_agents.agents.agent import DEFAULT_MAX_TURNS


class ShadowAgentsSettings(BaseSettings):
    """Main configuration settings for shadow-agents.

    All settings can be overridden via environment variables with the SHADOW_ prefix.
    For example, SHADOW_OLLAMA_HOST will override the ollama_host setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"
    ollama_timeout: float | None = None
    model: str = "llama3.2:latest"
    temperature: float | None = None

    # Agents
    agents_factory: str | None = Field(
        default=None,
        description="Import path 'module:function' of the agent factory",
    )
    default_agent_name: str = "Assistant"
    default_system_prompt: str = (
        "You are a helpful assistant. Use the available tools when they help."
    )

    # Agent execution
    max_turns: int = Field(default=DEFAULT_MAX_TURNS, ge=1)

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SHADOW_")

    @property
    def model_options(self) -> dict[str, float] | None:
        """Model parameters passed to every chat request."""
        if self.temperature is None:
            return None
        return {"temperature": self.temperature}

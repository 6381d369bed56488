"""Configuration schema using Pydantic.

Persisted as camelCase JSON at ~/.debugrelay/config.json. Without a file,
environment variables prefixed ``DEBUGRELAY_`` (nested with ``__``) fill in
the settings, e.g. ``DEBUGRELAY_BRIDGE__REQUEST_TIMEOUT_SECONDS=5``.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class RetryConfig(BaseModel):
    """Backoff for idempotent bridge reads (threads, stack trace, variables)."""
    max_attempts: int = Field(default=2, ge=1)
    base_delay_seconds: float = Field(default=0.2, ge=0)
    max_delay_seconds: float = Field(default=2.0, ge=0)


class BridgeConfig(BaseModel):
    """Debugger mediator process configuration."""
    command: list[str] = Field(default_factory=list)  # argv; empty = no mediator
    cwd: str | None = None
    env: dict[str, str] = Field(default_factory=dict)  # extra env vars for the mediator
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    shutdown_grace_seconds: float = Field(default=2.0, ge=0)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @property
    def enabled(self) -> bool:
        return bool(self.command)


class ToolsConfig(BaseModel):
    """Tool availability."""
    disabled: list[str] = Field(default_factory=list)  # methods answered with TOOL_NOT_FOUND


class LoggingConfig(BaseModel):
    """Logging sinks; stdout is reserved for protocol lines."""
    enabled: bool = True
    level: str = "INFO"
    file: bool = False  # also write rotating logs under ~/.debugrelay/logs

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return (value or "INFO").strip().upper()


class Config(BaseSettings):
    """Root configuration for debugrelay."""
    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        env_prefix="DEBUGRELAY_",
        env_nested_delimiter="__"
    )

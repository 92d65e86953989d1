"""Gateway configuration."""

from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from pydantic_settings import BaseSettings

ENV_FILE = Path.cwd() / '.env'
DEFAULT_ENGINE_URL = 'http://localhost:8080'
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_CORS_ALLOWED_ORIGINS = ['*']


@dataclass(frozen=True)
class GatewayConfig:
    """
    Process-wide, read-only gateway configuration.

    Built once at startup and injected into the engine client and gateway.
    """

    engine_url: str
    internal_token: str
    api_keys: frozenset[str] = field(default_factory=frozenset)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    passthrough_upstream_status: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.engine_url:
            msg = 'engine_url is required'
            raise ValueError(msg)
        if not self.internal_token:
            msg = 'internal_token is required'
            raise ValueError(msg)
        if self.timeout_seconds <= 0:
            msg = 'timeout_seconds must be positive'
            raise ValueError(msg)


class Settings(BaseSettings):
    """Gateway settings loaded from environment variables."""

    engine_url: str = DEFAULT_ENGINE_URL
    internal_token: str  # Required
    api_keys: str = ''  # Comma-separated list of accepted inbound keys
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    passthrough_upstream_status: bool = False
    log_level: str = 'INFO'
    json_logs: bool = False  # JSON lines instead of console output
    debug_mode: bool = False
    cors_allowed_origins: list[str] = DEFAULT_CORS_ALLOWED_ORIGINS

    class Config:
        """Pydantic settings configuration."""

        env_prefix = 'DATAGATE_'
        env_file = str(ENV_FILE)
        env_file_encoding = 'utf-8'
        case_sensitive = False

    def accepted_api_keys(self) -> frozenset[str]:
        """
        Parse the comma-separated inbound key list.

        Returns:
            Set of non-empty keys
        """
        return frozenset(key.strip() for key in self.api_keys.split(',') if key.strip())

    def to_gateway_config(self) -> GatewayConfig:
        """
        Build the immutable config consumed by the core.

        Returns:
            GatewayConfig instance
        """
        return GatewayConfig(
            engine_url=self.engine_url.rstrip('/'),
            internal_token=self.internal_token,
            api_keys=self.accepted_api_keys(),
            timeout_seconds=self.timeout_seconds,
            passthrough_upstream_status=self.passthrough_upstream_status,
        )

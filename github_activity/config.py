import os
from typing import Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field

from github_activity.domain.exceptions import ConfigurationError
from github_activity.infrastructure.github_client import DEFAULT_API_BASE_URL, DEFAULT_REQUEST_TIMEOUT

DEFAULT_SERVER_HOST = "0.0.0.0"
DEFAULT_SERVER_PORT = 8080


class Settings(BaseModel):
    """Startup configuration, read once from the environment."""
    model_config = ConfigDict(frozen=True)

    github_token: str = Field(..., min_length=1)
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = Field(DEFAULT_REQUEST_TIMEOUT, gt=0)
    server_host: str = DEFAULT_SERVER_HOST
    server_port: int = Field(DEFAULT_SERVER_PORT, ge=1, le=65535)


def _read(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    if value is None:
        return None
    return value.strip()


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Builds Settings from environment variables (os.environ by default).
    Call load_dotenv() beforehand to pick up a local .env file.

    Raises:
        ConfigurationError: If GITHUB_TOKEN or GITHUB_API_BASE_URL is blank,
            or a numeric setting cannot be parsed.
    """
    env = os.environ if env is None else env

    github_token = _read(env, "GITHUB_TOKEN")
    if not github_token:
        raise ConfigurationError("GITHUB_TOKEN is not set in the environment.")

    api_base_url = _read(env, "GITHUB_API_BASE_URL")
    if api_base_url is None:
        api_base_url = DEFAULT_API_BASE_URL
    if not api_base_url:
        raise ConfigurationError("GITHUB_API_BASE_URL is set but empty.")

    try:
        return Settings(
            github_token=github_token,
            api_base_url=api_base_url.rstrip("/"),
            request_timeout=_read(env, "GITHUB_REQUEST_TIMEOUT") or DEFAULT_REQUEST_TIMEOUT,
            server_host=_read(env, "SERVER_HOST") or DEFAULT_SERVER_HOST,
            server_port=_read(env, "SERVER_PORT") or DEFAULT_SERVER_PORT,
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

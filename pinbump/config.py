"""Runtime configuration — env-driven via pydantic-settings.

Reads PINBUMP_* environment variables and an optional .env file in the
working directory.  CLI options override these per invocation.

Examples
--------
Override via environment::

    export PINBUMP_GITHUB_TOKEN=ghp_...
    export PINBUMP_MAX_WORKERS=16
    export PINBUMP_LOG_LEVEL=DEBUG

``GITHUB_TOKEN`` is used when ``PINBUMP_GITHUB_TOKEN`` is unset, so the tool
works unchanged inside GitHub Actions.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pinbump import __version__


class PinbumpConfig(BaseSettings):
    """Settings for API access, concurrency and workflow discovery."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PINBUMP_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # GitHub API
    api_url: str = "https://api.github.com"
    github_token: str = ""
    user_agent: str = f"pinbump/{__version__}"
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    http_retries: int = Field(default=2, ge=0)

    # Resolution pool
    max_workers: int = Field(default=8, ge=1)

    # Discovery
    workflows_dir: Path = Path(".github/workflows")

    # Observability
    log_level: str = "INFO"

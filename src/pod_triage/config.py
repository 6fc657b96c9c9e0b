"""Configuration and environment for the pod triage sweep."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_PAGE_SIZE = 500


class Settings(BaseSettings):
    """Sweep settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_prefix="POD_TRIAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    # Kubernetes
    kubeconfig: Path | None = Field(
        default=None,
        description="Path to kubeconfig; uses KUBECONFIG env or default location if unset",
    )
    context: str | None = Field(default=None, description="Kubernetes context to use")
    namespace: str = Field(default="default", description="Namespace to sweep")
    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT_SECONDS,
        gt=0.0,
        description="Timeout applied to every API call (enumeration and each log fetch)",
    )
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        description="Pods requested per list page; further pages follow the continue token",
    )

    # Log capture
    log_dir: Path = Field(
        default=Path("pod-logs"),
        description="Directory receiving '<pod>-logs.txt' artifacts",
    )
    log_tail_lines: int | None = Field(
        default=None,
        ge=1,
        description="Only fetch the last N log lines; full log if unset",
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        le=32,
        description="Concurrent log fetches; 1 keeps the sweep sequential",
    )


def get_settings() -> Settings:
    """Return validated settings instance."""
    return Settings()

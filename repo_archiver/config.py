"""
repo-archiver settings.

Values come from keyword overrides (the CLI), then environment variables,
then defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from repo_archiver.exceptions import ConfigurationError

BACKENDS = ("gh", "api")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'") from None


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got '{raw}'") from None


@dataclass
class Settings:
    """Runtime configuration for a single run."""

    DEFAULT_API_BASE_URL = "https://api.github.com"
    DEFAULT_LIMIT = 200
    DEFAULT_TIMEOUT = 30.0
    DEFAULT_DELAY = 0.1

    dry_run: bool = False
    backend: str = "gh"
    limit: int = DEFAULT_LIMIT
    concurrency: int = 1
    # Pause after each archive call
    delay: float = DEFAULT_DELAY
    github_token: str | None = None
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    log_file: Path | None = None
    verbose: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """
        Build settings from environment variables, then apply overrides.

        Environment variables:
            REPO_ARCHIVER_BACKEND: "gh" or "api" (default: gh)
            REPO_ARCHIVER_LIMIT: Maximum repositories to list (default: 200)
            REPO_ARCHIVER_CONCURRENCY: Parallel archive calls (default: 1)
            REPO_ARCHIVER_DELAY: Seconds to pause after each archive call (default: 0.1)
            GITHUB_TOKEN / GH_TOKEN: Token for the api backend
            GITHUB_API_URL: API base URL (default: https://api.github.com)

        Overrides whose value is None are ignored so unset CLI options fall
        through to the environment.

        Raises:
            ConfigurationError: If a value is malformed or the result is invalid
        """
        settings = cls(
            backend=os.environ.get("REPO_ARCHIVER_BACKEND", "gh").lower(),
            limit=_env_int("REPO_ARCHIVER_LIMIT", cls.DEFAULT_LIMIT),
            concurrency=_env_int("REPO_ARCHIVER_CONCURRENCY", 1),
            delay=_env_float("REPO_ARCHIVER_DELAY", cls.DEFAULT_DELAY),
            github_token=os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN"),
            api_base_url=os.environ.get("GITHUB_API_URL", cls.DEFAULT_API_BASE_URL),
        )

        for key, value in overrides.items():
            if not hasattr(settings, key):
                raise ConfigurationError(f"Unknown setting: {key}")
            if value is not None:
                setattr(settings, key, value)

        settings.validate()
        return settings

    def validate(self) -> None:
        """
        Check the settings for consistency.

        Raises:
            ConfigurationError: On the first invalid value found
        """
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"Invalid backend: {self.backend}. Must be one of {', '.join(BACKENDS)}"
            )
        if self.limit <= 0:
            raise ConfigurationError(f"limit must be positive, got {self.limit}")
        if self.concurrency <= 0:
            raise ConfigurationError(f"concurrency must be positive, got {self.concurrency}")
        if self.delay < 0:
            raise ConfigurationError(f"delay cannot be negative, got {self.delay}")
        if self.backend == "api" and not self.github_token:
            raise ConfigurationError(
                "GITHUB_TOKEN (or GH_TOKEN) environment variable not set for the api backend"
            )

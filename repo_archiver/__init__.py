"""repo-archiver - interactively archive old GitHub repositories."""

from repo_archiver.age import PRESETS, Age
from repo_archiver.app import (
    AgePicker,
    ArchiverApp,
    Archiving,
    Button,
    Confirming,
    Done,
    Selecting,
)
from repo_archiver.config import Settings
from repo_archiver.exceptions import (
    AuthenticationError,
    ConfigurationError,
    HostError,
    HostUnavailableError,
    InvalidDuration,
    InvariantViolation,
    NotFoundError,
    RateLimitedError,
    RepoArchiverError,
    ServerError,
)
from repo_archiver.executor import ArchiveExecutor
from repo_archiver.hosts import GhCliHost, GitHubApiHost, RepositoryHost, build_host
from repo_archiver.inventory import Inventory
from repo_archiver.logging import configure_logging, get_logger
from repo_archiver.transport import HTTPTransport, RetryConfig
from repo_archiver.types import (
    ArchiveOutcome,
    ArchiveResult,
    OutcomeState,
    OutcomeUpdate,
    RepositoryRecord,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Age
    "Age",
    "PRESETS",
    # State machine
    "ArchiverApp",
    "AgePicker",
    "Selecting",
    "Confirming",
    "Archiving",
    "Done",
    "Button",
    # Inventory and executor
    "Inventory",
    "ArchiveExecutor",
    # Hosts
    "RepositoryHost",
    "GhCliHost",
    "GitHubApiHost",
    "build_host",
    # Types
    "RepositoryRecord",
    "ArchiveResult",
    "ArchiveOutcome",
    "OutcomeState",
    "OutcomeUpdate",
    # Configuration
    "Settings",
    # Exceptions
    "RepoArchiverError",
    "ConfigurationError",
    "InvalidDuration",
    "HostError",
    "HostUnavailableError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitedError",
    "ServerError",
    "InvariantViolation",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]

"""repo-archiver testing utilities.

Provides a scripted host and fixtures for testing the state machine and
executor without gh or a terminal.
"""

from repo_archiver.testing.fixtures import (
    FIXED_NOW,
    create_mock_repositories,
    create_mock_repository,
)
from repo_archiver.testing.mock import MockCall, MockRepositoryHost

__all__ = [
    # Mock host
    "MockRepositoryHost",
    "MockCall",
    # Helper functions
    "create_mock_repository",
    "create_mock_repositories",
    "FIXED_NOW",
]

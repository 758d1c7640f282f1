"""
Pytest plugin for repo-archiver testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
discovered by pytest. To use them, add this to your conftest.py:

    pytest_plugins = ["repo_archiver.testing.conftest"]
"""

from repo_archiver.testing.fixtures import (
    fixed_now,
    frozen_clock,
    mock_host,
    sample_repositories,
)

__all__ = [
    "fixed_now",
    "frozen_clock",
    "mock_host",
    "sample_repositories",
]

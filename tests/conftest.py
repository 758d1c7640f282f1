"""Shared fixtures for the repo-archiver test suite."""

from repo_archiver.testing.fixtures import (  # noqa: F401
    fixed_now,
    frozen_clock,
    mock_host,
    sample_repositories,
)

"""
Pytest fixtures for repo-archiver testing.

Provides record factories, a pinned clock and a scripted host.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Generator

import pytest

from repo_archiver.testing.mock import MockRepositoryHost
from repo_archiver.types.repos import RepositoryRecord

FIXED_NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def create_mock_repository(
    name: str = "mock-repo",
    owner: str | None = "mock-owner",
    created_at: datetime | None = None,
    pushed_at: datetime | None = None,
    description: str | None = None,
    archived: bool = False,
) -> RepositoryRecord:
    """
    Create a RepositoryRecord with sensible defaults.

    Defaults to a repository created in 2012, old enough for any preset age
    relative to ``FIXED_NOW``.
    """
    created = created_at or datetime(2012, 3, 1, 9, 0, 0, tzinfo=timezone.utc)
    return RepositoryRecord(
        name=name,
        owner=owner,
        created_at=created,
        pushed_at=pushed_at or created,
        description=description,
        archived=archived,
    )


def create_mock_repositories(count: int, prefix: str = "repo") -> list[RepositoryRecord]:
    """Create ``count`` old repositories named ``{prefix}-0`` .. ``{prefix}-N``."""
    return [
        create_mock_repository(
            name=f"{prefix}-{i}",
            created_at=datetime(2010 + i % 10, 1, 1, tzinfo=timezone.utc),
            description=f"Repository number {i}",
        )
        for i in range(count)
    ]


# ============================================================================
# Clock Fixtures
# ============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """Provide the pinned current time used by ``frozen_clock``."""
    return FIXED_NOW


@pytest.fixture
def frozen_clock(fixed_now: datetime) -> Callable[[], datetime]:
    """Provide a clock callable that always returns ``fixed_now``."""
    return lambda: fixed_now


# ============================================================================
# Host Fixtures
# ============================================================================


@pytest.fixture
def sample_repositories() -> list[RepositoryRecord]:
    """
    Provide a listing mixing candidates and non-candidates.

    ``fresh`` is too new for a 1 year cutoff and ``frozen`` is already
    archived; the other three are candidates in this order.
    """
    return [
        create_mock_repository(
            name="alpha",
            created_at=datetime(2014, 5, 1, tzinfo=timezone.utc),
            description="First experiment",
        ),
        create_mock_repository(
            name="fresh",
            created_at=datetime(2025, 5, 1, tzinfo=timezone.utc),
        ),
        create_mock_repository(
            name="bravo",
            created_at=datetime(2016, 8, 9, tzinfo=timezone.utc),
        ),
        create_mock_repository(
            name="frozen",
            created_at=datetime(2011, 1, 1, tzinfo=timezone.utc),
            archived=True,
        ),
        create_mock_repository(
            name="charlie",
            created_at=datetime(2019, 12, 31, tzinfo=timezone.utc),
            description="Dotfiles",
        ),
    ]


@pytest.fixture
def mock_host(
    sample_repositories: list[RepositoryRecord],
) -> Generator[MockRepositoryHost, None, None]:
    """
    Provide a MockRepositoryHost listing ``sample_repositories``.

    Example:
        ```python
        def test_my_feature(mock_host):
            mock_host.fail_archive("bravo", "boom")
            ...
            assert mock_host.call_count("archive_repository") == 3
        ```
    """
    host = MockRepositoryHost(sample_repositories)
    yield host
    host.reset()

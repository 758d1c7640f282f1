"""
Repository host interface.

The state machine and executor reach a host only through these methods.
Implementations: ``GhCliHost``, ``GitHubApiHost`` and the scripted
``MockRepositoryHost`` in ``repo_archiver.testing``.
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from repo_archiver.types.repos import ArchiveResult, RepositoryRecord


@runtime_checkable
class RepositoryHost(Protocol):
    """The two operations (plus a preflight check) a repository host offers."""

    def verify(self) -> None:
        """Raise HostError if the host cannot be used at all."""
        ...

    def list_repositories(self, cutoff: datetime) -> list[RepositoryRecord]:
        """List non-archived repositories created before ``cutoff``."""
        ...

    def archive_repository(self, record: RepositoryRecord) -> ArchiveResult:
        """Archive one repository. Never retried by callers."""
        ...


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp such as ``2015-03-01T12:00:00Z`` to aware UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def require_timestamp(value: str | None) -> datetime:
    """Like :func:`parse_timestamp` but an empty value is a ValueError."""
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError("missing timestamp")
    return parsed


def filter_candidates(
    records: Iterable[RepositoryRecord], cutoff: datetime
) -> list[RepositoryRecord]:
    """Keep non-archived records created strictly before ``cutoff``, in order."""
    return [r for r in records if not r.archived and r.created_at < cutoff]

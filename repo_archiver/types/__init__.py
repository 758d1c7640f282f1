"""repo-archiver type definitions."""

from repo_archiver.types.outcomes import ArchiveOutcome, OutcomeState, OutcomeUpdate
from repo_archiver.types.repos import ArchiveResult, RepositoryRecord

__all__ = [
    # Repository types
    "RepositoryRecord",
    "ArchiveResult",
    # Outcome types
    "ArchiveOutcome",
    "OutcomeState",
    "OutcomeUpdate",
]

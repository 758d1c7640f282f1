"""Repository-related data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RepositoryRecord:
    """A candidate repository as returned by the host listing."""

    name: str
    owner: str | None
    created_at: datetime
    pushed_at: datetime | None
    description: str | None
    archived: bool = False

    @property
    def full_name(self) -> str:
        """``owner/name`` when the owner is known, otherwise just the name."""
        if self.owner:
            return f"{self.owner}/{self.name}"
        return self.name


@dataclass
class ArchiveResult:
    """Result of a single archive call against the host."""

    status: str  # "ok" or "error"
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

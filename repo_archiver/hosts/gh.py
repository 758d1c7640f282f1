"""
GitHub CLI (``gh``) repository host.

Lists and archives repositories by shelling out to an installed, logged-in
``gh`` binary.
"""

import json
import shutil
import subprocess
from datetime import datetime
from typing import Any

from repo_archiver.exceptions import HostError, HostUnavailableError
from repo_archiver.hosts.base import filter_candidates, parse_timestamp, require_timestamp
from repo_archiver.logging import get_logger, log_command
from repo_archiver.types.repos import ArchiveResult, RepositoryRecord

logger = get_logger("host")

LIST_FIELDS = "name,owner,createdAt,pushedAt,description,isArchived"


def _parse_repository(data: dict[str, Any]) -> RepositoryRecord:
    """Parse one entry of ``gh repo list --json`` output."""
    owner = data.get("owner")
    if isinstance(owner, dict):
        owner = owner.get("login")
    return RepositoryRecord(
        name=data["name"],
        owner=owner or None,
        created_at=require_timestamp(data["createdAt"]),
        pushed_at=parse_timestamp(data.get("pushedAt")),
        description=data.get("description") or None,
        archived=bool(data.get("isArchived", False)),
    )


class GhCliHost:
    """
    Repository host backed by the ``gh`` command-line tool.

    Example:
        ```python
        from repo_archiver.age import Age
        from repo_archiver.hosts import GhCliHost

        host = GhCliHost(limit=200)
        host.verify()
        repos = host.list_repositories(Age.parse("8y").cutoff())
        result = host.archive_repository(repos[0])
        ```
    """

    def __init__(self, executable: str = "gh", limit: int = 200) -> None:
        """
        Initialize the host.

        Args:
            executable: Name or path of the gh binary
            limit: Maximum number of repositories to request from ``gh repo list``
        """
        self.executable = executable
        self.limit = limit

    def verify(self) -> None:
        """
        Check that gh is installed and authenticated.

        Raises:
            HostUnavailableError: If gh is missing or ``gh auth status`` fails
        """
        if shutil.which(self.executable) is None:
            raise HostUnavailableError(
                f"Failed to run {self.executable} CLI. Is it installed?"
            )

        result = self._run(["auth", "status"])
        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise HostUnavailableError(f"{self.executable} is not authenticated: {detail}")

    def list_repositories(self, cutoff: datetime) -> list[RepositoryRecord]:
        """
        List non-archived source repositories created before ``cutoff``.

        Args:
            cutoff: Aware UTC instant; repositories created at or after it are dropped

        Returns:
            Records sorted oldest first by creation time

        Raises:
            HostError: If gh cannot be run, exits non-zero, or prints bad JSON
        """
        result = self._run(
            [
                "repo",
                "list",
                "--source",
                "--no-archived",
                "--limit",
                str(self.limit),
                "--json",
                LIST_FIELDS,
            ]
        )

        if result.returncode != 0:
            raise HostError("LIST_FAILED", f"gh command failed: {result.stderr.strip()}")

        try:
            payload = json.loads(result.stdout or "[]")
        except json.JSONDecodeError as e:
            raise HostError("LIST_FAILED", f"Could not parse gh output: {e}") from e

        try:
            records = [_parse_repository(item) for item in payload]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise HostError("LIST_FAILED", f"Unexpected gh output: {e!r}") from e

        logger.info("gh listed %d repositories", len(records))
        # Oldest first, matching the API host
        records.sort(key=lambda r: r.created_at)
        return filter_candidates(records, cutoff)

    def archive_repository(self, record: RepositoryRecord) -> ArchiveResult:
        """
        Archive a repository with ``gh repo archive --yes``.

        Only a zero exit status counts as success; anything else is an error
        carrying gh's stderr verbatim.
        """
        try:
            result = self._run(["repo", "archive", record.full_name, "--yes"])
        except HostError as e:
            return ArchiveResult(status="error", message=e.message)

        if result.returncode == 0:
            return ArchiveResult(status="ok")

        message = result.stderr or result.stdout or f"gh exited with status {result.returncode}"
        return ArchiveResult(status="error", message=message)

    def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        """Run gh with ``args`` and capture its output."""
        cmd = [self.executable, *args]
        log_command(cmd)
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, encoding="utf-8", errors="replace"
            )
        except OSError as e:
            raise HostUnavailableError(
                f"Failed to run {self.executable} CLI. Is it installed? ({e})"
            ) from e
        log_command(cmd, result.returncode)
        return result

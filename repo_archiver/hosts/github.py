"""
GitHub REST API repository host.

Talks to the API directly over httpx, for machines without the gh CLI.
"""

from datetime import datetime
from typing import Any

from repo_archiver.exceptions import HostError, HostUnavailableError
from repo_archiver.hosts.base import filter_candidates, parse_timestamp, require_timestamp
from repo_archiver.logging import get_logger
from repo_archiver.transport import HTTPTransport, RetryConfig
from repo_archiver.types.repos import ArchiveResult, RepositoryRecord

logger = get_logger("host")

PAGE_SIZE = 100


def _parse_repository(data: dict[str, Any]) -> RepositoryRecord:
    """Parse a repository object from the REST API."""
    owner = data.get("owner") or {}
    return RepositoryRecord(
        name=data["name"],
        owner=owner.get("login"),
        created_at=require_timestamp(data["created_at"]),
        pushed_at=parse_timestamp(data.get("pushed_at")),
        description=data.get("description") or None,
        archived=bool(data.get("archived", False)),
    )


class GitHubApiHost:
    """
    Repository host backed by the GitHub REST API.

    Example:
        ```python
        from repo_archiver.hosts import GitHubApiHost

        with GitHubApiHost(token="ghp_...") as host:
            host.verify()
            repos = host.list_repositories(cutoff)
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        limit: int = 200,
        retry_config: RetryConfig | None = None,
        transport: HTTPTransport | None = None,
    ) -> None:
        """
        Initialize the host.

        Args:
            token: GitHub token with repository administration rights
            base_url: API base URL (default: https://api.github.com)
            timeout: Request timeout in seconds
            limit: Maximum number of repositories to list
            retry_config: Retry behavior for read requests
            transport: Preconfigured transport (for tests)
        """
        self.limit = limit
        self._transport = transport or HTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport."""
        return self._transport

    def verify(self) -> None:
        """
        Check that the token is accepted.

        Raises:
            HostUnavailableError: If the API rejects the token or cannot be reached
        """
        try:
            response = self._transport.request("GET", "/user")
        except HostError as e:
            raise HostUnavailableError(f"GitHub API is not usable: {e.message}") from e
        try:
            login = response.json().get("login")
        except (AttributeError, ValueError) as e:
            raise HostUnavailableError("GitHub API returned an unexpected reply to /user") from e
        logger.info("authenticated as %s", login)

    def list_repositories(self, cutoff: datetime) -> list[RepositoryRecord]:
        """
        List owned, non-fork, non-archived repositories created before ``cutoff``.

        Pages through ``/user/repos`` until ``limit`` repositories have been
        seen or the API runs out.

        Raises:
            HostError: On any API failure
        """
        records: list[RepositoryRecord] = []
        page = 1

        while len(records) < self.limit:
            response = self._transport.request(
                "GET",
                "/user/repos",
                params={
                    "affiliation": "owner",
                    "sort": "created",
                    "direction": "asc",
                    "per_page": PAGE_SIZE,
                    "page": page,
                },
            )
            try:
                batch = response.json()
            except ValueError as e:
                raise HostError("LIST_FAILED", f"Could not parse repository listing: {e}") from e
            if not isinstance(batch, list):
                raise HostError("LIST_FAILED", "Unexpected response listing repositories")

            for item in batch:
                try:
                    if item.get("fork") or item.get("archived"):
                        continue
                    records.append(_parse_repository(item))
                except (AttributeError, KeyError, TypeError, ValueError) as e:
                    raise HostError(
                        "LIST_FAILED", f"Unexpected repository entry in listing: {e!r}"
                    ) from e

            if len(batch) < PAGE_SIZE:
                break
            page += 1

        records = records[: self.limit]
        logger.info("API listed %d repositories", len(records))
        return filter_candidates(records, cutoff)

    def archive_repository(self, record: RepositoryRecord) -> ArchiveResult:
        """
        Archive a repository with ``PATCH /repos/{owner}/{name}``.

        The request is never retried. Success requires a 2xx status and a
        body confirming ``archived: true``; anything else is an error
        carrying the raw API message.
        """
        if not record.owner:
            return ArchiveResult(status="error", message=f"Unknown owner for {record.name}")

        try:
            response = self._transport.request(
                "PATCH",
                f"/repos/{record.owner}/{record.name}",
                body={"archived": True},
                retry=False,
            )
        except HostError as e:
            return ArchiveResult(status="error", message=e.message)

        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and data.get("archived") is True:
            return ArchiveResult(status="ok")

        return ArchiveResult(status="error", message=response.text)

    def close(self) -> None:
        """Close the underlying transport."""
        self._transport.close()

    def __enter__(self) -> "GitHubApiHost":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

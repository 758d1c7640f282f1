"""repo-archiver repository hosts."""

from repo_archiver.config import Settings
from repo_archiver.hosts.base import RepositoryHost, filter_candidates, parse_timestamp
from repo_archiver.hosts.gh import GhCliHost
from repo_archiver.hosts.github import GitHubApiHost


def build_host(settings: Settings) -> RepositoryHost:
    """Create the host selected by ``settings.backend``."""
    if settings.backend == "api":
        return GitHubApiHost(
            token=settings.github_token or "",
            base_url=settings.api_base_url,
            timeout=settings.timeout,
            limit=settings.limit,
        )
    return GhCliHost(limit=settings.limit)


__all__ = [
    "RepositoryHost",
    "GhCliHost",
    "GitHubApiHost",
    "build_host",
    "filter_candidates",
    "parse_timestamp",
]

"""
Tests for the command-line entrypoint.

The host and the curses UI are patched out; only startup, exit codes and
the closing summary are exercised.
"""

from unittest.mock import MagicMock, patch

import httpx
import pytest
from typer.testing import CliRunner

from repo_archiver.app import AgePicker, ArchiverApp, Selecting
from repo_archiver.cli import EXIT_CONFIG_ERROR, EXIT_HOST_ERROR, app
from repo_archiver.exceptions import HostError, HostUnavailableError
from repo_archiver.hosts.github import GitHubApiHost
from repo_archiver.transport import HTTPTransport, RetryConfig

runner = CliRunner()

ENV_VARS = [
    "REPO_ARCHIVER_BACKEND",
    "REPO_ARCHIVER_LIMIT",
    "REPO_ARCHIVER_CONCURRENCY",
    "REPO_ARCHIVER_DELAY",
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "GITHUB_API_URL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def build_host(mock_host):
    with patch("repo_archiver.cli.build_host", return_value=mock_host) as mocked:
        yield mocked


@pytest.fixture
def run_tui():
    with patch("repo_archiver.cli.run_tui") as mocked:
        yield mocked


def make_api_host(handler) -> GitHubApiHost:
    base_url = "https://api.github.test"
    client = httpx.Client(base_url=base_url, transport=httpx.MockTransport(handler))
    transport = HTTPTransport(
        base_url=base_url,
        token="ghp_test",
        retry_config=RetryConfig(max_backoff=0.0),
        client=client,
    )
    return GitHubApiHost(token="ghp_test", transport=transport)


class TestConfigurationErrors:
    @pytest.mark.parametrize("age", ["8x", "0y", "", "soon"])
    def test_bad_age(self, age: str, build_host: MagicMock, run_tui: MagicMock) -> None:
        result = runner.invoke(app, ["--age", age])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Error:" in result.output
        build_host.assert_not_called()
        run_tui.assert_not_called()

    def test_unknown_backend(self, build_host: MagicMock, run_tui: MagicMock) -> None:
        result = runner.invoke(app, ["--backend", "gitlab"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Invalid backend" in result.output

    def test_api_backend_needs_token(self, build_host: MagicMock, run_tui: MagicMock) -> None:
        result = runner.invoke(app, ["--backend", "api"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "GITHUB_TOKEN" in result.output

    def test_bad_env_value(self, monkeypatch, build_host: MagicMock, run_tui: MagicMock) -> None:
        monkeypatch.setenv("REPO_ARCHIVER_LIMIT", "lots")

        result = runner.invoke(app, [])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "REPO_ARCHIVER_LIMIT" in result.output


class TestHostErrors:
    def test_verify_failure(self, mock_host, build_host: MagicMock, run_tui: MagicMock) -> None:
        mock_host.configure_verify(HostUnavailableError("Failed to run gh CLI. Is it installed?"))

        result = runner.invoke(app, ["--age", "5y"])

        assert result.exit_code == EXIT_HOST_ERROR
        assert "Is it installed?" in result.output
        assert not mock_host.was_called("list_repositories")
        run_tui.assert_not_called()

    def test_listing_failure(self, mock_host, build_host: MagicMock, run_tui: MagicMock) -> None:
        mock_host.configure_list(error=HostError("LIST_FAILED", "gh command failed: HTTP 502"))

        result = runner.invoke(app, ["--age", "5y"])

        assert result.exit_code == EXIT_HOST_ERROR
        assert "gh command failed" in result.output
        run_tui.assert_not_called()

    def test_non_json_api_reply(self, run_tui: MagicMock) -> None:
        replies = {
            "/user": httpx.Response(200, json={"login": "octo"}),
            "/user/repos": httpx.Response(200, text="<html>captive portal</html>"),
        }
        host = make_api_host(lambda request: replies[request.url.path])

        with patch("repo_archiver.cli.build_host", return_value=host):
            result = runner.invoke(
                app, ["--age", "5y", "--backend", "api"], env={"GITHUB_TOKEN": "ghp_test"}
            )

        assert result.exit_code == EXIT_HOST_ERROR
        assert "Error:" in result.output
        run_tui.assert_not_called()
        assert host.transport._client.is_closed


class TestStartup:
    def test_age_flag_fetches_before_the_ui(
        self, mock_host, build_host: MagicMock, run_tui: MagicMock
    ) -> None:
        result = runner.invoke(app, ["--age", "5y"])

        assert result.exit_code == 0
        assert "Finding repos older than 5 years..." in result.output
        assert "Found 3 repos. Launching TUI..." in result.output
        archiver = run_tui.call_args.args[0]
        assert isinstance(archiver, ArchiverApp)
        assert isinstance(archiver.screen, Selecting)
        assert mock_host.call_count("list_repositories") == 1

    def test_empty_inventory_exits_cleanly(
        self, mock_host, build_host: MagicMock, run_tui: MagicMock
    ) -> None:
        result = runner.invoke(app, ["--age", "50y"])

        assert result.exit_code == 0
        assert "No repos found older than 50 years." in result.output
        run_tui.assert_not_called()

    def test_without_age_starts_on_picker(
        self, mock_host, build_host: MagicMock, run_tui: MagicMock
    ) -> None:
        result = runner.invoke(app, [])

        assert result.exit_code == 0
        archiver = run_tui.call_args.args[0]
        assert isinstance(archiver.screen, AgePicker)
        assert not mock_host.was_called("list_repositories")

    def test_options_reach_settings(self, build_host: MagicMock, run_tui: MagicMock) -> None:
        runner.invoke(app, ["--dry-run", "--limit", "25", "-j", "3", "--age", "5y"])

        settings = build_host.call_args.args[0]
        assert settings.dry_run
        assert settings.limit == 25
        assert settings.concurrency == 3
        assert settings.backend == "gh"
        archiver = run_tui.call_args.args[0]
        assert archiver.executor.concurrency == 3
        assert archiver.executor.delay == 0.0


class TestSummary:
    @staticmethod
    def _archive_first(archiver: ArchiverApp) -> None:
        archiver.toggle()
        archiver.confirm()
        archiver.confirm()
        archiver.executor.close()
        list(archiver.pump())

    def test_dry_run_summary(self, mock_host, build_host: MagicMock, run_tui: MagicMock) -> None:
        run_tui.side_effect = self._archive_first

        result = runner.invoke(app, ["--dry-run", "--age", "5y"])

        assert result.exit_code == 0
        assert "Would archive 1 of 1 repos." in result.output
        assert not mock_host.was_called("archive_repository")

    def test_failure_listed(self, mock_host, build_host: MagicMock, run_tui: MagicMock) -> None:
        mock_host.fail_archive("alpha", "HTTP 403: Must have admin rights\n")
        run_tui.side_effect = self._archive_first

        result = runner.invoke(app, ["--age", "5y"])

        assert result.exit_code == 0
        assert "Archived 0 of 1 repos." in result.output
        assert "alpha: HTTP 403: Must have admin rights" in result.output
        assert mock_host.archived_names() == ["alpha"]

    def test_quit_without_archiving_prints_nothing(
        self, build_host: MagicMock, run_tui: MagicMock
    ) -> None:
        result = runner.invoke(app, ["--age", "5y"])

        assert "Archived" not in result.output
        assert "Would archive" not in result.output


def test_host_closed_after_session(mock_host, run_tui: MagicMock) -> None:
    mock_host.close = MagicMock()

    with patch("repo_archiver.cli.build_host", return_value=mock_host):
        result = runner.invoke(app, ["--age", "5y"])

    assert result.exit_code == 0
    mock_host.close.assert_called_once_with()

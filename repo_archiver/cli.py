"""repo-archiver command-line entrypoint."""

import logging
from pathlib import Path
from typing import Optional

import typer

from repo_archiver.age import Age
from repo_archiver.app import ArchiverApp
from repo_archiver.config import Settings
from repo_archiver.exceptions import ConfigurationError, HostError
from repo_archiver.executor import ArchiveExecutor
from repo_archiver.hosts import build_host
from repo_archiver.logging import configure_logging, get_logger
from repo_archiver.terminal import run_tui
from repo_archiver.types.outcomes import OutcomeState

EXIT_HOST_ERROR = 1
EXIT_CONFIG_ERROR = 2

logger = get_logger()

app = typer.Typer(
    help="Interactive CLI to archive old GitHub repos.",
    add_completion=False,
)


def _fail(message: str, code: int) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=code)


def _print_summary(archiver: ArchiverApp) -> None:
    outcomes = archiver.outcomes
    if not outcomes:
        return
    succeeded = sum(1 for o in outcomes if o.state is OutcomeState.SUCCEEDED)
    verb = "Would archive" if archiver.dry_run else "Archived"
    typer.echo(f"{verb} {succeeded} of {len(outcomes)} repos.")
    for outcome in outcomes:
        if outcome.state is OutcomeState.FAILED:
            typer.echo(f"  {outcome.name}: {(outcome.reason or '').strip()}", err=True)


@app.command()
def main(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would be archived without making changes"
    ),
    age: Optional[str] = typer.Option(
        None,
        "--age",
        help="Archive repos older than this age (e.g. 8y, 6m). Skips the interactive picker.",
    ),
    backend: Optional[str] = typer.Option(
        None, "--backend", help="Repository host: gh (GitHub CLI) or api (REST API)"
    ),
    limit: Optional[int] = typer.Option(None, "--limit", help="Maximum repos to list"),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", "-j", help="Archive calls to run in parallel"
    ),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Write logs to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging (with --log-file)"),
) -> None:
    """Pick repositories older than a given age and archive them."""
    try:
        settings = Settings.from_env(
            dry_run=dry_run,
            backend=backend.lower() if backend else None,
            limit=limit,
            concurrency=concurrency,
            log_file=log_file,
            verbose=verbose,
        )
        resolved_age = Age.parse(age) if age is not None else None
    except ConfigurationError as e:
        raise _fail(e.message, EXIT_CONFIG_ERROR)

    if settings.log_file is not None:
        configure_logging(
            level=logging.DEBUG if settings.verbose else logging.INFO,
            handler=logging.FileHandler(settings.log_file),
        )

    host = build_host(settings)
    executor = ArchiveExecutor(
        host,
        dry_run=settings.dry_run,
        concurrency=settings.concurrency,
        delay=0.0 if settings.dry_run else settings.delay,
    )

    try:
        host.verify()

        if resolved_age is not None:
            typer.echo(f"Finding repos older than {resolved_age.display()}...")
            archiver = ArchiverApp(host, executor, age=resolved_age)
            if not archiver.inventory:
                typer.echo(f"No repos found older than {resolved_age.display()}.")
                return
            typer.echo(f"Found {len(archiver.inventory)} repos. Launching TUI...")
        else:
            archiver = ArchiverApp(host, executor)

        run_tui(archiver)
    except HostError as e:
        logger.error("host error: %s", e)
        raise _fail(e.message, EXIT_HOST_ERROR)
    finally:
        executor.close()
        close = getattr(host, "close", None)
        if close is not None:
            close()

    _print_summary(archiver)


if __name__ == "__main__":
    app()

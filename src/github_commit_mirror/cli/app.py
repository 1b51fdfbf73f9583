"""Main CLI application for GitHub Commit Mirror."""

from pathlib import Path
from typing import Annotated

import typer

from github_commit_mirror import __version__
from github_commit_mirror.cli import commits as commits_cmd
from github_commit_mirror.cli import db as db_cmd
from github_commit_mirror.cli import github as github_cmd
from github_commit_mirror.cli import repos as repos_cmd
from github_commit_mirror.cli import sync as sync_cmd
from github_commit_mirror.cli.common import console
from github_commit_mirror.config import get_settings
from github_commit_mirror.logging import setup_logging

app = typer.Typer(
    name="ghmirror",
    help="Local mirror of GitHub commit history.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"ghmirror version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """GitHub Commit Mirror - Keep a local copy of repositories' commit history."""
    settings = get_settings()
    log_config = settings.logging

    # Setup logging with CLI overrides
    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


# Register subcommands
app.add_typer(db_cmd.app, name="db")
app.add_typer(repos_cmd.app, name="repos")
app.add_typer(sync_cmd.app, name="sync")
app.add_typer(commits_cmd.app, name="commits")
app.add_typer(github_cmd.app, name="github")


if __name__ == "__main__":
    app()

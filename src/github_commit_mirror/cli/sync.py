"""Sync commands for GitHub Commit Mirror."""

import json
from typing import Any

import typer

from github_commit_mirror.cli.common import (
    OutputFormatOption,
    RepoArgument,
    console,
    run_async_command,
    validate_repo,
)
from github_commit_mirror.db import RepositoryRepository, get_session
from github_commit_mirror.github import CommitSynchronizer, GitHubClient, OutputFormat

app = typer.Typer(help="Mirror commit history from GitHub")


def _print_repository_line(repo_data: dict[str, Any]) -> None:
    console.print(
        f"  {repo_data.get('repository', '?')}: "
        f"{repo_data.get('observed', 0)} listed, "
        f"[green]+{repo_data.get('created', 0)}[/green] "
        f"[red]-{repo_data.get('pruned', 0)}[/red] "
        f"~{repo_data.get('reordered', 0)} reordered "
        f"[{repo_data.get('duration_seconds', 0):.1f}s]"
    )


@app.command("all")
def sync_all_repositories(
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Sync every active repository, ordered by project then name.

    The first error stops the run; repositories after it are not synced.

    Examples:
        ghmirror sync all
        ghmirror sync all --format json
        ghmirror -v sync all  # Debug logging
    """

    async def _sync() -> dict[str, Any]:
        async with GitHubClient() as client:
            async with get_session() as session:
                synchronizer = CommitSynchronizer.from_session(client, session)
                result = await synchronizer.synchronize()
                return result.to_dict()

    if output_format == OutputFormat.TEXT:
        console.print("[dim]Syncing active repositories...[/dim]")
        console.print()

    result = run_async_command(_sync(), error_prefix="Sync failed")

    # JSON output
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
        return

    # Text output
    summary = result.get("summary", {})
    console.print("[bold]Sync Complete[/bold]")
    console.print()
    console.print(f"  [bold]Repositories:[/bold]    {summary.get('total_repos', 0)}")
    console.print(f"  Commits listed:   {summary.get('total_observed', 0)}")
    console.print(f"  [green]Created:[/green]          {summary.get('total_created', 0)}")
    console.print(f"  [red]Pruned:[/red]           {summary.get('total_pruned', 0)}")
    console.print(f"  Duration: {summary.get('duration_seconds', 0):.1f}s")

    repositories = result.get("repositories", [])
    if repositories:
        console.print()
        console.print("[bold]Per-Repository Details:[/bold]")
        for repo_data in repositories:
            _print_repository_line(repo_data)


@app.command("repo")
def sync_repository(
    repo: RepoArgument,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Sync a single registered repository.

    Examples:
        ghmirror sync repo octo-org/octo-repo
        ghmirror sync repo octo-org/octo-repo --format json
    """
    owner, name = validate_repo(repo)

    async def _sync() -> dict[str, Any] | None:
        async with GitHubClient() as client:
            async with get_session() as session:
                repository = await RepositoryRepository(session).get_by_owner_and_name(
                    owner, name
                )
                if repository is None:
                    return None
                synchronizer = CommitSynchronizer.from_session(client, session)
                result = await synchronizer.synchronize_repository(repository)
                return result.to_dict()

    result = run_async_command(_sync(), error_prefix="Sync failed")
    if result is None:
        console.print(
            f"[red]Error:[/red] Repository {repo} not found in database "
            "(register it with: ghmirror repos add)"
        )
        raise typer.Exit(1)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
        return

    console.print("[bold]Sync Complete[/bold]")
    console.print()
    console.print(f"  Commits listed:   {result.get('observed', 0)}")
    console.print(f"  [green]Created:[/green]          {result.get('created', 0)}")
    console.print(f"  [dim]Already mirrored:[/dim] {result.get('skipped', 0)}")
    console.print(f"  [red]Pruned:[/red]           {result.get('pruned', 0)}")
    console.print(f"  Reordered:        {result.get('reordered', 0)}")
    console.print(f"  Duration: {result.get('duration_seconds', 0):.1f}s")

"""Commands for browsing mirrored commits."""

import typer
from rich.table import Table

from github_commit_mirror.cli.common import (
    RepoArgument,
    console,
    run_async_command,
    validate_repo,
)
from github_commit_mirror.db import CommitRepository, RepositoryRepository, get_session
from github_commit_mirror.schemas import CommitRead

app = typer.Typer(help="Browse mirrored commits")


@app.command("list")
def list_commits(
    repo: RepoArgument,
    limit: int = typer.Option(
        20,
        "--limit",
        "-n",
        min=1,
        help="Maximum number of commits to show",
    ),
) -> None:
    """Show a repository's mirrored commits, newest first.

    Examples:
        ghmirror commits list octo-org/octo-repo
        ghmirror commits list octo-org/octo-repo --limit 100
    """
    owner, name = validate_repo(repo)

    async def _list() -> tuple[list[CommitRead], int] | None:
        async with get_session() as session:
            repository = await RepositoryRepository(session).get_by_owner_and_name(owner, name)
            if repository is None:
                return None
            commit_repository = CommitRepository(session)
            commits = await commit_repository.list_for_repository(repository.id, limit=limit)
            total = await commit_repository.count_for_repository(repository.id)
            return CommitRead.from_orm_list(commits), total

    result = run_async_command(_list())
    if result is None:
        console.print(f"[red]Error:[/red] Repository {repo} not found in database")
        raise typer.Exit(1)

    commits, total = result
    if not commits:
        console.print(f"[dim]No commits mirrored for {repo}[/dim]")
        return

    table = Table(title=f"Commits in {repo}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("SHA", style="cyan")
    table.add_column("Author")
    table.add_column("Date")
    table.add_column("Subject", max_width=60)
    table.add_column("+/-", justify="right")

    for commit in commits:
        table.add_row(
            str(commit.sort),
            commit.short_sha,
            commit.author_name,
            f"{commit.authored_at:%Y-%m-%d %H:%M}",
            commit.subject,
            f"+{commit.additions}/-{commit.deletions}",
        )

    console.print(table)
    if total > len(commits):
        console.print(f"  ... and {total - len(commits)} more")

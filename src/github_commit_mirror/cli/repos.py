"""Commands for managing the set of mirrored repositories."""

import typer
from rich.table import Table

from github_commit_mirror.cli.common import (
    RepoArgument,
    console,
    run_async_command,
    validate_repo,
)
from github_commit_mirror.db import RepositoryRepository, get_session
from github_commit_mirror.schemas import RepositoryCreate, RepositoryRead

app = typer.Typer(help="Manage mirrored repositories")


@app.command("add")
def add_repository(
    repo: RepoArgument,
    project: str = typer.Option(
        ...,
        "--project",
        "-p",
        help="Project to group the repository under",
    ),
) -> None:
    """Register a repository for mirroring.

    Examples:
        ghmirror repos add octo-org/octo-repo --project octo
    """
    owner, name = validate_repo(repo)
    data = RepositoryCreate(owner=owner, name=name, project=project)

    async def _add() -> tuple[RepositoryRead, bool]:
        async with get_session() as session:
            repository, created = await RepositoryRepository(session).get_or_create(
                data.owner, data.name, data.project
            )
            return RepositoryRead.from_orm(repository), created

    repository, created = run_async_command(_add())
    if created:
        console.print(f"[green]Added[/green] {repository.full_name} to project {project}")
    else:
        console.print(f"[dim]{repository.full_name} is already registered[/dim]")


@app.command("list")
def list_repositories() -> None:
    """List active repositories in sync order (project, then name).

    Examples:
        ghmirror repos list
    """

    async def _list() -> list[tuple[str, str, str]]:
        async with get_session() as session:
            repositories = await RepositoryRepository(session).get_sorted_by_project_and_name()
            return [
                (
                    r.project.name,
                    r.full_name,
                    f"{r.last_synced_at:%Y-%m-%d %H:%M}" if r.last_synced_at else "never",
                )
                for r in repositories
            ]

    rows = run_async_command(_list())
    if not rows:
        console.print("[dim]No repositories registered[/dim]")
        return

    table = Table(title="Mirrored Repositories")
    table.add_column("Project", style="bold")
    table.add_column("Repository", style="cyan")
    table.add_column("Last Synced")
    for row in rows:
        table.add_row(*row)
    console.print(table)


def _set_active(repo: str, is_active: bool) -> None:
    owner, name = validate_repo(repo)

    async def _update() -> bool:
        async with get_session() as session:
            repo_repository = RepositoryRepository(session)
            repository = await repo_repository.get_by_owner_and_name(owner, name)
            if repository is None:
                return False
            await repo_repository.set_active(repository.id, is_active)
            return True

    if not run_async_command(_update()):
        console.print(f"[red]Error:[/red] Repository {repo} not found in database")
        raise typer.Exit(1)

    state = "activated" if is_active else "deactivated"
    console.print(f"{owner}/{name} {state}")


@app.command("deactivate")
def deactivate_repository(repo: RepoArgument) -> None:
    """Stop mirroring a repository (its commits are kept).

    Examples:
        ghmirror repos deactivate octo-org/octo-repo
    """
    _set_active(repo, False)


@app.command("activate")
def activate_repository(repo: RepoArgument) -> None:
    """Resume mirroring a previously deactivated repository.

    Examples:
        ghmirror repos activate octo-org/octo-repo
    """
    _set_active(repo, True)

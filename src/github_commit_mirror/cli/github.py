"""GitHub API verification commands."""

from datetime import UTC, datetime

import typer
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from github_commit_mirror.cli.common import console, run_async_command
from github_commit_mirror.config import get_settings
from github_commit_mirror.github import (
    GitHubAuthenticationError,
    GitHubClient,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from github_commit_mirror.schemas import parse_repo_string

app = typer.Typer(help="GitHub API commands")


@app.command("test")
def test_connection(
    repo: str = typer.Option(
        "octocat/Hello-World",
        "--repo",
        "-r",
        help="Repository to test (owner/name format)",
    ),
    sha: str | None = typer.Option(
        None,
        "--sha",
        "-s",
        help="Specific commit SHA to fetch (tests full commit details)",
    ),
) -> None:
    """Test GitHub API connectivity and token validity.

    Examples:
        ghmirror github test
        ghmirror github test --repo octo-org/octo-repo
        ghmirror github test --sha 6dcb09b5b57875f334f61aebed695e2e4193db5e
    """

    async def _test() -> None:
        settings = get_settings()

        # Validate token exists
        if not settings.github_token:
            console.print("[red]Error:[/red] GITHUB_TOKEN not set in environment")
            raise typer.Exit(1)

        try:
            owner, name = parse_repo_string(repo)
        except ValueError:
            console.print("[red]Error:[/red] Invalid repo format. Use owner/name")
            raise typer.Exit(1) from None

        try:
            async with GitHubClient() as client:
                # 1. Check rate limit
                console.print("[bold]Checking rate limit...[/bold]")
                rate = await client.get_rate_limit()
                reset_time = rate["reset"]
                if isinstance(reset_time, datetime):
                    reset_str = reset_time.strftime("%H:%M:%S UTC")
                else:
                    reset_str = str(reset_time)
                console.print(
                    f"  Rate limit: {rate['remaining']}/{rate['limit']} (resets at {reset_str})"
                )

                if isinstance(rate["remaining"], int) and rate["remaining"] < 10:
                    console.print("[yellow]Warning:[/yellow] Low rate limit remaining")

                # 2. First page of the commit listing
                console.print(f"\n[bold]Fetching commits from {repo}...[/bold]")
                first_page: list[str] = []
                async for page in client.iter_commit_pages(owner, name, per_page=5):
                    first_page = [summary.sha for summary in page]
                    break
                console.print(f"  Latest {len(first_page)} commit(s):")
                for listed_sha in first_page:
                    console.print(f"    - {listed_sha[:12]}")

                # 3. Optionally test full commit fetch
                target = sha or (first_page[0] if first_page else None)
                if target:
                    console.print(f"\n[bold]Fetching commit {target[:12]} details...[/bold]")
                    detail = await client.get_commit(owner, name, target)

                    console.print(f"  Author: {detail.commit.author.name}")
                    console.print(f"  Date: {detail.commit.author.date:%Y-%m-%d %H:%M:%S %z}")
                    console.print(
                        f"  Stats: +{detail.stats.additions}/-{detail.stats.deletions} "
                        f"in {len(detail.files)} files"
                    )
                    if detail.files:
                        console.print("  Files:")
                        for f in detail.files[:5]:
                            console.print(f"    - {f.filename} ({f.status})")
                        if len(detail.files) > 5:
                            console.print(f"    ... and {len(detail.files) - 5} more")

                console.print("\n[green]GitHub API connection verified![/green]")

        except GitHubAuthenticationError:
            console.print("[red]Error:[/red] Invalid GitHub token")
            raise typer.Exit(1) from None
        except GitHubRateLimitError as e:
            console.print("[red]Error:[/red] Rate limit exceeded")
            if e.reset_at:
                console.print(f"  Resets at: {e.reset_at.strftime('%H:%M:%S UTC')}")
            raise typer.Exit(1) from None
        except GitHubNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

    run_async_command(_test())


def _format_time_remaining(seconds: int) -> str:
    """Format seconds as human-readable time."""
    if seconds <= 0:
        return "Now"
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"


@app.command("rate-limit")
def show_rate_limit() -> None:
    """Show current GitHub API core rate limit status.

    A full sync makes one listing request per 100 commits plus one request
    per new commit, so first syncs of large repositories need headroom.

    Examples:
        ghmirror github rate-limit
    """

    async def _check() -> dict[str, int | datetime]:
        settings = get_settings()

        if not settings.github_token:
            console.print("[red]Error:[/red] GITHUB_TOKEN not set in environment")
            raise typer.Exit(1)

        async with GitHubClient() as client:
            return await client.get_rate_limit()

    rate = run_async_command(_check(), error_prefix="Rate limit check failed")

    limit = int(rate["limit"]) if isinstance(rate["limit"], int) else 0
    remaining = int(rate["remaining"]) if isinstance(rate["remaining"], int) else 0
    reset = rate["reset"]
    seconds_left = (
        int((reset - datetime.now(UTC)).total_seconds()) if isinstance(reset, datetime) else 0
    )
    remaining_pct = (remaining / limit * 100) if limit else 0.0

    # Format remaining percentage with color
    if remaining_pct > 50:
        remaining_str = f"[green]{remaining_pct:.1f}%[/green]"
    elif remaining_pct > 20:
        remaining_str = f"[yellow]{remaining_pct:.1f}%[/yellow]"
    else:
        remaining_str = f"[red]{remaining_pct:.1f}%[/red]"

    table = Table(title="GitHub API Rate Limit")
    table.add_column("Pool", style="bold")
    table.add_column("Remaining", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Remaining %", justify="right")
    table.add_column("Resets In", justify="right")
    table.add_row(
        "core",
        str(remaining),
        str(limit),
        remaining_str,
        _format_time_remaining(seconds_left),
    )

    console.print()
    console.print(table)

    console.print()
    with Progress(
        TextColumn("[bold]Core quota:[/bold]"),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TextColumn(f"{remaining_pct:.1f}% remaining"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("", total=100)
        progress.update(task, completed=remaining_pct)
        # Force display since transient
        progress.refresh()

    if remaining == 0:
        console.print(
            f"\n[red]Rate limit exhausted![/red] "
            f"Wait {_format_time_remaining(seconds_left)} before syncing."
        )

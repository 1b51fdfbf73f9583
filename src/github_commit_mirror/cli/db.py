"""Database management commands."""

import typer

from github_commit_mirror.cli.common import console, run_async_command
from github_commit_mirror.db import create_tables, dispose_engine

app = typer.Typer(help="Database management")


@app.command("init")
def init_database() -> None:
    """Create all tables in the configured database.

    Intended for local setup and tests; deployed databases are managed
    with Alembic migrations.

    Examples:
        ghmirror db init
    """

    async def _init() -> list[str]:
        try:
            return await create_tables()
        finally:
            await dispose_engine()

    tables = run_async_command(_init(), error_prefix="Database init failed")
    console.print(f"[green]Database ready[/green] ({len(tables)} tables)")
    for table in sorted(tables):
        console.print(f"  - {table}")

"""Command line entry point: database migrations and the HTTP server."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.table import Table

from src.crud_api.core.services import DbManageService, DbSessionService
from src.crud_api.runtime.context import get_config
from src.crud_api.runtime.init_db import init_db

console = Console()

app = typer.Typer(
    help="Users CRUD API - database and server management",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
db_app = typer.Typer(help="Manage the database schema")
app.add_typer(db_app, name="db")


@contextmanager
def db_manage_service() -> Iterator[DbManageService]:
    """Yield a migration service whose engine is disposed afterwards."""
    database_service = DbSessionService()
    try:
        yield DbManageService(database_service.engine)
    finally:
        database_service.dispose()


@db_app.command("upgrade")
def upgrade() -> None:
    """Apply all pending migrations."""
    try:
        applied = init_db()
    except Exception as e:
        console.print(f"[red]❌ Migration failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    if not applied:
        console.print("[yellow]Database schema is already up to date[/yellow]")
        return
    for name in applied:
        console.print(f"[green]✅ Applied {name}[/green]")


@db_app.command("downgrade")
def downgrade(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Revert the most recently applied migration."""
    if not force and not typer.confirm("This drops schema objects and their data. Continue?"):
        raise typer.Abort()

    try:
        with db_manage_service() as service:
            reverted = service.downgrade()
    except Exception as e:
        console.print(f"[red]❌ Downgrade failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    if reverted is None:
        console.print("[yellow]No applied migrations to revert[/yellow]")
    else:
        console.print(f"[green]✅ Reverted {reverted}[/green]")


@db_app.command("status")
def status() -> None:
    """Show which migrations are applied."""
    table = Table(title="Migrations")
    table.add_column("Name", style="cyan")
    table.add_column("Applied", style="yellow")
    with db_manage_service() as service:
        migrations = service.status()
    for name, applied in migrations:
        table.add_row(name, "✅" if applied else "❌")
    console.print(table)


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    cfg = get_config().app
    uvicorn.run(
        "src.crud_api.api.http.app:create_app",
        factory=True,
        host=host or cfg.host,
        port=port or cfg.port,
        reload=reload,
        access_log=False,
    )


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

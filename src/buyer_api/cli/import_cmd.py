"""Import CLI command for buyer CSV files."""

import asyncio
from pathlib import Path

import typer

import_app = typer.Typer()


@import_app.command("csv")
def import_csv(
    file: Path = typer.Argument(..., help="Path to buyer CSV file", exists=True, dir_okay=False),  # noqa: B008
    owner: str | None = typer.Option(None, "--owner", help="Owner id for imported buyers"),
) -> None:
    """Import buyers from a CSV file (all rows or none)."""
    success = asyncio.run(_import_csv(file, owner))
    if not success:
        raise typer.Exit(code=1)


async def _import_csv(file_path: Path, owner: str | None) -> bool:
    """Async implementation of buyer import."""
    from buyer_api.core.config import get_settings
    from buyer_api.core.database import create_all_tables, dispose_engine, get_session_factory, init_engine
    from buyer_api.core.errors import ImportRejectedError, PersistenceError
    from buyer_api.services.import_service import import_buyers_csv

    settings = get_settings()
    engine = init_engine(settings.database_url)

    try:
        if engine.dialect.name == "sqlite":
            await create_all_tables()
        factory = get_session_factory()
        async with factory() as session:
            try:
                result = await import_buyers_csv(
                    session,
                    filename=file_path.name,
                    content=file_path.read_bytes(),
                    owner_id=owner or settings.default_owner_id,
                    max_bytes=settings.import_max_file_size_bytes,
                    max_rows=settings.import_max_rows,
                )
            except ImportRejectedError as exc:
                typer.echo(f"Import rejected: {exc.message}", err=True)
                return False
            except PersistenceError:
                typer.echo("Import failed: could not save buyers", err=True)
                return False

        typer.echo(f"\nImport {'completed' if result.success else 'failed'}:")
        typer.echo(f"  Total rows:  {result.total_rows}")
        typer.echo(f"  Valid rows:  {result.valid_rows}")
        typer.echo(f"  Inserted:    {result.inserted_count}")
        for error in result.errors:
            typer.echo(f"  Row {error.row}: {error.message}")
        return result.success
    finally:
        await dispose_engine()

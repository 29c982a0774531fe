"""Export CLI command for buyer CSV files."""

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import typer

if TYPE_CHECKING:
    from buyer_api.lib.exporter import BuyerFilters

export_app = typer.Typer()


@export_app.command("csv")
def export_csv(
    search: str | None = typer.Option(None, "--search", help="Free-text search term"),
    city: str | None = typer.Option(None, "--city", help="Filter by city"),
    property_type: str | None = typer.Option(None, "--property-type", help="Filter by property type"),
    status_filter: str | None = typer.Option(None, "--status", help="Filter by status"),
    timeline: str | None = typer.Option(None, "--timeline", help="Filter by timeline"),
    output: Path | None = typer.Option(None, "--output", help="Output file or directory"),  # noqa: B008
) -> None:
    """Export matching buyers to a CSV file."""
    from buyer_api.lib.exporter import parse_filters

    try:
        filters = parse_filters(
            search=search,
            city=city,
            property_type=property_type,
            status=status_filter,
            timeline=timeline,
        )
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from None

    asyncio.run(_export_csv(filters, output))


async def _export_csv(filters: "BuyerFilters", output: Path | None) -> None:
    """Async implementation of buyer export."""
    from buyer_api.core.config import get_settings
    from buyer_api.core.database import create_all_tables, dispose_engine, get_session_factory, init_engine
    from buyer_api.services.export_service import export_buyers_csv

    settings = get_settings()
    engine = init_engine(settings.database_url)

    try:
        if engine.dialect.name == "sqlite":
            await create_all_tables()
        factory = get_session_factory()
        async with factory() as session:
            result = await export_buyers_csv(session, filters)

        if output is None:
            path = Path(result.filename)
        elif output.is_dir():
            path = output / result.filename
        else:
            path = output
        path.write_text(result.content, encoding="utf-8")

        typer.echo("\nExport completed:")
        typer.echo(f"  Records:    {result.record_count}")
        typer.echo(f"  File path:  {path}")
    finally:
        await dispose_engine()

"""Typer CLI root application with serve command."""

import typer

from buyer_api.core.config import get_settings
from buyer_api.core.logging import setup_logging

app = typer.Typer(name="buyer-api", help="Buyer lead intake CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_output=settings.log_json)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "buyer_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from buyer_api.cli.db_cmd import db_app
    from buyer_api.cli.export_cmd import export_app
    from buyer_api.cli.import_cmd import import_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(import_app, name="import", help="Buyer CSV import commands")
    app.add_typer(export_app, name="export", help="Buyer CSV export commands")


_register_subcommands()

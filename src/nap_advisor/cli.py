"""CLI entry point for nap-advisor."""

import asyncio
import json

import typer
import uvicorn

from nap_advisor import __version__
from nap_advisor.core.config import settings
from nap_advisor.services.fetch_errors import OuraAPIError

app = typer.Typer(
    name="nap-advisor",
    help="Does Emily need a nap? Oura-backed nap advisory server",
    no_args_is_help=True,
)


@app.command()
def serve(
    host: str = typer.Option(None, help="Host to bind to (overrides config)"),
    port: int = typer.Option(None, help="Port to bind to (overrides config)"),
    reload: bool = typer.Option(False, help="Enable auto-reload for development"),
) -> None:
    """Start the API server.

    Example:
        nap-advisor serve
        nap-advisor serve --host 0.0.0.0 --port 8080 --reload
    """
    uvicorn.run(
        "nap_advisor.app:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def status() -> None:
    """Fetch sleep data and print the current advisory as JSON."""
    from nap_advisor.app import build_nap_service

    service = build_nap_service()
    try:
        advisory, _ = asyncio.run(service.get_status())
    except OuraAPIError as e:
        typer.echo(f"Error ({e.error_type.value}): {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(json.dumps(advisory.model_dump(mode="json"), indent=2))


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"nap-advisor v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()

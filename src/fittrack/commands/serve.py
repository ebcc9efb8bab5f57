"""JSON API server command."""

import click

from ..config import settings
from .base import ensure_initialized


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind")
@click.option("--port", "-p", default=8000, type=int, show_default=True, help="Port to bind")
@click.option("--reload", is_flag=True, help="Restart on code changes (development)")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, reload: bool):
    """Serve the fittrack JSON API with uvicorn.

    Interactive API docs are available under /docs once it is running.

    Examples:

        fittrack serve

        fittrack serve --port 3000 --reload
    """
    ensure_initialized(ctx)

    import uvicorn

    from ..web import create_app

    click.echo(click.style("fittrack API", fg="green") + f" on http://{host}:{port}")
    click.echo(f"  Docs:  http://{host}:{port}/docs")
    click.echo(f"  Data:  {settings.data_dir}")
    click.echo("Press Ctrl+C to stop.")

    # reload needs an import string; uvicorn calls the factory itself
    uvicorn.run(
        "fittrack.web:create_app" if reload else create_app(),
        host=host,
        port=port,
        reload=reload,
        factory=reload,
        log_level=settings.log_level.lower(),
    )

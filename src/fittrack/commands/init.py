"""Initialize project command."""

import click

from ..config import settings
from ..db import get_db_path, init_db
from .base import async_command, echo_info, echo_success


@click.command()
@async_command
async def init():
    """Initialize the fittrack data directory and database.

    This creates the data directory and the SQLite document store schema.
    Running it again is harmless.
    """
    data_dir = settings.data_dir
    db_path = get_db_path(data_dir)

    echo_info(f"Initializing fittrack in {data_dir}")

    await init_db(db_path)
    echo_success("Database initialized")

    click.echo()
    click.echo("fittrack is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Load some demo data:")
    click.echo("     fittrack seed")
    click.echo()
    click.echo("  2. Look at your training:")
    click.echo("     fittrack analytics summary")
    click.echo("     fittrack analytics month")

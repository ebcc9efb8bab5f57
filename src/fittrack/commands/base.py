"""Shared CLI utilities."""

import asyncio
from functools import wraps

import click

from ..config import settings
from ..db import DocumentStore, get_db_path


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


user_option = click.option(
    "--user",
    "-u",
    "user_id",
    default=lambda: settings.default_user_id,
    show_default="settings.default_user_id",
    help="User whose data to work with",
)


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path()
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'fittrack init' first."
        )
        ctx.exit(1)


def get_store() -> DocumentStore:
    return DocumentStore(get_db_path())


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format rows as a left-aligned text table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    def render(cells) -> str:
        return "".join(str(c).ljust(widths[i] + padding) for i, c in enumerate(cells))

    lines = [render(headers), "".join("-" * w + " " * padding for w in widths)]
    lines.extend(render(row) for row in rows)
    return "\n".join(line.rstrip() for line in lines)

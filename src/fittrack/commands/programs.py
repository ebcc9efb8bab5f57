"""Program management commands."""

import click

from ..db import ProgramRepository
from ..services import CascadeDeleteExecutor
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    get_store,
    user_option,
)


@click.group()
@click.pass_context
def programs(ctx):
    """Manage training programs.

    Programs are never hard-deleted; archiving hides them from listings and
    from analytics across all programs.
    """
    ensure_initialized(ctx)


@programs.command(name="list")
@user_option
@click.option("--all", "-a", "show_all", is_flag=True, help="Include archived programs")
@async_command
async def list_programs(user_id: str, show_all: bool):
    """List programs, newest first."""
    repo = ProgramRepository(get_store())

    found = await (repo.list_all(user_id) if show_all else repo.list_active(user_id))

    if not found:
        echo_info("No programs found. Create a demo one with 'fittrack seed'")
        return

    headers = ["ID", "Name", "Archived", "Created"]
    rows = []

    for prog in found:
        created = prog.created_at.strftime("%Y-%m-%d") if prog.created_at else "N/A"
        rows.append([
            prog.id,
            prog.name[:30] + "..." if len(prog.name) > 30 else prog.name,
            "yes" if prog.is_archived else "",
            created,
        ])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(found)} program(s)")


@programs.command()
@click.argument("program_id")
@user_option
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def archive(ctx, program_id: str, user_id: str, force: bool):
    """Archive a program."""
    store = get_store()
    program = await ProgramRepository(store).get(user_id, program_id)
    if not program:
        echo_error(f"Program {program_id} not found")
        ctx.exit(1)

    if not force:
        click.echo(f"Program: {program.name}")
        if not click.confirm("Are you sure you want to archive this program?"):
            echo_info("Cancelled")
            return

    await CascadeDeleteExecutor(store).archive_program(user_id, program_id)
    echo_success(f"Program {program_id} archived")

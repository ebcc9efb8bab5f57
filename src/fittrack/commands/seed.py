"""Demo data command."""

import click

from ..db import seed_demo_program
from .base import async_command, echo_success, ensure_initialized, get_store, user_option


@click.command()
@user_option
@click.option("--weeks", "-w", default=4, type=click.IntRange(1, 52), help="Weeks of history")
@click.pass_context
@async_command
async def seed(ctx, user_id: str, weeks: int):
    """Create a demo program with backdated workouts and sets."""
    ensure_initialized(ctx)

    program_id = await seed_demo_program(get_store(), user_id, weeks=weeks)
    echo_success(f"Demo program {program_id} created for user '{user_id}' ({weeks} weeks)")

"""Cascade delete commands."""

from collections.abc import Awaitable, Callable

import click

from ..errors import PartialCascadeDeleteError, StoreError
from ..models import CascadeDeleteCounts, CascadeDeleteResult
from ..services import CascadeCountEngine, CascadeDeleteExecutor
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    get_store,
    user_option,
)


@click.group()
@click.pass_context
def delete(ctx):
    """Delete a week, workout or exercise with everything beneath it.

    Shows what would be removed and asks for confirmation first.
    """
    ensure_initialized(ctx)


async def _run(
    ctx: click.Context,
    label: str,
    counts: CascadeDeleteCounts,
    force: bool,
    action: Callable[[], Awaitable[CascadeDeleteResult]],
) -> None:
    if counts.has_items:
        click.echo(f"Deleting this {label} will also delete {counts.get_summary()}.")
    else:
        click.echo(f"This {label} has nothing beneath it.")

    if not force and not click.confirm(f"Are you sure you want to delete this {label}?"):
        echo_info("Cancelled")
        return

    try:
        result = await action()
    except PartialCascadeDeleteError as e:
        echo_error(str(e))
        ctx.exit(1)
    except StoreError as e:
        echo_error(f"Nothing was deleted: {e}")
        ctx.exit(1)

    if result.deleted_documents == 0:
        echo_warning(f"Nothing found at {result.target}")
    else:
        echo_success(
            f"Deleted {result.deleted_documents} document(s) in {result.batches} batch(es)"
        )


@delete.command()
@click.argument("program_id")
@click.argument("week_id")
@user_option
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def week(ctx, program_id: str, week_id: str, user_id: str, force: bool):
    """Delete a week."""
    store = get_store()
    counts = await CascadeCountEngine(store).get_cascade_delete_counts(
        user_id, program_id, week_id
    )
    await _run(
        ctx,
        "week",
        counts,
        force,
        lambda: CascadeDeleteExecutor(store).delete_week(user_id, program_id, week_id),
    )


@delete.command()
@click.argument("program_id")
@click.argument("week_id")
@click.argument("workout_id")
@user_option
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def workout(ctx, program_id: str, week_id: str, workout_id: str, user_id: str, force: bool):
    """Delete a workout."""
    store = get_store()
    counts = await CascadeCountEngine(store).get_cascade_delete_counts(
        user_id, program_id, week_id, workout_id=workout_id
    )
    await _run(
        ctx,
        "workout",
        counts,
        force,
        lambda: CascadeDeleteExecutor(store).delete_workout(
            user_id, program_id, week_id, workout_id
        ),
    )


@delete.command()
@click.argument("program_id")
@click.argument("week_id")
@click.argument("workout_id")
@click.argument("exercise_id")
@user_option
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def exercise(
    ctx,
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
    user_id: str,
    force: bool,
):
    """Delete an exercise."""
    store = get_store()
    counts = await CascadeCountEngine(store).get_cascade_delete_counts(
        user_id, program_id, week_id, workout_id=workout_id, exercise_id=exercise_id
    )
    await _run(
        ctx,
        "exercise",
        counts,
        force,
        lambda: CascadeDeleteExecutor(store).delete_exercise(
            user_id, program_id, week_id, workout_id, exercise_id
        ),
    )

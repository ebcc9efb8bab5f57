"""Analytics commands."""

import calendar
from datetime import date

import click

from ..models import DateRange, ExerciseType, HeatmapIntensity
from ..services import AnalyticsService
from .base import async_command, echo_info, ensure_initialized, format_table, get_store, user_option

PERIODS = {
    "week": DateRange.this_week,
    "month": DateRange.this_month,
    "year": DateRange.this_year,
    "30d": DateRange.last_30_days,
}

# One character per intensity band for the month grid
INTENSITY_MARKS = {
    HeatmapIntensity.NONE: ".",
    HeatmapIntensity.LOW: "-",
    HeatmapIntensity.MEDIUM: "+",
    HeatmapIntensity.HIGH: "*",
    HeatmapIntensity.VERY_HIGH: "#",
}

program_option = click.option(
    "--program", "-p", "program_id", default=None, help="Limit to one program"
)


@click.group()
@click.pass_context
def analytics(ctx):
    """Training statistics, heatmaps and personal records."""
    ensure_initialized(ctx)


@analytics.command()
@user_option
@program_option
@click.option(
    "--period",
    type=click.Choice(list(PERIODS)),
    default="month",
    show_default=True,
    help="Period to summarize",
)
@async_command
async def summary(user_id: str, program_id: str | None, period: str):
    """Show key statistics for a period."""
    date_range = PERIODS[period]()
    stats = await AnalyticsService(get_store()).compute_key_statistics(
        user_id, date_range, program_id
    )

    click.echo()
    click.echo(
        f"{date_range.start:%Y-%m-%d} to {date_range.end:%Y-%m-%d}"
        + (f" (program {program_id})" if program_id else " (all programs)")
    )
    click.echo("-" * 40)
    click.echo(f"Workouts:          {stats['total_workouts']}")
    click.echo(f"Sets:              {stats['total_sets']}")
    click.echo(f"Volume:            {stats['total_volume']:.0f}")
    click.echo(f"Avg duration:      {stats['average_duration']:.1f} min")
    click.echo(f"New PRs:           {stats['new_prs']}")
    click.echo(f"Most used type:    {stats['most_used_exercise_type']}")
    click.echo(f"Completion:        {stats['completion_percentage']:.0f}%")
    click.echo(f"Workouts per week: {stats['workouts_per_week']:.1f}")


@analytics.command()
@user_option
@program_option
@click.option("--year", "-y", type=int, default=None, help="Year (default: current)")
@async_command
async def heatmap(user_id: str, program_id: str | None, year: int | None):
    """Show checked sets per month and streaks for a year."""
    year = year or date.today().year
    data = await AnalyticsService(get_store()).generate_set_based_heatmap_data(
        user_id, DateRange.for_year(year), program_id
    )

    rows = []
    for month in range(1, 13):
        days = [d for d in data.daily_set_counts if d.month == month]
        rows.append([
            calendar.month_abbr[month],
            str(sum(data.daily_set_counts[d] for d in days)),
            str(len(days)),
        ])

    click.echo()
    click.echo(format_table(["Month", "Sets", "Active days"], rows))
    click.echo()
    click.echo(f"Total sets: {data.total_sets}")
    click.echo(f"Current streak: {data.current_streak} day(s)")
    click.echo(f"Longest streak: {data.longest_streak} day(s)")


@analytics.command()
@user_option
@program_option
@click.option("--year", "-y", type=int, default=None, help="Year (default: current)")
@click.option("--month", "-m", type=click.IntRange(1, 12), default=None, help="Month (default: current)")
@async_command
async def month(user_id: str, program_id: str | None, year: int | None, month: int | None):
    """Show a calendar of checked sets for one month."""
    today = date.today()
    year = year or today.year
    month = month or today.month
    data = await AnalyticsService(get_store()).get_month_heatmap_data(
        user_id, year, month, program_id
    )

    click.echo()
    click.echo(f"{calendar.month_name[month]} {year}".center(28))
    click.echo(" Mo  Tu  We  Th  Fr  Sa  Su")
    for week in calendar.monthcalendar(year, month):
        cells = []
        for day in week:
            if day == 0:
                cells.append("    ")
                continue
            intensity = HeatmapIntensity.from_count(data.get_set_count_for_day(day))
            cells.append(f"{day:>3}{INTENSITY_MARKS[intensity]}")
        click.echo("".join(cells).rstrip())
    click.echo()
    click.echo(
        "  ".join(f"{mark} {level.display_name}" for level, mark in INTENSITY_MARKS.items())
    )
    click.echo(f"Total sets: {data.total_sets}")


@analytics.command()
@user_option
@program_option
@click.option("--limit", "-n", type=int, default=10, show_default=True, help="Records to show")
@click.option(
    "--type",
    "exercise_type",
    type=click.Choice([t.value for t in ExerciseType]),
    default=None,
    help="Only this exercise type",
)
@async_command
async def records(user_id: str, program_id: str | None, limit: int, exercise_type: str | None):
    """List recent personal records."""
    prs = await AnalyticsService(get_store()).get_personal_records(
        user_id,
        limit=limit,
        exercise_type=ExerciseType(exercise_type) if exercise_type else None,
        program_id=program_id,
    )

    if not prs:
        echo_info("No personal records yet")
        return

    rows = [
        [
            pr.achieved_at.strftime("%Y-%m-%d"),
            pr.exercise_name,
            pr.pr_type.display_name,
            pr.display_value,
            pr.improvement_string,
        ]
        for pr in prs
    ]
    click.echo()
    click.echo(format_table(["Date", "Exercise", "Record", "Value", "Change"], rows))

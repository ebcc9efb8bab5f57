"""Analytics routes: rollups, heatmaps and personal records."""

from datetime import date, datetime, time
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Path, status

from ...models import DateRange, ExerciseType
from ...services import AnalyticsService
from ..deps import get_analytics

router = APIRouter(tags=["analytics"])

PREFIX = "/users/{user_id}/analytics"

PERIODS = {
    "week": DateRange.this_week,
    "month": DateRange.this_month,
    "year": DateRange.this_year,
    "30d": DateRange.last_30_days,
}


def _date_range(
    period: Literal["week", "month", "year", "30d"] = "month",
    start: date | None = None,
    end: date | None = None,
) -> DateRange:
    """An explicit start/end pair wins over a named period."""
    if start is None and end is None:
        return PERIODS[period]()
    if start is None or end is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="start and end must be given together",
        )
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end is before start",
        )
    return DateRange(datetime.combine(start, time.min), datetime.combine(end, time.max))


@router.get(PREFIX + "/summary")
async def workout_summary(
    user_id: str,
    program_id: str | None = None,
    date_range: DateRange = Depends(_date_range),
    analytics: AnalyticsService = Depends(get_analytics),
):
    result = await analytics.compute_workout_analytics(user_id, date_range, program_id)
    return result.to_dict()


@router.get(PREFIX + "/statistics")
async def key_statistics(
    user_id: str,
    program_id: str | None = None,
    date_range: DateRange = Depends(_date_range),
    analytics: AnalyticsService = Depends(get_analytics),
):
    stats = await analytics.compute_key_statistics(user_id, date_range, program_id)
    return {"date_range": date_range.to_dict(), "program_id": program_id, **stats}


@router.get(PREFIX + "/heatmap")
async def set_heatmap(
    user_id: str,
    program_id: str | None = None,
    date_range: DateRange = Depends(_date_range),
    analytics: AnalyticsService = Depends(get_analytics),
):
    data = await analytics.generate_set_based_heatmap_data(user_id, date_range, program_id)
    return data.to_dict()


@router.get(PREFIX + "/heatmap/{year}")
async def workout_heatmap(
    user_id: str,
    year: int = Path(ge=1970, le=9999),
    program_id: str | None = None,
    analytics: AnalyticsService = Depends(get_analytics),
):
    """Workouts per day over a calendar year."""
    data = await analytics.generate_heatmap_data(user_id, year, program_id)
    return data.to_dict()


@router.get(PREFIX + "/heatmap/{year}/{month}")
async def month_heatmap(
    user_id: str,
    year: int = Path(ge=1970, le=9999),
    month: int = Path(ge=1, le=12),
    program_id: str | None = None,
    prefetch: bool = True,
    analytics: AnalyticsService = Depends(get_analytics),
):
    """Checked sets per day of one month; neighbouring months warm in the background."""
    data = await analytics.get_month_heatmap_data(user_id, year, month, program_id)
    if prefetch:
        analytics.prefetch_adjacent_months(user_id, year, month, program_id)
    return {**data.to_dict(), "days_in_month": data.days_in_month}


@router.get(PREFIX + "/records")
async def personal_records(
    user_id: str,
    limit: int | None = None,
    exercise_type: ExerciseType | None = None,
    program_id: str | None = None,
    analytics: AnalyticsService = Depends(get_analytics),
):
    prs = await analytics.get_personal_records(
        user_id, limit=limit, exercise_type=exercise_type, program_id=program_id
    )
    return [pr.to_dict() for pr in prs]


@router.delete("/analytics/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(analytics: AnalyticsService = Depends(get_analytics)):
    """Drop every cached analytics result."""
    analytics.clear_cache()

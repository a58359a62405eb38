"""
Usage stats router.

Endpoints:
- GET /api/stats - Entries created today against the daily limit
"""

from datetime import UTC, datetime, timedelta

from fastapi import APIRouter, Depends

from api.dependencies import get_prompt_repository
from api.schemas.stats import StatsResponse
from core.config import Settings, get_settings
from database.repositories import PromptRepository

router = APIRouter(tags=["stats"])


def day_window(now: datetime) -> tuple[datetime, datetime]:
    """Start of the current local day and of the next one."""
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def format_reset_time(remaining: timedelta) -> str:
    """Format a duration as "<hours>h <minutes>m"."""
    total_minutes = int(remaining.total_seconds()) // 60
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    repo: PromptRepository = Depends(get_prompt_repository),
    settings: Settings = Depends(get_settings),
) -> StatsResponse:
    """How many images were generated today and when the counter resets."""
    now = datetime.now().astimezone()
    start, reset_at = day_window(now)

    count = await repo.count_since(start.astimezone(UTC))

    return StatsResponse(
        daily_count=count,
        daily_limit=settings.daily_limit,
        remaining=max(settings.daily_limit - count, 0),
        reset_time=format_reset_time(reset_at - now),
    )

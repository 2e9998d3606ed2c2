"""Read-only aggregates behind the analytics dashboard."""

# Standard library imports
from datetime import UTC, date, datetime, time, timedelta

# Third-party imports
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from civicpulse.core.exceptions import BackendError, ValidationFailedError
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.models.issues.issue import Issue, IssueCategory
from civicpulse.schemas.issues.analytics_schemas import CategoryCount, DailyCount, MapIssue
from civicpulse.schemas.issues.issue_schemas import IssueResponse
from civicpulse.services.issues.issue_services import to_response

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


async def get_category_distribution(db: AsyncSession) -> list[CategoryCount]:
    """Issue count per category, every category listed in declaration order."""
    try:
        result = await db.execute(select(Issue.category, func.count(Issue.id)).group_by(Issue.category))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching category distribution: {e}")
        raise BackendError("Could not load category distribution") from e

    counts = {IssueCategory(category): count for category, count in result.all()}
    return [CategoryCount(category=category, count=counts.get(category, 0)) for category in IssueCategory]


def empty_window(days: int, today: date) -> list[DailyCount]:
    return [DailyCount(date=today - timedelta(days=offset), count=0) for offset in range(days - 1, -1, -1)]


async def get_temporal_analysis(db: AsyncSession, days: int = 7, today: date | None = None) -> list[DailyCount]:
    """
    Issues created per UTC day over the trailing ``days`` window (today included),
    oldest day first.
    """
    if days < 1:
        raise ValidationFailedError("days must be at least 1")

    today = today or datetime.now(UTC).date()
    window = empty_window(days, today)
    start = datetime.combine(window[0].date, time.min, tzinfo=UTC)

    try:
        result = await db.execute(select(Issue.created_at).where(Issue.created_at >= start))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching temporal analysis: {e}")
        raise BackendError("Could not load temporal analysis") from e

    by_date = {entry.date: entry for entry in window}
    for (created_at,) in result.all():
        entry = by_date.get(_as_utc(created_at).date())
        if entry is not None:
            entry.count += 1
    return window


async def get_top_voted_issues(db: AsyncSession, limit: int = 10) -> list[IssueResponse]:
    try:
        result = await db.execute(
            select(Issue).order_by(Issue.votes.desc(), Issue.created_at.desc()).limit(limit)
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching top voted issues: {e}")
        raise BackendError("Could not load top voted issues") from e
    return [to_response(issue) for issue in result.scalars().all()]


def to_map_issue(issue: IssueResponse) -> MapIssue:
    return MapIssue(
        id=issue.id,
        title=issue.title,
        category=issue.category,
        status=issue.status,
        votes=issue.votes,
        lat=issue.latitude,
        lng=issue.longitude,
    )
